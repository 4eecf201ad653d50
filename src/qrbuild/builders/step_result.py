from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class StepStatus(str, Enum):
    """Outcome of a pipeline step."""
    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"


@dataclass
class BuildStepResult:
    """Result of build step."""
    step: str
    status: StepStatus
    error: Optional[str] = None
    duration: float = 0.0
    info: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.status != StepStatus.FAILURE
