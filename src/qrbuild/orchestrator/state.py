from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from ..builders.step_result import BuildStepResult, StepStatus


class PipelineStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass
class PipelineState:
    """Tracks progress and outcome of a pipeline run."""
    status: PipelineStatus = PipelineStatus.PENDING
    current_step: Optional[str] = None
    results: List[BuildStepResult] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    failed_step: Optional[str] = None
    error: Optional[str] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    def start(self) -> None:
        self.status = PipelineStatus.RUNNING
        self.started_at = datetime.now()

    def begin_step(self, name: str) -> None:
        if self.status != PipelineStatus.RUNNING:
            raise RuntimeError(f"Cannot start step {name!r} while pipeline is {self.status.value}")
        self.current_step = name

    def record(self, result: BuildStepResult, warning: Optional[str] = None) -> None:
        """Store a step result; advisory failures also leave a warning."""
        self.results.append(result)
        if warning:
            self.warnings.append(warning)

    def abort(self, step: Optional[str], error: Optional[str]) -> None:
        self.status = PipelineStatus.ABORTED
        self.failed_step = step
        self.error = error
        self.current_step = None
        self.finished_at = datetime.now()

    def complete(self) -> None:
        self.status = PipelineStatus.COMPLETED
        self.current_step = None
        self.finished_at = datetime.now()

    @property
    def executed_steps(self) -> List[str]:
        """Names of steps that actually ran (skipped steps excluded)."""
        return [r.step for r in self.results if r.status != StepStatus.SKIPPED]

    @property
    def duration(self) -> float:
        if not self.started_at:
            return 0.0
        end = self.finished_at or datetime.now()
        return (end - self.started_at).total_seconds()

    @property
    def exit_code(self) -> int:
        return 0 if self.status == PipelineStatus.COMPLETED else 1
