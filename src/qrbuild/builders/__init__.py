from .gradle_runner import GradleRunner
from .process_manager import ProcessManager
from .step_result import BuildStepResult, StepStatus

__all__ = ['GradleRunner', 'ProcessManager', 'BuildStepResult', 'StepStatus']
