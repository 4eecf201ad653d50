# workflows/__init__.py
from .pipeline_workflow import FatalStepError, PipelineWorkflow
from .steps import BuildStep, FailurePolicy, StepKind, build_and_test_steps, fresh_build_steps

__all__ = [
    'FatalStepError', 'PipelineWorkflow', 'BuildStep', 'FailurePolicy', 'StepKind',
    'build_and_test_steps', 'fresh_build_steps'
]
