from .build_orchestrator import BuildOrchestrator, PrerequisiteError, parse_java_version
from .state import PipelineState, PipelineStatus

__all__ = ['BuildOrchestrator', 'PrerequisiteError', 'parse_java_version', 'PipelineState', 'PipelineStatus']
