# workflows/steps.py
"""
Step tables for the build pipelines.

Each pipeline is an ordered list of BuildStep descriptors. The workflow
iterates the table; a step's on_failure policy decides whether its failure
aborts the run or only produces a warning.
"""
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from ..config.settings import Settings


class FailurePolicy(str, Enum):
    ABORT = "abort"
    WARN = "warn"


class StepKind(str, Enum):
    GRADLE = "gradle"
    VERIFY_ARTIFACTS = "verify_artifacts"
    KILL_PROCESSES = "kill_processes"


@dataclass(frozen=True)
class BuildStep:
    """Declarative description of one pipeline stage."""
    name: str
    description: str
    kind: StepKind = StepKind.GRADLE
    # One tuple of Gradle arguments per wrapper invocation
    commands: Tuple[Tuple[str, ...], ...] = ()
    on_failure: FailurePolicy = FailurePolicy.ABORT
    success_message: Optional[str] = None
    failure_message: Optional[str] = None
    # Step is skipped unless this project-relative path exists
    requires_path: Optional[Path] = None
    continue_on_failure: bool = False

    @property
    def fatal(self) -> bool:
        return self.on_failure == FailurePolicy.ABORT


def build_and_test_steps(settings: Settings, publish: bool = False) -> List[BuildStep]:
    """Clean, test, lint, assemble, document, verify and optionally publish."""
    sdk, app = settings.sdk_module, settings.app_module

    steps = [
        BuildStep(
            name="clean",
            description="Cleaning previous builds...",
            commands=(("clean",),),
        ),
        BuildStep(
            name="sdk-unit-tests",
            description="Running SDK unit tests...",
            commands=((settings.module_task(sdk, "testDebugUnitTest"),),),
            success_message="SDK tests passed",
            failure_message="SDK tests failed",
        ),
        BuildStep(
            name="app-unit-tests",
            description="Running app unit tests...",
            commands=((settings.module_task(app, "testDebugUnitTest"),),),
            success_message="App tests passed",
            failure_message="App tests failed",
        ),
        BuildStep(
            name="lint",
            description="Running lint checks...",
            commands=((settings.lint_task,),),
            on_failure=FailurePolicy.WARN,
            success_message="Lint checks passed",
            failure_message="Lint checks found issues",
        ),
        BuildStep(
            name="assemble-debug",
            description="Building debug version...",
            commands=(("assembleDebug",),),
            success_message="Debug build completed",
            failure_message="Debug build failed",
        ),
        BuildStep(
            name="assemble-release",
            description="Building release version...",
            commands=(("assembleRelease",),),
            success_message="Release build completed",
            failure_message="Release build failed",
        ),
        BuildStep(
            name="docs",
            description="Generating SDK documentation...",
            commands=((settings.module_task(sdk, settings.docs_task),),),
            on_failure=FailurePolicy.WARN,
            success_message="Documentation generated",
            failure_message="Documentation generation failed",
        ),
        BuildStep(
            name="verify-artifacts",
            description="Checking build artifacts...",
            kind=StepKind.VERIFY_ARTIFACTS,
            failure_message="Build artifacts missing",
        ),
        BuildStep(
            name="integration-tests",
            description="Running integration tests...",
            commands=((settings.module_task(app, settings.integration_test_task),),),
            on_failure=FailurePolicy.WARN,
            requires_path=settings.integration_test_dir,
            success_message="Integration tests passed",
            failure_message="Integration tests failed or no device connected",
        ),
        BuildStep(
            name="test-reports",
            description="Generating test reports...",
            commands=(
                (settings.module_task(sdk, "testDebugUnitTest"),),
                (settings.module_task(app, "testDebugUnitTest"),),
            ),
            continue_on_failure=True,
            success_message="Test reports generated",
            failure_message="Test report generation failed! Build aborted",
        ),
    ]

    if publish:
        steps.append(BuildStep(
            name="publish",
            description="Publishing to Maven repository...",
            commands=((settings.module_task(sdk, settings.publish_task),),),
            success_message="Published to Maven repository",
            failure_message="Failed to publish to Maven repository",
        ))

    return steps


def fresh_build_steps(settings: Settings) -> List[BuildStep]:
    """Kill stale build processes, stop the daemon, clean, test, then build."""
    return [
        BuildStep(
            name="kill-processes",
            description="Killing Java processes...",
            kind=StepKind.KILL_PROCESSES,
            on_failure=FailurePolicy.WARN,
        ),
        BuildStep(
            name="stop-daemon",
            description="Stopping Gradle daemon...",
            commands=(("--stop",),),
            on_failure=FailurePolicy.WARN,
            failure_message="Could not stop Gradle daemon",
        ),
        BuildStep(
            name="clean",
            description="Cleaning build artifacts...",
            commands=(("clean",),),
            on_failure=FailurePolicy.WARN,
            failure_message="Clean failed",
        ),
        BuildStep(
            name="sdk-unit-tests",
            description="Running unit tests (required before build)...",
            commands=((settings.module_task(settings.sdk_module, "testDebugUnitTest"),),),
            success_message="Tests passed! Proceeding with build...",
            failure_message="Tests failed! Build aborted",
        ),
        BuildStep(
            name="build",
            description="Running fresh build...",
            commands=(("build",),),
            success_message="Fresh build completed successfully!",
            failure_message="Build failed after clean start",
        ),
    ]
