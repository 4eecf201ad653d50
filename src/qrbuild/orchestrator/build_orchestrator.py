import asyncio
import os
import re
import shutil
import subprocess
from typing import List, Optional

from langchain_core.runnables import RunnableSequence

from .state import PipelineState
from ..builders import GradleRunner, ProcessManager
from ..config.settings import Settings
from ..utils.build_output import log_summary
from ..utils.logging import log_success, setup_logger
from ..workflows import BuildStep, FatalStepError, PipelineWorkflow, build_and_test_steps, fresh_build_steps

logger = setup_logger()

JAVA_VERSION_PATTERN = re.compile(r'"([^"]+)"')


class PrerequisiteError(Exception):
    """Required tooling is missing before the pipeline can start."""
    pass


def parse_java_version(output: str) -> str:
    """Pull the quoted version out of the first line of `java -version`."""
    first_line = output.strip().splitlines()[0] if output.strip() else ""
    match = JAVA_VERSION_PATTERN.search(first_line)
    return match.group(1) if match else "unknown"


class BuildOrchestrator:
    """Checks prerequisites, then drives the build pipeline to completion or abort."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        publish: bool = False,
        fresh: bool = False,
        runner: Optional[GradleRunner] = None,
        process_manager: Optional[ProcessManager] = None
    ):
        self.settings = settings or Settings()
        self.publish = publish
        self.fresh = fresh

        if fresh and publish:
            logger.warning("--publish is ignored for fresh builds")
            self.publish = False

        self.state = PipelineState()
        self.process_manager = process_manager or ProcessManager(self.settings.kill_timeout)
        self.runner = runner or GradleRunner(
            project_dir=self.settings.project_dir,
            wrapper=self.settings.gradle_wrapper,
            step_timeout=self.settings.step_timeout,
            log_dir=self.settings.resolve(self.settings.build_log_dir),
            process_manager=self.process_manager
        )

        self.steps: List[BuildStep] = (
            fresh_build_steps(self.settings) if fresh
            else build_and_test_steps(self.settings, publish=self.publish)
        )
        self.workflow = PipelineWorkflow(
            steps=self.steps,
            runner=self.runner,
            settings=self.settings,
            state=self.state,
            process_manager=self.process_manager
        )
        self.pipeline_chain: Optional[RunnableSequence] = None

    def check_prerequisites(self) -> str:
        """Verify Java and the Gradle wrapper are available; return the Java version."""
        logger.info("Checking prerequisites...")

        java_path = shutil.which(self.settings.java_command)
        if not java_path:
            raise PrerequisiteError("Java is not installed")

        wrapper = self.settings.wrapper_path
        if not wrapper.is_file():
            raise PrerequisiteError(f"Gradle wrapper not found: {wrapper}")
        if os.name != 'nt' and not os.access(wrapper, os.X_OK):
            raise PrerequisiteError(f"Gradle wrapper is not executable: {wrapper}")

        try:
            completed = subprocess.run(
                [java_path, "-version"],
                capture_output=True,
                text=True,
                timeout=30
            )
            # java prints its version banner on stderr
            version = parse_java_version(completed.stderr or completed.stdout)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug(f"Could not query Java version: {e}")
            version = "unknown"

        logger.info(f"Java version: {version}")
        return version

    async def run(self) -> int:
        """Run the pipeline and return the process exit code."""
        if self.fresh:
            logger.info("Starting fresh build process...")
        else:
            logger.info("Starting QR Code SDK build and test process...")

        try:
            await asyncio.to_thread(self.check_prerequisites)
        except PrerequisiteError as e:
            logger.error(str(e))
            self.state.abort(step=None, error=str(e))
            return self.state.exit_code

        if self.pipeline_chain is None:
            self.pipeline_chain = self.workflow.setup()

        self.state.start()
        try:
            await self.pipeline_chain.ainvoke(self.state)
        except FatalStepError as e:
            self.state.abort(step=e.result.step, error=e.result.error)
            logger.error(f"Pipeline aborted at step '{e.result.step}'")
            return self.state.exit_code
        except (asyncio.CancelledError, KeyboardInterrupt):
            self.state.abort(step=self.state.current_step, error="Build cancelled")
            raise
        except Exception as e:
            self.state.abort(step=self.state.current_step, error=str(e))
            logger.exception(f"Pipeline failed unexpectedly at step '{self.state.failed_step}'")
            return self.state.exit_code

        self.state.complete()
        logger.info(f"Pipeline finished in {self.state.duration:.1f}s")
        if self.fresh:
            log_success(logger, "Fresh build process complete!")
            return self.state.exit_code

        print()
        log_success(logger, "Build and test process completed successfully!")
        print()
        log_summary(self.settings, self.state.warnings)
        print()
        log_success(logger, "All done!")
        return self.state.exit_code

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.runner.terminate()
