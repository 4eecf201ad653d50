# workflows/pipeline_workflow.py
from langchain_core.runnables import RunnableLambda, RunnableSequence
from typing import Any, Dict, List, Optional, Tuple
from datetime import datetime
from ..builders import BuildStepResult, GradleRunner, ProcessManager, StepStatus
from ..config.settings import Settings
from ..utils.build_output import verify_artifacts
from ..utils.logging import log_success, setup_logger
from .steps import BuildStep, StepKind

logger = setup_logger()


class FatalStepError(Exception):
    """A step whose failure aborts the pipeline has failed."""

    def __init__(self, result: BuildStepResult, message: Optional[str] = None):
        super().__init__(message or f"Step {result.step} failed")
        self.result = result


class PipelineWorkflow:
    """Runs a table of build steps in order, one at a time."""

    def __init__(
        self,
        steps: List[BuildStep],
        runner: GradleRunner,
        settings: Settings,
        state: "PipelineState",
        process_manager: Optional[ProcessManager] = None
    ):
        self.steps = steps
        self.runner = runner
        self.settings = settings
        self.state = state
        self.process_manager = process_manager or ProcessManager(settings.kill_timeout)

    def setup(self) -> RunnableSequence:
        return RunnableSequence(
            self._begin,
            *[self._step_runnable(step) for step in self.steps],
            self._finish
        )

    def _step_runnable(self, step: BuildStep) -> RunnableLambda:
        async def run_step(state: "PipelineState") -> "PipelineState":
            return await self._run_step(step, state)

        return RunnableLambda(run_step, name=step.name)

    async def _begin(self, state: "PipelineState") -> "PipelineState":
        logger.debug(f"Pipeline steps: {[step.name for step in self.steps]}")
        return state

    async def _finish(self, state: "PipelineState") -> "PipelineState":
        logger.debug(f"Pipeline finished {len(state.results)} steps")
        return state

    async def _run_step(self, step: BuildStep, state: "PipelineState") -> "PipelineState":
        """Run one step and apply its failure policy."""
        state.begin_step(step.name)

        if step.requires_path is not None and not self.settings.resolve(step.requires_path).exists():
            logger.info(f"Skipping {step.name}: {step.requires_path} not found")
            state.record(BuildStepResult(step=step.name, status=StepStatus.SKIPPED))
            return state

        logger.info(step.description)
        start_time = datetime.now()
        success, error, info = await self._execute(step)
        duration = (datetime.now() - start_time).total_seconds()

        result = BuildStepResult(
            step=step.name,
            status=StepStatus.SUCCESS if success else StepStatus.FAILURE,
            error=error,
            duration=duration,
            info=info
        )

        if result.success:
            if step.success_message:
                log_success(logger, step.success_message)
            state.record(result)
            return state

        message = step.failure_message or f"{step.name} failed"
        if error:
            logger.debug(f"{step.name} error output:\n{error}")
        for log_file in info.get("log_files", []):
            logger.info(f"  see {log_file}")

        if step.fatal:
            logger.error(message)
            state.record(result)
            raise FatalStepError(result, message)

        logger.warning(message)
        state.record(result, warning=message)
        return state

    async def _execute(self, step: BuildStep) -> Tuple[bool, Optional[str], Dict[str, Any]]:
        if step.kind == StepKind.GRADLE:
            return await self._run_gradle(step)

        if step.kind == StepKind.VERIFY_ARTIFACTS:
            missing = verify_artifacts(self.settings.project_dir, self.settings.artifacts)
            if missing:
                labels = ", ".join(a.label for a in missing)
                return False, f"Missing artifacts: {labels}", {
                    "missing": [str(a.path) for a in missing]
                }
            return True, None, {"missing": []}

        if step.kind == StepKind.KILL_PROCESSES:
            killed = self.process_manager.kill_matching(self.settings.kill_patterns)
            return True, None, {"killed": killed}

        raise ValueError(f"Unknown step kind: {step.kind}")

    async def _run_gradle(self, step: BuildStep) -> Tuple[bool, Optional[str], Dict[str, Any]]:
        """Run the step's invocations in order.

        A fatal step stops at its first failing invocation; an advisory step
        attempts every invocation and reports all failures together.
        """
        errors = []
        invocations = []

        for tasks in step.commands:
            success, error, info = await self.runner.run_tasks(
                list(tasks),
                continue_on_failure=step.continue_on_failure
            )
            invocations.append(info)
            if not success:
                errors.append(error or f"{' '.join(tasks)} failed")
                if step.fatal:
                    break

        info = {
            "invocations": invocations,
            "log_files": [i["log_file"] for i in invocations if i.get("log_file")],
        }
        if errors:
            return False, "\n".join(errors), info
        return True, None, info
