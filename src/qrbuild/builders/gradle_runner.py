'''
Module that runs Gradle wrapper tasks for the Android project.
'''
import asyncio
from pathlib import Path
from typing import Tuple, Optional, Dict, Any, Sequence
from datetime import datetime

from .process_manager import ProcessManager
from ..utils.logging import setup_logger

logger = setup_logger()


class GradleRunner:
    """Handles invoking the Gradle wrapper."""

    def __init__(
        self,
        project_dir: Path,
        wrapper: str = "./gradlew",
        step_timeout: Optional[int] = None,
        log_dir: Optional[Path] = None,
        process_manager: Optional[ProcessManager] = None
    ):
        self.project_dir = project_dir
        self.wrapper = wrapper
        self.step_timeout = step_timeout
        self.log_dir = log_dir or project_dir / ".build-logs"
        self.process_manager = process_manager or ProcessManager()
        self.process: Optional[asyncio.subprocess.Process] = None
        self._invocation = 0

    @property
    def wrapper_path(self) -> Path:
        path = Path(self.wrapper)
        if not path.is_absolute():
            path = self.project_dir / path
        return path.resolve()

    async def _run_command(self, cmd: list[str], cwd: Path) -> Tuple[int, str, str]:
        """Run a command asynchronously."""
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=cwd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
            self.process = process

            try:
                stdout, stderr = await asyncio.wait_for(
                    process.communicate(),
                    timeout=self.step_timeout
                )
            except asyncio.TimeoutError as e:
                await self.terminate()
                raise TimeoutError(f"Command timed out after {self.step_timeout} seconds") from e
            except asyncio.CancelledError:
                await self.terminate()
                raise

            return (
                process.returncode,
                stdout.decode(errors="replace") if stdout else "",
                stderr.decode(errors="replace") if stderr else ""
            )

        except Exception as e:
            logger.error("Command execution failed: %s", e)
            raise

        finally:
            self.process = None

    async def terminate(self) -> None:
        """Stop the in-flight Gradle invocation, if any, and reap it."""
        process = self.process
        if process is None or process.returncode is not None:
            return

        logger.warning("Terminating running Gradle process %s", process.pid)
        # Descendants first, while they are still reachable through the wrapper.
        await asyncio.to_thread(self.process_manager.terminate_children, process.pid)

        try:
            process.terminate()
        except ProcessLookupError:
            pass
        try:
            await asyncio.wait_for(process.wait(), timeout=self.process_manager.kill_timeout)
        except asyncio.TimeoutError:
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()

    def _create_build_log(
        self,
        cmd: list[str],
        returncode: int,
        stdout: str,
        stderr: str,
        duration: float
    ) -> str:
        """Create a detailed build log."""
        return f"""
========== Build Log ==========
Command: {' '.join(cmd)}
Working Directory: {self.project_dir}
Exit Code: {returncode}
Duration: {duration:.2f} seconds
Timestamp: {datetime.now().isoformat()}

STDOUT:
{stdout}

STDERR:
{stderr}
==============================
"""

    def _write_build_log(self, tasks: Sequence[str], content: str) -> Path:
        self._invocation += 1
        self.log_dir.mkdir(parents=True, exist_ok=True)
        slug = "_".join(t.strip(":-").replace(":", "-") for t in tasks) or "gradle"
        log_file = self.log_dir / f"{self._invocation:02d}_{slug}.log"
        log_file.write_text(content)
        return log_file

    async def run_tasks(
        self,
        tasks: Sequence[str],
        continue_on_failure: bool = False
    ) -> Tuple[bool, Optional[str], Dict[str, Any]]:
        """Run Gradle tasks and return status, error if any, and run info."""
        cmd = [str(self.wrapper_path), *tasks]
        if continue_on_failure and "--continue" not in cmd:
            cmd.append("--continue")

        logger.debug("Running %s", " ".join(cmd))
        start_time = datetime.now()

        try:
            returncode, stdout, stderr = await self._run_command(cmd, self.project_dir)
        except (OSError, TimeoutError) as e:
            duration = (datetime.now() - start_time).total_seconds()
            return False, str(e), {
                "error": str(e),
                "command": cmd,
                "duration": duration
            }

        duration = (datetime.now() - start_time).total_seconds()

        build_log = self._create_build_log(
            cmd=cmd,
            returncode=returncode,
            stdout=stdout,
            stderr=stderr,
            duration=duration
        )
        try:
            log_file = str(self._write_build_log(tasks, build_log))
        except OSError as e:
            logger.warning("Could not write build log to %s: %s", self.log_dir, e)
            log_file = None

        run_info = {
            "success": returncode == 0,
            "exit_code": returncode,
            "command": cmd,
            "duration": duration,
            "log_file": log_file,
        }

        if returncode == 0:
            logger.debug("%s finished in %.2f seconds", " ".join(tasks), duration)
            return True, None, run_info

        error = stderr.strip() or stdout.strip() or f"Gradle exited with code {returncode}"
        return False, error, run_info

    async def stop_daemon(self) -> Tuple[bool, Optional[str], Dict[str, Any]]:
        """Stop the Gradle daemon."""
        return await self.run_tasks(["--stop"])
