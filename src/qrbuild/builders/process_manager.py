'''
Termination of build tool processes and their children.
'''
import os
from typing import Iterable, List, Set

import psutil

from ..utils.logging import setup_logger

logger = setup_logger()


class ProcessManager:
    """Stops process trees and lingering build daemons."""

    def __init__(self, kill_timeout: int = 5):
        self.kill_timeout = kill_timeout

    def _protected_pids(self) -> Set[int]:
        """Our own process and its ancestors must never be killed."""
        protected = {os.getpid()}
        try:
            for parent in psutil.Process(os.getpid()).parents():
                protected.add(parent.pid)
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            pass
        return protected

    def _terminate(self, processes: List[psutil.Process]) -> int:
        """Send SIGTERM, then SIGKILL to whatever survives the grace period."""
        signalled = []
        for process in processes:
            try:
                process.terminate()
                signalled.append(process)
            except psutil.NoSuchProcess:
                pass
            except psutil.AccessDenied:
                logger.warning("Not allowed to terminate process %s", process.pid)

        if not signalled:
            return 0

        gone, alive = psutil.wait_procs(signalled, timeout=self.kill_timeout)
        for process in alive:
            try:
                process.kill()
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                pass

        return len(gone) + len(alive)

    def terminate_children(self, pid: int) -> int:
        """Stop every descendant of a process, leaving the process itself alone.

        The caller owns the root process and reaps it; only the descendants are
        signalled and waited on here.
        """
        try:
            children = psutil.Process(pid).children(recursive=True)
        except psutil.NoSuchProcess:
            return 0

        count = self._terminate(children)
        logger.debug("Terminated %d child process(es) of %s", count, pid)
        return count

    def kill_matching(self, patterns: Iterable[str]) -> int:
        """Kill processes whose command line contains any of the patterns."""
        patterns = [p for p in patterns if p]
        if not patterns:
            return 0

        protected = self._protected_pids()
        matches = []

        for process in psutil.process_iter(["pid", "name", "cmdline"]):
            if process.info["pid"] in protected:
                continue
            cmdline = " ".join(process.info.get("cmdline") or [])
            haystack = cmdline or (process.info.get("name") or "")
            if any(pattern in haystack for pattern in patterns):
                matches.append(process)

        if not matches:
            logger.info("No %s processes found to kill", "/".join(patterns))
            return 0

        count = self._terminate(matches)
        logger.info("Killed %d lingering process(es)", count)
        return count
