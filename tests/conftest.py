import asyncio
import os
import stat
import psutil
import pytest
import tempfile
from pathlib import Path
from typing import Generator, List

from qrbuild.config.settings import Settings

FAKE_GRADLEW = """#!/bin/sh
cd "$(dirname "$0")"
echo "$*" >> invocations.log
for arg in "$@"; do
  case " ${FAKE_GRADLE_FAIL:-} " in
    *" $arg "*)
      echo "FAILURE: Task '$arg' failed" >&2
      exit 1
      ;;
  esac
done
for arg in "$@"; do
  case "$arg" in
    clean)
      rm -rf app/build qrcode-sdk/build
      ;;
    assembleDebug)
      mkdir -p app/build/outputs/apk/debug
      touch app/build/outputs/apk/debug/app-debug.apk
      ;;
    assembleRelease)
      mkdir -p app/build/outputs/apk/release
      touch app/build/outputs/apk/release/app-release.apk
      if [ -z "${FAKE_GRADLE_NO_AAR:-}" ]; then
        mkdir -p qrcode-sdk/build/outputs/aar
        touch qrcode-sdk/build/outputs/aar/qrcode-sdk-release.aar
      fi
      ;;
  esac
done
echo "BUILD SUCCESSFUL"
"""

HANGING_GRADLEW = """#!/bin/sh
cd "$(dirname "$0")"
echo "$*" >> invocations.log
sleep 30 &
echo $! > child.pid
wait
"""

FAKE_JAVA = """#!/bin/sh
echo 'openjdk version "17.0.9" 2023-10-17' >&2
echo 'OpenJDK Runtime Environment (build 17.0.9+9)' >&2
"""


def write_executable(path: Path, content: str) -> Path:
    path.write_text(content)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def read_invocations(project_dir: Path) -> List[str]:
    """Gradle wrapper invocations recorded by the fake gradlew, in order."""
    log = project_dir / "invocations.log"
    if not log.exists():
        return []
    return log.read_text().splitlines()


def process_gone(pid: int) -> bool:
    """True once a process has exited (an unreaped zombie counts as exited)."""
    try:
        return psutil.Process(pid).status() == psutil.STATUS_ZOMBIE
    except psutil.NoSuchProcess:
        return True


async def wait_for_file(path: Path, timeout: float = 10.0) -> str:
    """Poll until a file exists with content, then return that content."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while loop.time() < deadline:
        if path.exists() and path.read_text().strip():
            return path.read_text().strip()
        await asyncio.sleep(0.05)
    raise AssertionError(f"{path} was not written within {timeout} seconds")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def android_project(temp_dir: Path) -> Path:
    """An Android project directory with a fake Gradle wrapper."""
    project_dir = temp_dir / "sample-app"
    project_dir.mkdir()
    write_executable(project_dir / "gradlew", FAKE_GRADLEW)
    return project_dir


@pytest.fixture
def fake_java(temp_dir: Path, monkeypatch) -> Path:
    """Put a fake `java` launcher first on PATH."""
    bin_dir = temp_dir / "bin"
    bin_dir.mkdir()
    java = write_executable(bin_dir / "java", FAKE_JAVA)
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    return java


@pytest.fixture
def settings(android_project: Path) -> Settings:
    return Settings(project_dir=android_project)


@pytest.fixture
def built_artifacts(settings: Settings) -> List[Path]:
    """Create every expected build output."""
    paths = []
    for artifact in settings.artifacts:
        path = settings.resolve(artifact.path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch()
        paths.append(path)
    return paths
