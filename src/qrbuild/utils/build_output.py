from pathlib import Path
from typing import Iterable, List, Tuple

from ..config.settings import ArtifactSpec, Settings
from ..utils.logging import log_success, setup_logger

logger = setup_logger()


def verify_artifacts(project_dir: Path, artifacts: Iterable[ArtifactSpec]) -> List[ArtifactSpec]:
    """Check expected build outputs exist and return the missing ones."""
    missing = []
    for artifact in artifacts:
        path = artifact.path if artifact.path.is_absolute() else project_dir / artifact.path
        if path.is_file():
            log_success(logger, f"{artifact.label} created")
        else:
            logger.error(f"{artifact.label} not found: {artifact.path}")
            missing.append(artifact)
    return missing


def summary_lines(settings: Settings, warnings: Iterable[str] = ()) -> List[Tuple[str, str]]:
    """Summary of build outputs as (section, line) pairs."""
    lines = [("Build artifacts:", f"  - {a.label}: {a.path}") for a in settings.artifacts]
    lines += [
        ("Test reports:", f"  - {label}: {path}/")
        for label, path in settings.test_reports.items()
    ]
    lines += [("Warnings:", f"  - {warning}") for warning in warnings]
    return lines


def log_summary(settings: Settings, warnings: Iterable[str] = ()) -> None:
    """Print where the build outputs ended up."""
    section = None
    for heading, line in summary_lines(settings, warnings):
        if heading != section:
            if heading == "Warnings:":
                logger.warning(heading)
            else:
                logger.info(heading)
            section = heading
        print(line)
