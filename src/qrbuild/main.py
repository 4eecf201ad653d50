"""
Main entry point for the QR Code SDK build orchestrator.
"""
import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from .config.settings import Settings
from .orchestrator import BuildOrchestrator
from .utils.logging import setup_logger

logger = setup_logger()


async def run_pipeline(settings: Settings, publish: bool = False, fresh: bool = False) -> int:
    """Execute the build pipeline and return its exit code."""
    logger.debug(f"Project directory: {settings.project_dir.resolve()}")
    async with BuildOrchestrator(settings=settings, publish=publish, fresh=fresh) as orchestrator:
        return await orchestrator.run()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qrbuild",
        description="Build, test and optionally publish the QR Code SDK",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument(
        "--publish",
        action="store_true",
        help="Publish the SDK to the Maven repository after a successful build"
    )

    parser.add_argument(
        "--fresh",
        action="store_true",
        help="Kill stale Java/Gradle processes and stop the daemon before building"
    )

    parser.add_argument(
        "--project-dir",
        type=Path,
        default=None,
        help="Android project directory containing gradlew (default: QRBUILD_PROJECT_DIR or cwd)"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        settings = Settings()
        if args.project_dir is not None:
            settings.project_dir = args.project_dir

        exit_code = asyncio.run(run_pipeline(
            settings=settings,
            publish=args.publish,
            fresh=args.fresh
        ))

        sys.exit(exit_code)

    except KeyboardInterrupt:
        print("\nBuild cancelled by user")
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Unexpected error: {str(e)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
