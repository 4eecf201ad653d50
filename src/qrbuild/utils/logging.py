import logging
import os
import sys
from datetime import datetime
from pathlib import Path

# Between INFO and WARNING
SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

RED = "\033[0;31m"
GREEN = "\033[0;32m"
YELLOW = "\033[1;33m"
BLUE = "\033[0;34m"
NC = "\033[0m"


class StatusFormatter(logging.Formatter):
    """Console formatter printing build status labels like [INFO] or [ERROR]."""

    LEVEL_COLORS = {
        logging.DEBUG: "",
        logging.INFO: BLUE,
        SUCCESS: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: RED,
    }

    def __init__(self, use_color: bool = True):
        super().__init__("%(message)s")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        label = f"[{record.levelname}]"
        color = self.LEVEL_COLORS.get(record.levelno, "")
        if self.use_color and color:
            label = f"{color}{label}{NC}"
        return f"{label} {message}"


def _stream_supports_color(stream) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def setup_logger(log_dir: Path = Path("logs")) -> logging.Logger:
    """Set up logging configuration."""
    log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("qrbuild")
    logger.setLevel(logging.DEBUG)

    if logger.handlers:
        return logger

    # Debug file handler
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    debug_handler = logging.FileHandler(
        log_dir / f"debug_{timestamp}.log"
    )
    debug_handler.setLevel(logging.DEBUG)
    debug_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))

    # Status console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(
        StatusFormatter(use_color=_stream_supports_color(sys.stdout))
    )

    logger.addHandler(debug_handler)
    logger.addHandler(console_handler)

    return logger


def log_success(logger: logging.Logger, msg: str, *args) -> None:
    """Log a green [SUCCESS] status line."""
    logger.log(SUCCESS, msg, *args)
