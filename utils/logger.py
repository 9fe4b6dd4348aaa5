# ============================================================
# DBPane - Terminal Database Browser
# utils/logger.py — loguru Sinks for the Browser
# ============================================================

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from config import app_config

FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {extra[app]} | {level:<8} | "
    "{module}:{function}:{line} | {message}"
)


def setup_logger(log_file: Optional[str] = None, level: Optional[str] = None):
    """
    Route logs to a rotating file under the app's name.
    Defaults come from `app_config` (APP_LOG_FILE, APP_LOG_LEVEL).
    """
    log_file = log_file or app_config.log_file
    level = level or app_config.log_level

    logger.remove()
    logger.configure(extra={"app": app_config.name})

    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logger.add(
        log_file,
        rotation="10 MB",
        retention="7 days",
        compression="zip",
        level=level,
        format=FILE_FORMAT,
        backtrace=True,
        # Query text and row values stay out of tracebacks
        diagnose=False,
        enqueue=True,
    )

    # The TUI owns the screen; only fatal problems go to the terminal.
    logger.add(
        sys.stderr,
        level="CRITICAL",
        format="{time:HH:mm:ss} | {extra[app]} | {level} | {message}",
    )

    logger.info(f"{app_config.name} v{app_config.version} logging to {log_file} at {level}")
    return logger
