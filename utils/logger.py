"""
Logging setup for the Social Rankings Service (loguru).

Usage:
    from utils import logger

    logger.info("[Refresh] top_users updated")
"""
import logging
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"

# Third-party loggers that report every request/job run at INFO
NOISY_LIBRARIES = ("httpx", "httpcore", "apscheduler.executors.default")

logger.remove()

_configured = False


def quiet_libraries(level: int = logging.WARNING) -> None:
    """Raise the stdlib log level of chatty dependencies."""
    for name in NOISY_LIBRARIES:
        logging.getLogger(name).setLevel(level)


def setup_logging(log_dir: Optional[Path] = None, log_level: str = "INFO", app_name: str = "app"):
    """
    Configure the stderr sink and, when `log_dir` is set, a daily file sink.

    Args:
        log_dir: Directory for `<app_name>_<date>.log` files; None disables files
        log_level: Minimum level for both sinks
        app_name: Log file prefix ("api", "scheduler")
    """
    global _configured

    if _configured:
        return

    logger.add(sys.stderr, level=log_level, format=CONSOLE_FORMAT)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_dir / f"{app_name}_{{time:YYYY-MM-DD}}.log",
            level=log_level,
            format=FILE_FORMAT,
            rotation="00:00",
            retention="14 days",
            compression="gz",
            encoding="utf-8",
        )
        logger.info(f"Logging to {log_dir}")

    if log_level.upper() != "DEBUG":
        quiet_libraries()

    _configured = True


def init_logging(app_name: str = "app"):
    """Configure logging from settings. Call once at startup."""
    from config import settings, ensure_directories

    ensure_directories(settings)
    setup_logging(log_dir=settings.LOG_DIR, log_level=settings.LOG_LEVEL, app_name=app_name)


__all__ = ["logger", "setup_logging", "init_logging", "quiet_libraries"]
