"""glossmark - inline tooltip annotations for rich-text documents.

Annotate ranges of an editable document with tooltip markers, carry the
selection across asynchronous dialogs, and export the result as Markdown.
"""

import logging
import os
import subprocess
from logging.handlers import RotatingFileHandler

__version__ = "0.1.0"


def get_git_commit() -> str:
    """Get the short git commit hash, or 'unknown' if not in a git repo."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            capture_output=True,
            text=True,
            check=True,
            timeout=5,
        )
        return result.stdout.strip()
    except (
        subprocess.CalledProcessError,
        FileNotFoundError,
        subprocess.TimeoutExpired,
    ):
        return "unknown"


def get_version_string() -> str:
    """Get version string with git commit for dev builds."""
    commit = get_git_commit()
    return f"{__version__}+{commit}"


def _setup_logging(console_level: int | None = None) -> None:
    """Configure logging to both console and rotating file.

    Args:
        console_level: Console handler level; defaults to the configured
            ``APP__LOG_LEVEL``.
    """
    from glossmark.config import get_settings

    app_config = get_settings().app
    log_dir = app_config.log_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"glossmark.{os.getpid()}.log"

    # Root logger config
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # File handler - detailed logging with rotation (10MB, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(file_formatter)

    # Console handler - less verbose, on stderr so stdout stays clean for output
    if console_level is None:
        console_level = logging.getLevelName(app_config.log_level.upper())
    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_formatter = logging.Formatter("%(levelname)s: %(message)s")
    console_handler.setFormatter(console_formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.debug("Logging configured. Log file: %s", log_file.absolute())
