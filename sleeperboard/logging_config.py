"""Logging for the scoreboard: quiet console on stderr, optional session log file."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

# HTTP client loggers that report every poll at INFO
CHATTY_LOGGERS = ('httpx', 'httpcore')

DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
CONSOLE_FORMAT = '%(levelname)s: %(message)s'


def session_log_path(log_dir: Path, started: Optional[datetime] = None) -> Path:
    """One file per dashboard session, named by start time."""
    started = started or datetime.now()
    return log_dir / f'sleeperboard_{started.strftime("%Y%m%d_%H%M%S")}.log'


def setup_logging(
    verbose: bool = False,
    log_dir: Optional[Path] = None,
    quiet: Iterable[str] = CHATTY_LOGGERS,
) -> logging.Logger:
    """
    Configure the 'sleeperboard' logger.

    Log records go to stderr; stdout carries the scoreboard. HTTP client
    loggers are held at WARNING unless ``verbose`` is set.

    Args:
        verbose: DEBUG level for our logger and the HTTP client
        log_dir: Also write a detailed session log under this directory
        quiet: Third-party loggers to hold at WARNING when not verbose

    Returns:
        Configured 'sleeperboard' logger

    Example:
        from sleeperboard.logging_config import setup_logging
        logger = setup_logging(verbose=True)
        logger.debug("Starting dashboard")
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger('sleeperboard')
    logger.setLevel(level)

    # Clear any existing handlers
    logger.handlers = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(session_log_path(log_dir))
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

    return logger
