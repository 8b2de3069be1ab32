"""
Session logging for build runs.

One session = one folder under VITAE_LOGS_PATH holding ``<verb>.log``. The
file gets every DEBUG line from every context; the console only gets
VITAE_LOG_LEVEL and above. Context modules never call loguru directly, they
go through contexts/{context}/logger.py which adds a ``[context]`` prefix.
"""

import os
import platform
import sys
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

LOGS_PATH = Path(os.getenv("VITAE_LOGS_PATH", "outs/logs"))
CONSOLE_LEVEL = os.getenv("VITAE_LOG_LEVEL", "INFO").upper()

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {thread.name} | {message}"
CONSOLE_FORMAT = "<dim>{time:HH:mm:ss}</dim> <level>{level: <7}</level> {message}"


def session_log_dir(verb: str, started: Optional[datetime] = None, root: Optional[Path] = None) -> Path:
    """
    Folder for one logging session, e.g. ``outs/logs/build_20240101_093000``.

    Args:
        verb: Command being run ("build", "each")
        started: Session start time (defaults to now)
        root: Parent folder (defaults to VITAE_LOGS_PATH)
    """
    started = started or datetime.now()
    return Path(root or LOGS_PATH) / f"{verb}_{started.strftime('%Y%m%d_%H%M%S')}"


def setup_logger(
    verb: str,
    log_dir: Optional[Path] = None,
    provenance: Optional[Mapping[str, object]] = None,
    console_level: str = CONSOLE_LEVEL,
) -> Path:
    """
    Route loguru output to a session log file and the console.

    Replaces any previously installed handlers, so calling it twice in one
    process starts a fresh session.

    Args:
        verb: Command being run; names the log file
        log_dir: Session folder (session_log_dir(verb) when omitted)
        provenance: Extra header lines (theme, sources, ...)
        console_level: Minimum level echoed to stderr

    Returns:
        Path to the session log file
    """
    log_dir = Path(log_dir or session_log_dir(verb))
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{verb}.log"

    logger.remove()
    logger.add(log_file, format=FILE_FORMAT, level="DEBUG", encoding="utf-8")
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    log_provenance(verb, provenance)
    return log_file


def log_provenance(verb: str, provenance: Optional[Mapping[str, object]] = None) -> None:
    """Write the session header: what ran, where, and with which interpreter."""
    from vitae import __version__

    rule = "-" * 72
    logger.debug(rule)
    logger.debug(f"vitae {__version__} {verb}")
    logger.debug(f"Command: {' '.join(sys.argv)}")
    logger.debug(f"Working directory: {Path.cwd()}")
    logger.debug(f"Python {platform.python_version()} on {platform.system()}")
    for key, value in (provenance or {}).items():
        logger.debug(f"{key}: {value}")
    logger.debug(rule)
