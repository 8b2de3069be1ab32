"""
Theming context logger.

All theming modules log through here; lines carry a [theme] prefix.
"""

from pathlib import Path
from typing import Iterable, List

from loguru import logger

CONTEXT_PREFIX = "[theme]"


def _log_info(message: str) -> None:
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_resolution(identifier: str, misses: List[str], resolved: Path) -> None:
    """A theme identifier resolved; misses are the candidates tried first."""
    for candidate in misses:
        _log_debug(f"Candidate '{candidate}' did not resolve")
    _log_info(f"Theme '{identifier}' -> {resolved}")


def log_manifest(root: Path, formats: Iterable[str]) -> None:
    names = ", ".join(formats) or "(none)"
    _log_debug(f"{Path(root).name} declares formats: {names}")


def log_expansion(destinations: int, targets: int) -> None:
    _log_debug(f"Expanded {destinations} destination(s) into {targets} target(s)")
