"""
Intake context logger.

Provides logging interface for the intake context with automatic [intake] prefix.
All intake modules should import from this module, not from loguru directly.
"""

from pathlib import Path

from loguru import logger

CONTEXT_PREFIX = "[intake]"


def _log_success(message: str) -> None:
    """Log success message with [intake] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [intake] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [intake] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_load_result(path: Path, result) -> None:
    """
    Log the outcome of loading one resume file.

    Args:
        path: Source file
        result: LoadResult from ResumeLoader.load_one()
    """
    if result.error:
        _log_error(f"Failed to load {path}: {result.error.message}")
        if result.error.inner is not None:
            _log_debug(f"  Cause: {result.error.inner!r}")
    else:
        suffix = " (converted)" if result.was_converted else ""
        _log_success(f"Loaded {path} as {result.format}{suffix}")
