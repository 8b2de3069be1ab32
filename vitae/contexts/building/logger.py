"""
Building context logger.

Provides logging interface for the building context with automatic [build] prefix.
All building modules should import from this module, not from loguru directly.
"""

from pathlib import Path
from typing import Sequence

from loguru import logger

CONTEXT_PREFIX = "[build]"


# Wrapper functions with automatic [build] prefix


def _log_info(message: str) -> None:
    """Log info message with [build] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [build] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [build] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [build] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [build] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level build-specific logging helpers


def log_build_start(sources: Sequence[Path], destinations: Sequence[Path], theme: str) -> None:
    """Log start of a build with context."""
    _log_info(f"Building {len(sources)} source(s) with theme '{theme}'")
    for source in sources:
        _log_debug(f"  Source: {source}")
    for destination in destinations:
        _log_debug(f"  Destination: {destination}")


def log_target_result(target) -> None:
    """Log the outcome of one generated target."""
    if isinstance(target.final, Exception):
        _log_error(f"{target.fmt.out_format.upper()}: {target.file} failed")
        _log_debug(f"  {target.final}")
    else:
        _log_success(f"{target.fmt.out_format.upper()}: {target.file}")


def log_build_result(result, elapsed_time: float) -> None:
    """
    Log build result summary.

    Args:
        result: BuildResult from BuildVerb.invoke()
        elapsed_time: Time taken by the build
    """
    skipped = len(result.targets) - len(result.processed)
    if result.errors:
        _log_error(
            f"Build finished with {len(result.errors)} error(s): "
            f"{len(result.processed)} target(s) processed, {skipped} skipped ({elapsed_time:.2f}s)"
        )
        for i, err in enumerate(result.errors[:5], 1):
            _log_error(f"  Error {i}: {err.message}")
        if len(result.errors) > 5:
            _log_error(f"  ... and {len(result.errors) - 5} more errors")
    else:
        _log_success(f"Build succeeded: {len(result.processed)} target(s) ({elapsed_time:.2f}s)")
