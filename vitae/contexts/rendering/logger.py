"""
Rendering context logger.

Provides logging interface for the rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from loguru directly.
"""

from pathlib import Path

from loguru import logger

CONTEXT_PREFIX = "[render]"


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_conversion_start(engine: str, source: Path, destination: Path) -> None:
    """Log start of an HTML conversion with context."""
    _log_info(f"Converting {source.name} -> {destination.name} with {engine}")
    _log_debug(f"  Source: {source}")
    _log_debug(f"  Destination: {destination}")


def log_conversion_result(result, elapsed_time: float) -> None:
    """
    Log conversion result with diagnostics.

    Args:
        result: ConversionResult from HtmlConverter.convert()
        elapsed_time: Time taken to convert
    """
    if result.success:
        _log_success(f"Converted {result.output_path} ({elapsed_time:.2f}s)")
        return

    _log_error(f"Conversion failed ({elapsed_time:.2f}s)")
    for i, err in enumerate(result.errors[:5], 1):
        _log_error(f"  Error {i}: {err}")

    # Use opt(raw=True) to keep multi-line engine output intact
    if result.stderr:
        logger.opt(raw=True).debug(
            f"\n{'=' * 80}\nCONVERTER STDERR:\n{'=' * 80}\n{result.stderr}\n"
        )
