"""
Templating context logger.

All templating modules log through here; lines carry a [template] prefix.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

CONTEXT_PREFIX = "[template]"


def _log_debug(message: str) -> None:
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def log_rendered(backend: str, template_path: Optional[Path], rendered: str) -> None:
    """One template rendered by a backend."""
    source = Path(template_path).name if template_path else "<string>"
    _log_debug(f"{backend}: {source} -> {len(rendered)} chars")


def log_format_transformed(format_name: str, transformed: int, copied: int) -> None:
    """Summary of one format's files after TemplateEngine.invoke()."""
    if transformed == 0 and copied == 0:
        _log_warning(f"Format '{format_name}' has no template files")
        return
    _log_debug(f"Format '{format_name}': {transformed} transformed, {copied} copied")
