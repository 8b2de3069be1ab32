"""
Output Expansion

Turns the requested destination paths into concrete (file, format) targets.

"out/resume.all" (or an extensionless "out/resume") expands to one target per
format the theme offers: out/resume.html, out/resume.pdf, ... A destination
with a concrete extension maps to that single format.

Every theme also receives "freebie" formats that need no template: JSON and
YAML dumps of the resume, and PNG when the theme has an HTML format to
rasterize.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from dotenv import load_dotenv

from vitae.contexts.theming.logger import log_expansion
from vitae.contexts.theming.theme import FormatDescriptor, Theme

load_dotenv()

ALL_FORMATS = "all"
DEFAULT_DESTINATION_NAME = f"resume.{ALL_FORMATS}"


@dataclass
class Target:
    """
    One concrete output file.

    Attributes:
        file: Absolute output path
        fmt: Format descriptor used to produce it
        final: Generation outcome; filled in by the build (result or error)
    """

    file: Path
    fmt: FormatDescriptor
    final: Optional[Any] = None


def default_destination() -> Path:
    return Path(os.getenv("VITAE_OUTPUT_DIR", "out")) / DEFAULT_DESTINATION_NAME


def _freebie(name: str, ext: str, title: str) -> FormatDescriptor:
    return FormatDescriptor(out_format=name, ext=ext, title=title, freebie=True)


def add_freebie_formats(theme: Theme) -> Theme:
    """
    Return a copy of the theme with the freebie formats added.

    JSON and YAML are always available; PNG only when the theme declares HTML.
    Formats the theme declares itself are never replaced.
    """
    formats: Dict[str, FormatDescriptor] = dict(theme.formats)
    formats.setdefault("json", _freebie("json", "json", "json"))
    formats.setdefault("yml", _freebie("yml", "yml", "yaml"))
    if "html" in formats and "png" not in formats:
        formats["png"] = _freebie("png", "png", "png")
    return theme.with_formats(formats)


def requested_format(destination) -> str:
    """Format named by a destination's extension ("all" when it has none)."""
    suffix = Path(destination).suffix.lstrip(".").lower()
    return suffix or ALL_FORMATS


def verify_outputs(destinations: Sequence, theme: Theme) -> List[str]:
    """
    Find requested formats the theme cannot produce.

    Args:
        destinations: Requested output paths
        theme: Theme, already augmented with freebie formats

    Returns:
        Offending format names (empty when every destination is valid)
    """
    invalid = []
    for destination in destinations or []:
        fmt = requested_format(destination)
        if fmt != ALL_FORMATS and not theme.has_format(fmt):
            invalid.append(fmt)
    return invalid


def expand(destinations: Sequence, theme: Theme) -> List[Target]:
    """
    Expand destinations into concrete targets.

    Args:
        destinations: Requested output paths; empty means out/resume.all
        theme: Theme, already augmented with freebie formats

    Returns:
        Targets in destination order; ".all" expands in manifest order
    """
    destinations = list(destinations or []) or [default_destination()]

    targets: List[Target] = []
    for destination in destinations:
        path = Path(destination).resolve()
        fmt_name = requested_format(path)

        if fmt_name == ALL_FORMATS:
            stem = path.with_suffix("") if path.suffix else path
            for fmt in theme.formats.values():
                targets.append(Target(file=stem.with_name(f"{stem.name}.{fmt.ext}"), fmt=fmt))
        else:
            fmt = theme.find_format(fmt_name)
            if fmt is not None:
                targets.append(Target(file=path, fmt=fmt))

    log_expansion(len(destinations), len(targets))
    return targets
