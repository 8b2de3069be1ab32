"""
Resume Loader

Reads resume documents from disk, detects their dialect, and normalizes them to
JSON Resume. Failures are reported on the returned LoadResult rather than
raised, so that loading many files yields one result per file.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Optional

from vitae.contexts.intake.detector import ensure_jrs
from vitae.contexts.intake.logger import _log_debug, log_load_result
from vitae.contexts.intake.resume import Resume
from vitae.utils.exceptions import ParseError, ReadError, UnknownSchema, VitaeError


@dataclass
class LoadResult:
    """Result from ResumeLoader.load_one()."""

    file: Path
    json: Optional[Any] = None
    resume: Optional[Resume] = None
    format: Optional[str] = None
    was_converted: bool = False
    error: Optional[VitaeError] = None

    @property
    def success(self) -> bool:
        return self.error is None


def _read_json(path: Path) -> Any:
    """
    Read and parse one JSON file.

    Raises:
        ReadError: Filesystem failure (missing file, permissions, directory...)
        ParseError: The bytes read are not UTF-8 JSON; carries the text read
    """
    try:
        raw_bytes = path.read_bytes()
    except OSError as e:
        raise ReadError(path, inner=e) from e

    raw = raw_bytes.decode("utf-8", errors="replace")
    try:
        return json.loads(raw_bytes.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ParseError(path, raw=raw, inner=e) from e


class ResumeLoader:
    """
    Loads JSON Resume documents from disk.

    Args:
        objectify: Build a normalized Resume for each document. The build
            pipeline turns this off and normalizes once after merging.
    """

    def __init__(self, objectify: bool = True):
        self.objectify = objectify

    def load_one(self, path) -> LoadResult:
        """
        Load a single resume file.

        Args:
            path: Path to a UTF-8 JSON file

        Returns:
            LoadResult; ``error`` is a ReadError, ParseError or UnknownSchema
            when loading failed
        """
        path = Path(path)
        _log_debug(f"Reading {path}")

        try:
            document = _read_json(path)

            normalized = ensure_jrs(document)
            if normalized.detected_format != "jrs" and not normalized.was_converted:
                raise UnknownSchema(path, dialect=normalized.detected_format)

            result = LoadResult(
                file=path,
                json=normalized.json,
                format=normalized.detected_format,
                was_converted=normalized.was_converted,
            )
            if self.objectify:
                result.resume = Resume().parse_json(normalized.json)
                result.resume.imp["file"] = str(path)
        except VitaeError as e:
            result = LoadResult(file=path, error=e)

        log_load_result(path, result)
        return result

    def load(self, paths: Iterable) -> List[LoadResult]:
        """Load every path; one LoadResult per path, in order, without stopping early."""
        return [self.load_one(path) for path in paths]
