"""
Theme Resolution

Resolves a theme identifier (path, alias, prefixed package name, or bare name)
to a theme root directory.

Candidates are tried in a fixed order and the first that resolves wins:
1. The identifier itself, minus any "npm:" / "pypi:" registry prefix
2. Its alias expansion (e.g. "modern" -> "vitae-theme-modern")
3. For bare names, the name under the theme naming convention

A candidate resolves when it is a directory containing theme.yaml, when such a
directory exists under one of the VITAE_THEMES_PATH folders, or when it names
an installed Python package whose directory contains theme.yaml.
"""

import importlib.util
import os
import re
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from vitae.contexts.theming.logger import log_resolution
from vitae.contexts.theming.theme import DESCRIPTOR_FILENAME, Theme, load_theme
from vitae.utils.exceptions import ThemeLoad, ThemeNotFound

load_dotenv()

THEME_PREFIX = "vitae-theme-"
REGISTRY_PREFIXES = ("npm:", "pypi:")

THEME_ALIASES = {
    "modern": "vitae-theme-modern",
    "classy": "vitae-theme-classy",
    "sceptile": "vitae-theme-sceptile",
    "boilerplate": "vitae-theme-boilerplate",
}

BARE_NAME = re.compile(r"^[a-z0-9_-]+$")
MODULE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_.-]*$")


def expand_theme_candidates(identifier: str) -> List[str]:
    """
    List the names/paths to try for a theme identifier, in priority order.

    Examples:
        >>> expand_theme_candidates("modern")
        ['modern', 'vitae-theme-modern']
        >>> expand_theme_candidates("npm:vitae-theme-classy")
        ['vitae-theme-classy']
    """
    trimmed = (identifier or "").strip()
    lower = trimmed.lower()
    candidates = []

    normalized = trimmed
    for prefix in REGISTRY_PREFIXES:
        if lower.startswith(prefix):
            normalized = trimmed[len(prefix):]
            break
    if normalized:
        candidates.append(normalized)

    if lower in THEME_ALIASES:
        candidates.append(THEME_ALIASES[lower])

    if BARE_NAME.match(lower) and not lower.startswith(THEME_PREFIX):
        candidates.append(f"{THEME_PREFIX}{lower}")

    # De-duplicate, keeping first occurrence
    return list(dict.fromkeys(c for c in candidates if c))


def _themes_search_path() -> List[Path]:
    raw = os.getenv("VITAE_THEMES_PATH", "")
    return [Path(p) for p in raw.split(os.pathsep) if p.strip()]


def _is_theme_dir(path: Path) -> bool:
    return path.is_dir() and (path / DESCRIPTOR_FILENAME).is_file()


def _find_installed_package(candidate: str) -> Optional[Path]:
    """Locate an importable package named after the candidate (dashes -> underscores)."""
    if not MODULE_NAME.match(candidate):
        return None
    module_name = candidate.replace("-", "_")
    try:
        spec = importlib.util.find_spec(module_name)
    except (ImportError, ValueError):
        return None
    if spec is None or not spec.submodule_search_locations:
        return None
    for location in spec.submodule_search_locations:
        if _is_theme_dir(Path(location)):
            return Path(location)
    return None


def try_resolve_theme(candidate: str) -> Optional[Path]:
    """
    Resolve a single candidate to a theme root, or None.

    Args:
        candidate: Filesystem path or package-style name

    Returns:
        Absolute theme root directory, or None if the candidate does not resolve
    """
    if not candidate:
        return None

    as_path = Path(candidate).expanduser().resolve()
    if _is_theme_dir(as_path):
        return as_path

    for folder in _themes_search_path():
        in_folder = (folder / candidate).resolve()
        if _is_theme_dir(in_folder):
            return in_folder

    return _find_installed_package(candidate)


def verify_theme(identifier: str) -> Path:
    """
    Resolve a theme identifier to its root directory.

    Raises:
        ThemeNotFound: No candidate resolves; carries the requested identifier
    """
    cleaned = (identifier or "").strip()
    candidates = expand_theme_candidates(cleaned)

    for index, candidate in enumerate(candidates):
        resolved = try_resolve_theme(candidate)
        if resolved is not None:
            log_resolution(cleaned, candidates[:index], resolved)
            return resolved

    raise ThemeNotFound(cleaned, candidates)


def resolve_theme(identifier: str) -> Theme:
    """
    Resolve and load a theme.

    Raises:
        ThemeNotFound: No candidate resolves
        ThemeLoad: The theme resolved but its manifest failed to load
    """
    root = verify_theme(identifier)
    try:
        return load_theme(root)
    except Exception as e:
        raise ThemeLoad(identifier, inner=e) from e
