"""
Theming Context

Responsibilities:
- Resolves theme identifiers (paths, aliases, package names) to theme folders
- Loads theme descriptors and their per-format template manifests
- Adds freebie formats and expands destinations into concrete targets

Owns: Theme resolution, format manifests, target expansion
Never: Renders templates or writes output
"""

from vitae.contexts.theming.expander import (
    Target,
    add_freebie_formats,
    expand,
    verify_outputs,
)
from vitae.contexts.theming.resolver import (
    expand_theme_candidates,
    resolve_theme,
    try_resolve_theme,
    verify_theme,
)
from vitae.contexts.theming.theme import FormatDescriptor, TemplateFile, Theme, load_theme

__all__ = [
    "FormatDescriptor",
    "Target",
    "TemplateFile",
    "Theme",
    "add_freebie_formats",
    "expand",
    "expand_theme_candidates",
    "load_theme",
    "resolve_theme",
    "try_resolve_theme",
    "verify_outputs",
    "verify_theme",
]
