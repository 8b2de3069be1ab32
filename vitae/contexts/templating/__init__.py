"""
Templating Context

Responsibilities:
- Pre-escapes resume data for the destination format (Markdown, XML)
- Registers rendering backends by engine name
- Transforms each file of a format through the theme's backend

Owns: Backends, filters, freeze/unfreeze of line breaks
Never: Decides output paths or writes files
"""

from vitae.contexts.templating.backends import Jinja2Backend, LatexBackend, RenderingBackend
from vitae.contexts.templating.engine import (
    BACKENDS,
    TemplateEngine,
    TransformedFile,
    freeze,
    unfreeze,
)
from vitae.contexts.templating.escaping import FILTERS, escape_for_format, markdownify, xmlify
from vitae.contexts.templating.registries import BackendRegistry, default_registry

__all__ = [
    "BACKENDS",
    "BackendRegistry",
    "FILTERS",
    "Jinja2Backend",
    "LatexBackend",
    "RenderingBackend",
    "TemplateEngine",
    "TransformedFile",
    "default_registry",
    "escape_for_format",
    "freeze",
    "markdownify",
    "unfreeze",
    "xmlify",
]
