"""
Rendering Backends

A backend turns (resume, template text) into output text. Backends are keyed by
engine name in the BackendRegistry; a theme's ``engine`` field selects one.

Two Jinja2 flavours are provided:
- jinja2: standard ``{{ }}`` / ``{% %}`` delimiters, HTML autoescaping for
  markup formats
- latex: custom delimiters that do not collide with LaTeX braces
  (``<<< var >>>``, ``<%% block %%>``, ``<# comment #>``)
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from jinja2 import (
    ChainableUndefined,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateSyntaxError,
)

from vitae.contexts.templating.escaping import FILTERS, escape_for_format
from vitae.contexts.templating.logger import log_rendered
from vitae.utils.exceptions import TemplateCompileError, TemplateInvokeError

AUTOESCAPE_FORMATS = {"html", "pdf", "png", "doc"}


class RenderingBackend(ABC):
    """
    Base class for template rendering backends.

    Subclasses provide a Jinja2 Environment; environments are cached per
    (theme root, autoescape) pair.
    """

    name = "base"

    def __init__(self):
        self._cache: Dict[Tuple[Optional[Path], bool], Environment] = {}

    @abstractmethod
    def create_environment(self, root: Optional[Path], autoescape: bool) -> Environment:
        """Create a Jinja2 Environment loading includes from the theme root."""

    def get_environment(self, root: Optional[Path] = None, autoescape: bool = False) -> Environment:
        key = (root, autoescape)
        if key not in self._cache:
            env = self.create_environment(root, autoescape)
            env.filters.update(FILTERS)
            self._cache[key] = env
        return self._cache[key]

    def clear_cache(self):
        """Clear the environment cache."""
        self._cache.clear()

    def is_cached(self, root: Optional[Path], autoescape: bool = False) -> bool:
        return (root, autoescape) in self._cache

    def build_context(
        self,
        resume_data: Dict[str, Any],
        format_name: str,
        format_descriptor: Any,
        options: Any,
        theme: Any,
        results: Optional[List[Any]] = None,
        css: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Assemble the variables exposed to templates.

        Returns:
            Dict with r (escaped resume), RAW (unescaped resume), filt, format,
            opts, engine, results, css, headFragment and theme
        """
        noescape = bool(getattr(options, "noescape", False))
        return {
            "r": escape_for_format(resume_data, format_name, noescape),
            "RAW": resume_data,
            "filt": FILTERS,
            "format": format_name,
            "fmt": format_descriptor,
            "opts": options,
            "engine": self.name,
            "results": results or [],
            "css": css or "",
            "headFragment": getattr(options, "head_fragment", None) or "",
            "theme": theme,
        }

    def generate(
        self,
        resume_data: Dict[str, Any],
        template_text: str,
        format_name: str,
        format_descriptor: Any,
        options: Any,
        theme: Any,
        template_path: Optional[Path] = None,
        results: Optional[List[Any]] = None,
        css: Optional[str] = None,
    ) -> str:
        """
        Render a template against a resume.

        Args:
            resume_data: Normalized resume (unescaped)
            template_text: Template source
            format_name: Destination format, drives pre-escaping and autoescape
            format_descriptor: FormatDescriptor of the target
            options: Build options (noescape, head_fragment, ...)
            theme: Theme being rendered
            template_path: Source path, used in error messages
            results: Files already transformed for this target
            css: Transformed CSS of this target, if any

        Returns:
            Rendered text

        Raises:
            TemplateCompileError: Template text does not compile
            TemplateInvokeError: Template fails while rendering
        """
        context = self.build_context(
            resume_data, format_name, format_descriptor, options, theme, results, css
        )
        autoescape = format_name in AUTOESCAPE_FORMATS and not getattr(options, "noescape", False)
        root = getattr(theme, "root", None)
        return self._render(self.get_environment(root, autoescape), context, template_text, template_path)

    def generate_simple(self, context: Dict[str, Any], template_text: str) -> str:
        """Render template text against an arbitrary context, without escaping."""
        return self._render(self.get_environment(), context, template_text)

    def _render(
        self,
        env: Environment,
        context: Dict[str, Any],
        template_text: str,
        template_path: Optional[Path] = None,
    ) -> str:
        try:
            template = env.from_string(template_text)
        except TemplateSyntaxError as e:
            raise TemplateCompileError(
                f"Template syntax error on line {e.lineno}: {e.message}", template_path, inner=e
            ) from e

        try:
            rendered = template.render(context)
        except Exception as e:
            raise TemplateInvokeError(
                f"Template failed while rendering: {e}", template_path, inner=e
            ) from e

        log_rendered(self.name, template_path, rendered)
        return rendered


def _loader(root: Optional[Path]) -> Optional[FileSystemLoader]:
    return FileSystemLoader(str(root)) if root else None


class Jinja2Backend(RenderingBackend):
    """Jinja2 with standard delimiters. Missing keys render as empty."""

    name = "jinja2"

    def create_environment(self, root: Optional[Path], autoescape: bool) -> Environment:
        return Environment(
            loader=_loader(root),
            undefined=ChainableUndefined,
            autoescape=autoescape,
            keep_trailing_newline=True,
        )


class LatexBackend(RenderingBackend):
    """
    Jinja2 with delimiters safe for LaTeX sources.

    - Variable: <<< var >>>
    - Block: <%% block %%>
    - Comment: <# comment #>
    """

    name = "latex"

    def create_environment(self, root: Optional[Path], autoescape: bool) -> Environment:
        return Environment(
            loader=_loader(root),
            # Catches silent failures
            undefined=StrictUndefined,
            variable_start_string="<<<",
            variable_end_string=">>>",
            block_start_string="<%%",
            block_end_string="%%>",
            comment_start_string="<#",
            comment_end_string="#>",
            # Preserve whitespace (important for LaTeX)
            trim_blocks=False,
            lstrip_blocks=False,
            keep_trailing_newline=True,
        )
