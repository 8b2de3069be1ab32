"""
Template Engine

Runs every file of one output format through the theme's rendering backend.

Per target:
1. CSS templates are transformed first (stable order otherwise) so later
   templates can embed the transformed stylesheet via ``css``
2. Each ``transform`` file is optionally frozen (line breaks encoded as
   entities), rendered, and unfrozen
3. ``copy`` files are passed through untouched for the writer to copy
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from vitae.contexts.templating.backends import RenderingBackend
from vitae.contexts.templating.logger import log_format_transformed
from vitae.contexts.templating.registries import BackendRegistry, default_registry
from vitae.contexts.theming.theme import FormatDescriptor, TemplateFile, Theme

N_SYM = "&newl;"
R_SYM = "&retn;"
ESC_SYM = "&frz;"

# An "&" that already starts a token is escaped, so literal tokens survive
_LITERAL_TOKEN = re.compile(r"&(?=(?:newl|retn|frz);)")
_FROZEN = re.compile("|".join(re.escape(s) for s in (ESC_SYM, N_SYM, R_SYM)))
_THAW = {ESC_SYM: "&", N_SYM: "\n", R_SYM: "\r"}

BACKENDS = default_registry()


def freeze(text: str) -> str:
    """Encode line breaks so a backend cannot collapse them; unfreeze() restores the text exactly."""
    text = _LITERAL_TOKEN.sub(ESC_SYM, text)
    return text.replace("\n", N_SYM).replace("\r", R_SYM)


def unfreeze(text: str) -> str:
    """Restore line breaks and escaped literal tokens encoded by freeze()."""
    return _FROZEN.sub(lambda m: _THAW[m.group(0)], text)


@dataclass
class TransformedFile:
    """A template file paired with its rendered output (None for copied files)."""

    info: TemplateFile
    data: Optional[str] = None


def _css_first(files: List[TemplateFile]) -> List[TemplateFile]:
    return sorted(files, key=lambda f: 0 if f.ext == "css" else 1)


class TemplateEngine:
    """Transforms a resume through the templates of one format."""

    def __init__(self, registry: BackendRegistry = None):
        self.registry = registry or BACKENDS

    def invoke(
        self,
        resume_data: Dict[str, Any],
        fmt: FormatDescriptor,
        theme: Theme,
        options: Any = None,
        format_name: Optional[str] = None,
    ) -> List[TransformedFile]:
        """
        Transform all files of a format.

        Args:
            resume_data: Normalized resume
            fmt: Format whose files are rendered
            theme: Theme owning the templates; its engine selects the backend
            options: Build options (freeze_breaks, noescape, on_transform, ...)
            format_name: Format used for escaping decisions (defaults to fmt.out_format)

        Returns:
            Transformed files, CSS first

        Raises:
            UnregisteredBackend: The theme's engine is unknown
            TemplateCompileError / TemplateInvokeError: A template failed
        """
        backend = self.registry.get_backend(theme.engine)
        format_name = format_name or fmt.out_format
        on_transform = getattr(options, "on_transform", None)

        results: List[TransformedFile] = []
        css: Optional[str] = None
        for template_file in _css_first(fmt.files):
            data = None
            if template_file.action == "transform":
                data = self.transform(
                    backend, resume_data, template_file, fmt, theme, options,
                    format_name=format_name, results=results, css=css,
                )
                if template_file.ext == "css":
                    css = data if css is None else css + data

            results.append(TransformedFile(info=template_file, data=data))
            if on_transform:
                on_transform(template_file)

        copied = sum(1 for r in results if r.info.action == "copy")
        log_format_transformed(fmt.out_format, len(results) - copied, copied)
        return results

    def transform(
        self,
        backend: RenderingBackend,
        resume_data: Dict[str, Any],
        template_file: TemplateFile,
        fmt: FormatDescriptor,
        theme: Theme,
        options: Any = None,
        format_name: Optional[str] = None,
        results: Optional[List[TransformedFile]] = None,
        css: Optional[str] = None,
    ) -> str:
        """Render a single template file."""
        frozen = bool(getattr(options, "freeze_breaks", False))
        text = template_file.data or ""
        if frozen:
            text = freeze(text)

        rendered = backend.generate(
            resume_data,
            text,
            format_name or fmt.out_format,
            fmt,
            options,
            theme,
            template_path=template_file.path,
            results=results,
            css=css,
        )
        return unfreeze(rendered) if frozen else rendered
