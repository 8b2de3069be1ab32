"""
Format Generators

One generator per output format, selected from GENERATORS by format name:
- html: templates, CSS handling, optional prettify (BeautifulSoup)
- pdf / png: html templates rendered to a sibling file, then converted
- json / yml: freebies serialized straight from the resume
- anything else: plain template rendering
"""

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

import yaml
from bs4 import BeautifulSoup

from vitae.contexts.rendering.converters import (
    IMAGE_ENGINE,
    NO_CONVERSION,
    ConversionResult,
    HtmlConverter,
)
from vitae.contexts.rendering.logger import _log_debug, _log_info
from vitae.contexts.rendering.writer import OutputWriter
from vitae.contexts.templating.engine import TemplateEngine, TransformedFile
from vitae.contexts.theming.theme import FormatDescriptor, Theme
from vitae.utils.exceptions import GenerateError


@dataclass
class GenerationResult:
    """
    Result of generating one target.

    Attributes:
        file: Target file
        format: Format name
        written: Every file written for the target (primary, satellites, intermediates)
        conversion: Converter outcome for pdf/png targets
        elapsed: Seconds spent generating
    """

    file: Path
    format: str
    written: List[Path] = field(default_factory=list)
    conversion: Optional[ConversionResult] = None
    elapsed: float = 0.0

    @property
    def success(self) -> bool:
        return self.conversion is None or self.conversion.success


def _fire(options: Any, hook: str, path: Path) -> None:
    callback = getattr(options, hook, None)
    if callback:
        callback(path)


class BaseGenerator:
    """Base class for format generators."""

    format = ""

    def generate(self, resume, target, theme: Theme, options: Any = None) -> GenerationResult:
        raise NotImplementedError

    def write_text(self, path: Path, text: str, options: Any = None) -> Path:
        _fire(options, "before_write", path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        _fire(options, "after_write", path)
        return path


class TemplateGenerator(BaseGenerator):
    """Renders a format's theme templates and writes them next to the target."""

    def __init__(self, format_name: str = "", engine: TemplateEngine = None, writer: OutputWriter = None):
        self.format = format_name or self.format
        self.engine = engine or TemplateEngine()
        self.writer = writer or OutputWriter()

    def on_before_save(self, transformed: TransformedFile, data: str, options: Any) -> Optional[str]:
        """Adjust transformed text before it is written; a falsy return skips the file."""
        return data

    def template_format(self, target, theme: Theme) -> FormatDescriptor:
        return target.fmt

    def render(self, resume, fmt: FormatDescriptor, theme: Theme, options: Any, out_file: Path) -> List[Path]:
        files = self.engine.invoke(resume, fmt, theme, options, format_name=self.format or fmt.out_format)
        written = self.writer.write(
            files,
            out_file,
            pre_save=lambda transformed, data: self.on_before_save(transformed, data, options),
            options=options,
        )
        self.writer.create_symlinks(fmt, out_file.parent)
        return written

    def generate(self, resume, target, theme: Theme, options: Any = None) -> GenerationResult:
        start_time = time.time()
        fmt = self.template_format(target, theme)
        written = self.render(resume, fmt, theme, options, Path(target.file))
        return GenerationResult(
            file=Path(target.file),
            format=target.fmt.out_format,
            written=written,
            elapsed=time.time() - start_time,
        )


class HtmlGenerator(TemplateGenerator):
    """HTML output with optional CSS embedding and pretty-printing."""

    format = "html"

    def on_before_save(self, transformed: TransformedFile, data: str, options: Any) -> Optional[str]:
        if transformed.info.ext == "css":
            # Embedded stylesheets are exposed to templates via `css` instead
            return None if getattr(options, "css", None) == "embed" else data
        if getattr(options, "prettify", False):
            return BeautifulSoup(data, "html.parser").prettify()
        return data


class HtmlConversionGenerator(HtmlGenerator):
    """
    Renders HTML templates to ``<target>.html`` and converts that file.

    A format without templates of its own (the png freebie) borrows the
    theme's html format.
    """

    def __init__(self, format_name: str = "pdf", converter: HtmlConverter = None, **kwargs):
        super().__init__(format_name, **kwargs)
        self.converter = converter or HtmlConverter()

    def template_format(self, target, theme: Theme) -> FormatDescriptor:
        if target.fmt.files:
            return target.fmt
        return theme.get_format("html")

    def conversion_engine(self, options: Any) -> str:
        return getattr(options, "pdf", None) or self.converter.default_engine

    def generate(self, resume, target, theme: Theme, options: Any = None) -> GenerationResult:
        start_time = time.time()
        target_file = Path(target.file)
        html_file = target_file.with_name(f"{target_file.name}.html")

        written = self.render(resume, self.template_format(target, theme), theme, options, html_file)

        engine = self.conversion_engine(options)
        if engine == NO_CONVERSION:
            _log_info(f"Skipping conversion of {html_file.name} (engine: none)")
            return GenerationResult(
                file=target_file, format=self.format, written=written, elapsed=time.time() - start_time
            )

        _fire(options, "before_write", target_file)
        conversion = self.converter.convert(html_file, target_file, engine)
        if not conversion.success:
            raise GenerateError(target_file, inner=RuntimeError("; ".join(conversion.errors)))
        _fire(options, "after_write", target_file)

        return GenerationResult(
            file=target_file,
            format=self.format,
            written=written + [target_file],
            conversion=conversion,
            elapsed=time.time() - start_time,
        )


class PngGenerator(HtmlConversionGenerator):
    def __init__(self, **kwargs):
        super().__init__("png", **kwargs)

    def conversion_engine(self, options: Any) -> str:
        if getattr(options, "pdf", None) == NO_CONVERSION:
            return NO_CONVERSION
        return IMAGE_ENGINE


class JsonGenerator(BaseGenerator):
    """Writes the resume itself as JSON."""

    format = "json"

    def invoke(self, resume) -> str:
        return resume.stringify() if hasattr(resume, "stringify") else json.dumps(resume, indent=2)

    def generate(self, resume, target, theme: Theme, options: Any = None) -> GenerationResult:
        path = self.write_text(Path(target.file), self.invoke(resume), options)
        return GenerationResult(file=path, format=self.format, written=[path])


class YamlGenerator(JsonGenerator):
    """Writes the resume as YAML."""

    format = "yml"

    def invoke(self, resume) -> str:
        data = json.loads(super().invoke(resume))
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)


GENERATORS: Dict[str, Type[BaseGenerator]] = {
    "html": HtmlGenerator,
    "pdf": HtmlConversionGenerator,
    "png": PngGenerator,
    "json": JsonGenerator,
    "yml": YamlGenerator,
    "yaml": YamlGenerator,
}

def _validate_registry(registry: Dict[str, Type[BaseGenerator]]) -> None:
    for name, cls in registry.items():
        if not issubclass(cls, BaseGenerator):
            raise TypeError(f"Generator for '{name}' must subclass BaseGenerator")


_validate_registry(GENERATORS)


def get_generator(format_name: str, engine: TemplateEngine = None) -> BaseGenerator:
    """
    Create the generator for a format.

    Formats without a dedicated generator (doc, txt, md, latex, ...) are
    rendered with a plain TemplateGenerator.
    """
    key = (format_name or "").lower()
    cls = GENERATORS.get(key)
    if cls is None:
        _log_debug(f"No dedicated generator for '{key}', using templates")
        return TemplateGenerator(key, engine=engine)
    if issubclass(cls, TemplateGenerator):
        return cls(engine=engine)
    return cls()
