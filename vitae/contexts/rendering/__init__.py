"""
Rendering Context

Responsibilities:
- Selects a generator per output format
- Writes transformed files, copied assets and symlinks to disk
- Converts rendered HTML to PDF or PNG through an external engine

Owns: Output files, directory structure, HTML conversion
Never: Modifies template content or resume data
"""

from vitae.contexts.rendering.converters import ConversionResult, HtmlConverter
from vitae.contexts.rendering.generators import (
    GENERATORS,
    BaseGenerator,
    GenerationResult,
    HtmlConversionGenerator,
    HtmlGenerator,
    JsonGenerator,
    PngGenerator,
    TemplateGenerator,
    YamlGenerator,
    get_generator,
)
from vitae.contexts.rendering.writer import OutputWriter

__all__ = [
    "BaseGenerator",
    "ConversionResult",
    "GENERATORS",
    "GenerationResult",
    "HtmlConversionGenerator",
    "HtmlConverter",
    "HtmlGenerator",
    "JsonGenerator",
    "OutputWriter",
    "PngGenerator",
    "TemplateGenerator",
    "YamlGenerator",
    "get_generator",
]
