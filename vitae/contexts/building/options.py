"""
Build Options

BuildOptions holds the caller-facing knobs of a build; BuildContext holds the
state of one build invocation (options, loaded theme, expanded targets).
Neither is stored at module level, so concurrent builds never share state.
"""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional

from dotenv import load_dotenv

from vitae.contexts.building.logger import _log_warning
from vitae.contexts.theming.expander import DEFAULT_DESTINATION_NAME, Target
from vitae.contexts.theming.theme import Theme

load_dotenv()

# Mapping keys accepted as aliases of dataclass fields
OPTION_ALIASES = {
    "assert": "assert_",
    "freezeBreaks": "freeze_breaks",
    "noEscape": "noescape",
    "outputDir": "output_dir",
    "headFragment": "head_fragment",
    "onTransform": "on_transform",
    "beforeWrite": "before_write",
    "afterWrite": "after_write",
}


@dataclass
class BuildOptions:
    """
    Options for a build.

    Attributes:
        theme: Theme identifier (path, alias, or package name)
        prettify: Pretty-print generated HTML
        private: Passed through to templates
        noescape: Skip format-specific pre-escaping of resume text
        css: "embed" (inline via the css template variable) or "link" (write CSS files)
        pdf: HTML conversion engine for pdf targets ("none" keeps only the HTML)
        wrap: Column width hint for plain-text templates
        assert_: Stop generating after the first failing target
        freeze_breaks: Encode line breaks while templates render
        output_dir: Folder of the default destination
        head_fragment: Extra markup templates may inject into <head>
        on_transform: Called with each TemplateFile after it is transformed
        before_write: Called with each output path before it is written
        after_write: Called with each output path after it is written
    """

    theme: str = field(default_factory=lambda: os.getenv("VITAE_THEME", "modern"))
    prettify: bool = True
    private: bool = False
    noescape: bool = False
    css: str = "embed"
    pdf: str = field(default_factory=lambda: os.getenv("VITAE_PDF_ENGINE", "wkhtmltopdf"))
    wrap: int = 60
    assert_: bool = False
    freeze_breaks: bool = False
    output_dir: str = field(default_factory=lambda: os.getenv("VITAE_OUTPUT_DIR", "out"))
    head_fragment: str = ""
    on_transform: Optional[Callable] = None
    before_write: Optional[Callable] = None
    after_write: Optional[Callable] = None

    @property
    def default_destination(self) -> Path:
        return Path(self.output_dir) / DEFAULT_DESTINATION_NAME

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "BuildOptions":
        """
        Build options from a plain mapping.

        Accepts field names and their camelCase aliases ("assert",
        "freezeBreaks", ...). Unknown keys are ignored with a warning.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in mapping.items():
            name = OPTION_ALIASES.get(key, key)
            if name not in known:
                _log_warning(f"Ignoring unknown build option '{key}'")
                continue
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def coerce(cls, options: Any = None) -> "BuildOptions":
        """Accept None, a mapping, or BuildOptions."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if isinstance(options, Mapping):
            return cls.from_mapping(options)
        raise TypeError(f"Expected BuildOptions or a mapping, got {type(options).__name__}")


@dataclass
class BuildContext:
    """State of one build invocation."""

    options: BuildOptions
    theme: Optional[Theme] = None
    targets: List[Target] = field(default_factory=list)
    processed: List[Target] = field(default_factory=list)
    errors: List[Exception] = field(default_factory=list)
