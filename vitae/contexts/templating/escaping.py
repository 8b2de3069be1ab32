"""
Resume pre-escaping and template filters.

Before rendering, resume text is adapted to the destination format:
- html / pdf / png: fields are interpreted as Markdown
- doc (Word XML): fields are XML-escaped
- anything else: left untouched

Escaped values are wrapped in ``Markup`` so autoescaping backends emit them as-is.
"""

import re
from datetime import date, datetime
from typing import Any, Callable, Dict, Optional
from xml.sax.saxutils import escape as _xml_escape

import markdown
from markupsafe import Markup

MARKDOWN_FORMATS = {"html", "pdf", "png"}
XML_FORMATS = {"doc"}

# Keys whose values are never treated as Markdown (links, contact details, dates)
MARKDOWN_SKIP_KEYS = {
    "url",
    "website",
    "email",
    "phone",
    "image",
    "keywords",
    "startDate",
    "endDate",
    "date",
    "releaseDate",
    "network",
    "username",
}

# Keys whose values are block-level Markdown (kept wrapped in <p>)
MARKDOWN_BLOCK_KEYS = {"summary"}

XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}

_WRAPPING_PARAGRAPH = re.compile(r"^\s*<p>|</p>\s*$", re.IGNORECASE)

LATEX_SPECIALS = {
    "\\": r"\textbackslash{}",
    "%": r"\%",
    "$": r"\$",
    "&": r"\&",
    "_": r"\_",
    "#": r"\#",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}
_LATEX_SPECIALS_PATTERN = re.compile("|".join(re.escape(c) for c in LATEX_SPECIALS))


def md(text: Optional[str]) -> Markup:
    """Render Markdown to HTML."""
    return Markup(markdown.markdown(text or ""))


def mdin(text: Optional[str]) -> Markup:
    """Render inline Markdown to HTML, without the wrapping paragraph."""
    return Markup(_WRAPPING_PARAGRAPH.sub("", markdown.markdown(text or "")))


def xml(text: Optional[str]) -> Markup:
    """Escape text for XML-based office formats."""
    return Markup(_xml_escape(text or "", XML_ENTITIES))


def to_latex(text: Optional[str]) -> str:
    """
    Escape LaTeX special characters.

    Example:
        >>> to_latex("AI & ML_ops")
        'AI \\\\& ML\\\\_ops'
    """
    if not text:
        return ""
    return _LATEX_SPECIALS_PATTERN.sub(lambda m: LATEX_SPECIALS[m.group(0)], text)


def link(name: str, url: Optional[str] = None) -> str:
    if not url:
        return name
    return Markup('<a href="{}">{}</a>').format(url, name)


def format_date(value: Any, layout: str = "%b %Y") -> str:
    """Format a normalized date; other values pass through as text."""
    if isinstance(value, (datetime, date)):
        return value.strftime(layout)
    return "" if value is None else str(value)


FILTERS: Dict[str, Callable] = {
    "out": lambda text: text,
    "raw": lambda text: text,
    "xml": xml,
    "md": md,
    "mdin": mdin,
    "lower": lambda text: (text or "").lower(),
    "link": link,
    "latex": to_latex,
    "date": format_date,
}


def transform_strings(data: Any, transformer: Callable[[str, str], Any], skip=frozenset(), key: str = "") -> Any:
    """
    Copy a nested structure, passing every string through ``transformer(key, value)``.

    Strings stored under a key in ``skip`` (and everything nested below such a
    key) are copied unchanged.
    """
    if key in skip:
        return data
    if isinstance(data, dict):
        return {k: transform_strings(v, transformer, skip, k) for k, v in data.items()}
    if isinstance(data, list):
        return [transform_strings(item, transformer, skip, key) for item in data]
    if isinstance(data, str):
        return transformer(key, data)
    return data


def markdownify(resume: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of the resume with text fields rendered from Markdown to HTML."""

    def render(key: str, value: str) -> Markup:
        return md(value) if key in MARKDOWN_BLOCK_KEYS else mdin(value)

    return transform_strings(dict(resume), render, MARKDOWN_SKIP_KEYS)


def xmlify(resume: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of the resume with every string XML-escaped."""
    return transform_strings(dict(resume), lambda key, value: xml(value))


def escape_for_format(resume: Dict[str, Any], format_name: str, noescape: bool = False) -> Dict[str, Any]:
    """
    Pre-escape resume data for a destination format.

    Args:
        resume: Canonical resume
        format_name: Destination format
        noescape: Skip all escaping

    Returns:
        Escaped copy, or the resume itself when no escaping applies
    """
    if noescape:
        return resume
    if format_name in MARKDOWN_FORMATS:
        return markdownify(resume)
    if format_name in XML_FORMATS:
        return xmlify(resume)
    return resume
