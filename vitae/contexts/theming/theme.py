"""
Theme Model and Manifest Loading

A theme is a directory holding a ``theme.yaml`` descriptor and the template
files it references. The descriptor declares the rendering backend and a
manifest of output formats:

    name: vitae-theme-modern
    version: 1.0.0
    engine: jinja2
    formats:
      html:
        files:
          - path: src/resume.html.jinja
            primary: true
          - path: src/style.css
            out: style.css
        symlinks:
          assets: ../assets
      pdf:
        files:
          - path: src/resume.html.jinja

The manifest may instead live in a separate file referenced by ``manifest:``.
When no formats are declared at all, they are inferred from
``src/resume.<format>`` (optionally suffixed ``.jinja`` / ``.j2``).
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from omegaconf import OmegaConf

from vitae.contexts.theming.logger import log_manifest

DESCRIPTOR_FILENAME = "theme.yaml"
DEFAULT_ENGINE = "jinja2"
TEMPLATE_SUFFIXES = (".jinja", ".j2")
ACTIONS = ("transform", "copy")


@dataclass
class TemplateFile:
    """
    One file belonging to an output format.

    Attributes:
        path: Absolute path of the source file inside the theme
        rel_path: Output path relative to the target's folder
        action: "transform" (render through the backend) or "copy" (verbatim)
        ext: Extension of the produced file, without the dot
        primary: Whether this file produces the target file itself
        data: Template text (None for copied files)
    """

    path: Path
    rel_path: str
    action: str = "transform"
    ext: str = ""
    primary: bool = False
    data: Optional[str] = None


@dataclass
class FormatDescriptor:
    """
    One output format of a theme.

    Attributes:
        out_format: Format name (e.g., "html", "pdf", "doc")
        ext: File extension used when expanding ".all" destinations
        title: Human-readable title
        files: Ordered template files for this format
        symlinks: Output-relative link location -> link target
        freebie: Synthesized without a theme template (json, yml, png)
    """

    out_format: str
    ext: str
    title: str = ""
    files: List[TemplateFile] = field(default_factory=list)
    symlinks: Dict[str, str] = field(default_factory=dict)
    freebie: bool = False

    @property
    def primary_file(self) -> Optional[TemplateFile]:
        return next((f for f in self.files if f.primary), None)


@dataclass(frozen=True)
class Theme:
    """A loaded theme. Immutable for the duration of a build."""

    name: str
    root: Path
    engine: str = DEFAULT_ENGINE
    version: str = ""
    description: str = ""
    formats: Dict[str, FormatDescriptor] = field(default_factory=dict)

    def has_format(self, name: str) -> bool:
        return self.find_format(name) is not None

    def find_format(self, name: str) -> Optional[FormatDescriptor]:
        """Look up a format by name, then by file extension."""
        if not name:
            return None
        name = name.lower()
        if name in self.formats:
            return self.formats[name]
        return next((fmt for fmt in self.formats.values() if fmt.ext == name), None)

    def get_format(self, name: str) -> FormatDescriptor:
        fmt = self.find_format(name)
        if fmt is None:
            raise KeyError(f"Theme '{self.name}' has no format '{name}'")
        return fmt

    def with_formats(self, formats: Dict[str, FormatDescriptor]) -> "Theme":
        """Copy of this theme with a different format manifest."""
        return replace(self, formats=formats)


def _strip_template_suffix(name: str) -> str:
    for suffix in TEMPLATE_SUFFIXES:
        if name.endswith(suffix):
            return name[: -len(suffix)]
    return name


def _extension(name: str) -> str:
    return Path(name).suffix.lstrip(".").lower()


def _load_template_file(root: Path, spec: Any) -> TemplateFile:
    """Build a TemplateFile from a manifest entry (a mapping or a bare path)."""
    if isinstance(spec, str):
        spec = {"path": spec}

    source = (root / spec["path"]).resolve()
    rel_path = spec.get("out") or _strip_template_suffix(Path(spec["path"]).name)
    action = spec.get("action", "transform")
    if action not in ACTIONS:
        raise ValueError(f"Invalid action '{action}' for {spec['path']}. Valid actions: {ACTIONS}")

    return TemplateFile(
        path=source,
        rel_path=rel_path,
        action=action,
        ext=spec.get("ext") or _extension(rel_path),
        primary=bool(spec.get("primary", False)),
        data=source.read_text(encoding="utf-8") if action == "transform" else None,
    )


def _load_format(root: Path, name: str, spec: Dict[str, Any]) -> FormatDescriptor:
    files = [_load_template_file(root, entry) for entry in spec.get("files") or []]

    if files and not any(f.primary for f in files):
        first_transform = next((f for f in files if f.action == "transform"), None)
        if first_transform is not None:
            first_transform.primary = True

    return FormatDescriptor(
        out_format=name,
        ext=str(spec.get("ext") or name).lstrip("."),
        title=spec.get("title") or name,
        files=files,
        symlinks={str(k): str(v) for k, v in (spec.get("symlinks") or {}).items()},
    )


def _infer_formats(root: Path) -> Dict[str, Dict[str, Any]]:
    """Declare one format per src/resume.<format> file."""
    inferred: Dict[str, Dict[str, Any]] = {}
    src = root / "src"
    if not src.is_dir():
        return inferred
    for template in sorted(src.glob("resume.*")):
        fmt = _extension(_strip_template_suffix(template.name))
        if fmt:
            inferred[fmt] = {"files": [{"path": str(template.relative_to(root)), "primary": True}]}
    return inferred


def load_theme(root: Path) -> Theme:
    """
    Load a theme's descriptor and format manifest.

    Args:
        root: Theme root directory (contains theme.yaml)

    Returns:
        Loaded Theme

    Raises:
        FileNotFoundError: Descriptor or a referenced template is missing
        ValueError: Manifest entries are malformed
    """
    root = Path(root).resolve()
    descriptor_path = root / DESCRIPTOR_FILENAME
    descriptor = OmegaConf.to_container(OmegaConf.load(descriptor_path), resolve=True) or {}

    manifest = descriptor
    if descriptor.get("manifest"):
        manifest = OmegaConf.to_container(OmegaConf.load(root / descriptor["manifest"]), resolve=True)

    format_specs = manifest.get("formats") or _infer_formats(root)
    formats = {
        str(name).lower(): _load_format(root, str(name).lower(), spec or {})
        for name, spec in format_specs.items()
    }
    log_manifest(root, formats)

    return Theme(
        name=descriptor.get("name") or root.name,
        root=root,
        engine=descriptor.get("engine") or DEFAULT_ENGINE,
        version=str(descriptor.get("version") or ""),
        description=descriptor.get("description") or "",
        formats=formats,
    )
