"""
VITAE - Resume build pipeline

Turns JSON Resume documents into HTML, PDF, PNG, text, Markdown, LaTeX, Word,
JSON and YAML outputs using installable theme packages.

Architecture:
- Intake Context: Resume loading, dialect normalization and merging
- Theming Context: Theme resolution, format manifests and target expansion
- Templating Context: Pre-escaping and template rendering backends
- Rendering Context: Format generators, file output and HTML conversion
- Building Context: Build orchestration, options and outcomes
"""

__version__ = "0.1.0"

from vitae.contexts.building import BuildOptions, build, build_each  # noqa: E402

__all__ = ["BuildOptions", "build", "build_each"]
