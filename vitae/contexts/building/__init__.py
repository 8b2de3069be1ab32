"""
Building Context

Responsibilities:
- Orchestrates a build: load, merge, resolve theme, expand, generate
- Carries per-build options and state
- Reports progress and errors to observers and settles one outcome per build

Owns: Build orchestration, option handling, verb outcomes
Never: Renders templates or touches files directly
"""

from vitae.contexts.building.build import BuildResult, BuildVerb, build, build_each
from vitae.contexts.building.options import BuildContext, BuildOptions
from vitae.contexts.building.verb import Verb, VerbOutcome

__all__ = [
    "BuildContext",
    "BuildOptions",
    "BuildResult",
    "BuildVerb",
    "Verb",
    "VerbOutcome",
    "build",
    "build_each",
]
