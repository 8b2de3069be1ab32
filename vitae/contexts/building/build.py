"""
Build Orchestration

Generates every requested output of a resume:

    collect sources -> load -> verify theme -> load theme + freebies
    -> verify outputs -> merge -> normalize -> expand -> generate each target

Any failure before generation rejects the build and writes nothing. Failures
while generating a target are recorded on that target; later targets still
run unless ``assert_`` is set.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Sequence

from vitae.contexts.building.logger import (
    _log_error,
    _log_info,
    log_build_result,
    log_build_start,
    log_target_result,
)
from vitae.contexts.building.options import BuildContext, BuildOptions
from vitae.contexts.building.verb import Verb, VerbOutcome
from vitae.contexts.intake.loader import ResumeLoader
from vitae.contexts.intake.merger import merge_sheets
from vitae.contexts.intake.resume import Resume
from vitae.contexts.rendering.generators import get_generator
from vitae.contexts.templating.engine import TemplateEngine
from vitae.contexts.theming.expander import Target, add_freebie_formats, expand, verify_outputs
from vitae.contexts.theming.resolver import resolve_theme
from vitae.utils.exceptions import (
    BuildError,
    GenerateError,
    InputOutputParity,
    InvalidFormat,
    ResumeNotFound,
    VitaeError,
)


@dataclass
class BuildResult:
    """
    Result of a build.

    Attributes:
        sheet: Normalized, merged resume
        targets: Every expanded target
        processed: Targets that were attempted (fail-fast may skip the rest)
        errors: Per-target failures, in order
    """

    sheet: Resume
    targets: List[Target] = field(default_factory=list)
    processed: List[Target] = field(default_factory=list)
    errors: List[VitaeError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


class BuildVerb(Verb):
    """The build command."""

    def __init__(self, engine: TemplateEngine = None):
        super().__init__("build")
        self.engine = engine or TemplateEngine()

    def invoke(self, sources: Sequence, destinations: Optional[Sequence] = None, options: Any = None) -> VerbOutcome:
        """
        Build a resume.

        Args:
            sources: Resume files; several are merged, the first taking precedence
            destinations: Output files; ".all" or extensionless means every format
            options: BuildOptions or a mapping of option names

        Returns:
            VerbOutcome settled with a BuildResult, or rejected with the error
        """
        outcome = VerbOutcome()
        ctx = BuildContext(options=BuildOptions.coerce(options))
        start_time = time.time()
        self.stat("begin")

        try:
            result = self._build(ctx, sources, destinations)
        except Exception as e:
            error = e if isinstance(e, VitaeError) else BuildError(e)
            _log_error(f"Build failed: {error.message}")
            self.err(error, quit=True)
            outcome.reject(error)
            self.stat("end")
            return outcome

        log_build_result(result, time.time() - start_time)
        self.stat("end")

        if result.errors:
            return outcome.reject(result.errors[0], result)
        return outcome.resolve(result)

    def _build(self, ctx: BuildContext, sources: Sequence, destinations: Optional[Sequence]) -> BuildResult:
        options = ctx.options
        sources = [Path(s) for s in sources or []]
        if not sources:
            raise ResumeNotFound()

        destinations = [Path(d) for d in destinations or []]
        if not destinations:
            # Two or more sources and no destination: the last source names the output
            destinations = [sources.pop()] if len(sources) > 1 else [options.default_destination]

        log_build_start(sources, destinations, options.theme)

        loaded = ResumeLoader(objectify=False).load(sources)
        failed = next((r for r in loaded if r.error is not None), None)
        if failed is not None:
            raise failed.error

        theme = add_freebie_formats(resolve_theme(options.theme))
        ctx.theme = theme
        self.stat("afterTheme", theme=theme.name)

        invalid = verify_outputs(destinations, theme)
        if invalid:
            raise InvalidFormat(invalid, theme.name)

        self.stat("beforeMerge", count=len(loaded))
        merged = merge_sheets([r.json for r in loaded])
        sheet = Resume()
        sheet.imp["file"] = str(sources[0])
        sheet.parse_json(merged)
        self.stat("afterMerge")

        ctx.targets = expand(destinations, theme)
        for target in ctx.targets:
            if options.assert_ and ctx.errors:
                _log_info(f"Skipping {target.file} after earlier failure")
                continue
            self._generate(ctx, sheet, target)

        return BuildResult(sheet=sheet, targets=ctx.targets, processed=ctx.processed, errors=ctx.errors)

    def _generate(self, ctx: BuildContext, sheet: Resume, target: Target) -> None:
        self.stat("beforeGenerate", fmt=target.fmt.out_format, file=target.file)
        generator = get_generator(target.fmt.out_format, engine=self.engine)

        try:
            target.final = generator.generate(sheet, target, ctx.theme, ctx.options)
        except VitaeError as e:
            target.final = e
        except Exception as e:
            target.final = GenerateError(target.file, inner=e)

        ctx.processed.append(target)
        log_target_result(target)
        if isinstance(target.final, VitaeError):
            ctx.errors.append(target.final)
            self.err(target.final, quit=ctx.options.assert_)

        self.stat("afterGenerate", fmt=target.fmt.out_format, file=target.file, final=target.final)


def build(sources: Sequence, destinations: Optional[Sequence] = None, options: Any = None) -> VerbOutcome:
    """Build a resume with a fresh BuildVerb; see BuildVerb.invoke()."""
    return BuildVerb().invoke(sources, destinations, options)


def build_each(
    sources: Sequence,
    destinations: Sequence,
    options: Any = None,
    max_workers: Optional[int] = None,
) -> List[VerbOutcome]:
    """
    Build each source into its paired destination, concurrently.

    Args:
        sources: One resume file per build
        destinations: One destination per source
        options: Shared build options
        max_workers: Thread pool size (ThreadPoolExecutor default when None)

    Returns:
        One VerbOutcome per pair, in input order

    Raises:
        InputOutputParity: sources and destinations differ in length
    """
    sources, destinations = list(sources), list(destinations)
    if len(sources) != len(destinations):
        raise InputOutputParity(len(sources), len(destinations))

    options = BuildOptions.coerce(options)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            BuildVerb().submit(executor, [source], [destination], options)
            for source, destination in zip(sources, destinations)
        ]
        return [future.result() for future in futures]
