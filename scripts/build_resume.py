#!/usr/bin/env python3
"""
Resume Build CLI

Generates resume outputs from JSON Resume documents using a theme.

Commands:
    build - Build one (merged) resume into one or more outputs
    each  - Build several resumes, one destination per source

Examples:\n

    build_resume.py build resume.json                                # out/resume.all with default theme

    build_resume.py build resume.json --to out/me.html --to out/me.pdf

    build_resume.py build me.json base.json --to out/me.all -t classy # Merge, me.json wins conflicts

    build_resume.py each a.json b.json --to out/a.all --to out/b.all
"""

from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from vitae.contexts.building import BuildOptions, VerbOutcome, build, build_each
from vitae.utils.exceptions import VitaeError
from vitae.utils.logger import session_log_dir, setup_logger

load_dotenv()


def display_path(path: Path) -> str:
    """Return path relative to the working directory for cleaner display."""
    try:
        return str(Path(path).resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


app = typer.Typer(
    help="Build resumes from JSON Resume documents with installable themes",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _make_options(theme, pdf, css, prettify, no_escape, private, fail_fast) -> BuildOptions:
    options = BuildOptions(prettify=prettify, noescape=no_escape, private=private, assert_=fail_fast, css=css)
    if theme:
        options.theme = theme
    if pdf:
        options.pdf = pdf
    return options


def _start_session(verb: str, log_dir: Optional[Path], options: BuildOptions, sources: List[Path]) -> Path:
    return setup_logger(
        verb,
        log_dir=log_dir or session_log_dir(verb),
        provenance={
            "Sources": ", ".join(str(s) for s in sources),
            "Theme": options.theme,
            "PDF engine": options.pdf,
        },
    )


def _report(outcome: VerbOutcome) -> None:
    result = outcome.result
    if result is not None:
        for target in result.targets:
            if target not in result.processed:
                typer.secho(f"  - {display_path(target.file)} (skipped)", fg=typer.colors.YELLOW)
            elif isinstance(target.final, VitaeError):
                typer.secho(f"  ✗ {display_path(target.file)}", fg=typer.colors.RED)
                typer.secho(f"      {target.final.message}", fg=typer.colors.RED)
            else:
                typer.secho(f"  ✓ {display_path(target.file)}", fg=typer.colors.GREEN)

    if outcome.success:
        typer.secho("✓ Build succeeded", fg=typer.colors.GREEN, bold=True)
    else:
        typer.secho("✗ Build failed", fg=typer.colors.RED, bold=True)
        if result is None and outcome.error is not None:
            typer.secho(f"  {outcome.error}", fg=typer.colors.RED)


ThemeOption = Annotated[
    Optional[str],
    typer.Option("--theme", "-t", help="Theme path, alias or package name (default: $VITAE_THEME or 'modern')"),
]
PdfOption = Annotated[
    Optional[str],
    typer.Option("--pdf", "-p", help="PDF engine: wkhtmltopdf, weasyprint or none"),
]
CssOption = Annotated[str, typer.Option("--css", help="'embed' CSS into HTML or 'link' to CSS files")]
PrettifyOption = Annotated[bool, typer.Option("--prettify/--no-prettify", help="Pretty-print HTML output")]
NoEscapeOption = Annotated[bool, typer.Option("--no-escape", help="Do not pre-escape resume text")]
PrivateOption = Annotated[bool, typer.Option("--private", help="Pass the private flag to templates")]
AssertOption = Annotated[bool, typer.Option("--assert", "-a", help="Stop at the first failing output")]
LogDirOption = Annotated[Optional[Path], typer.Option("--log-dir", help="Directory for the build log")]


@app.command("build")
def build_command(
    sources: Annotated[List[Path], typer.Argument(help="Resume files; the first takes precedence when merging")],
    to: Annotated[
        Optional[List[Path]],
        typer.Option("--to", "-o", help="Output file; repeatable. Use .all for every format"),
    ] = None,
    theme: ThemeOption = None,
    pdf: PdfOption = None,
    css: CssOption = "embed",
    prettify: PrettifyOption = True,
    no_escape: NoEscapeOption = False,
    private: PrivateOption = False,
    fail_fast: AssertOption = False,
    log_dir: LogDirOption = None,
):
    """
    Build one resume into one or more outputs.

    Examples:\n

        $ build_resume.py build resume.json --to out/resume.all

        $ build_resume.py build resume.json --to out/resume.pdf --pdf weasyprint
    """
    options = _make_options(theme, pdf, css, prettify, no_escape, private, fail_fast)
    log_file = _start_session("build", log_dir, options, sources)

    typer.secho(f"\nBuilding: {', '.join(display_path(s) for s in sources)}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Theme: {options.theme}")
    typer.echo("")

    outcome = build(sources, to or [], options)
    _report(outcome)

    typer.echo(f"  Log: {display_path(log_file)}")
    typer.echo("")
    raise typer.Exit(code=0 if outcome.success else 1)


@app.command("each")
def each_command(
    sources: Annotated[List[Path], typer.Argument(help="Resume files, built independently")],
    to: Annotated[List[Path], typer.Option("--to", "-o", help="One output per source, in order")],
    theme: ThemeOption = None,
    pdf: PdfOption = None,
    css: CssOption = "embed",
    prettify: PrettifyOption = True,
    no_escape: NoEscapeOption = False,
    private: PrivateOption = False,
    fail_fast: AssertOption = False,
    log_dir: LogDirOption = None,
):
    """
    Build several resumes concurrently, pairing sources with --to outputs.

    Examples:\n

        $ build_resume.py each a.json b.json --to out/a.html --to out/b.html
    """
    options = _make_options(theme, pdf, css, prettify, no_escape, private, fail_fast)
    log_file = _start_session("each", log_dir, options, sources)

    try:
        outcomes = build_each(sources, to, options)
    except VitaeError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    for source, outcome in zip(sources, outcomes):
        typer.secho(f"\n{display_path(source)}", fg=typer.colors.BLUE, bold=True)
        _report(outcome)

    succeeded = sum(1 for outcome in outcomes if outcome.success)
    typer.echo(f"\n{succeeded}/{len(outcomes)} builds succeeded")
    typer.echo(f"  Log: {display_path(log_file)}")
    typer.echo("")
    raise typer.Exit(code=0 if succeeded == len(outcomes) else 1)


if __name__ == "__main__":
    app()
