"""
HTML Conversion

Converts a rendered HTML file to PDF or PNG by calling an external engine.

Supported engines:
- wkhtmltopdf (PDF, default; override with VITAE_PDF_ENGINE)
- weasyprint (PDF)
- wkhtmltoimage (PNG)

Engines are invoked by name; locating the binaries is left to PATH.
"""

import os
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

from dotenv import load_dotenv

from vitae.contexts.rendering.logger import log_conversion_result, log_conversion_start

load_dotenv()

PDF_ENGINE_FALLBACK = "wkhtmltopdf"
IMAGE_ENGINE = "wkhtmltoimage"
NO_CONVERSION = "none"


def default_pdf_engine() -> str:
    """PDF engine named by VITAE_PDF_ENGINE, read at call time."""
    return os.getenv("VITAE_PDF_ENGINE", PDF_ENGINE_FALLBACK)


@dataclass
class ConversionResult:
    """
    Result of an HTML conversion.

    Attributes:
        success: Whether the output file was produced
        engine: Engine that was invoked
        output_path: Path to the generated file (None if failed)
        stdout: Standard output from the engine
        stderr: Standard error from the engine
        errors: Failure descriptions
    """

    success: bool
    engine: str = ""
    output_path: Optional[Path] = None
    stdout: str = ""
    stderr: str = ""
    errors: List[str] = field(default_factory=list)


ENGINE_COMMANDS: Dict[str, Callable[[Path, Path], List[str]]] = {
    "wkhtmltopdf": lambda src, dst: ["wkhtmltopdf", "--quiet", "--enable-local-file-access", str(src), str(dst)],
    "weasyprint": lambda src, dst: ["weasyprint", str(src), str(dst)],
    "wkhtmltoimage": lambda src, dst: ["wkhtmltoimage", "--quiet", "--enable-local-file-access", str(src), str(dst)],
}


class HtmlConverter:
    """Runs an external HTML-to-PDF/PNG engine as a subprocess."""

    def __init__(
        self,
        commands: Dict[str, Callable[[Path, Path], List[str]]] = None,
        default_engine: Optional[str] = None,
    ):
        self.commands = commands or ENGINE_COMMANDS
        self.default_engine = default_engine or default_pdf_engine()

    def convert(self, source: Path, destination: Path, engine: Optional[str] = None) -> ConversionResult:
        """
        Convert an HTML file.

        Args:
            source: Rendered HTML file
            destination: Output file (.pdf or .png)
            engine: Engine name from ENGINE_COMMANDS (default_engine when None)

        Returns:
            ConversionResult; failures are reported, not raised
        """
        engine = engine or self.default_engine
        if engine not in self.commands:
            return ConversionResult(
                success=False,
                engine=engine,
                errors=[f"Unsupported conversion engine '{engine}'. Valid engines: {sorted(self.commands)}"],
            )

        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        if destination.exists():
            destination.unlink()

        log_conversion_start(engine, Path(source), destination)
        start_time = time.time()

        try:
            proc = subprocess.run(
                self.commands[engine](source, destination),
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except (FileNotFoundError, PermissionError) as e:
            result = ConversionResult(success=False, engine=engine, errors=[f"Cannot run {engine}: {e}"])
            log_conversion_result(result, time.time() - start_time)
            return result

        errors = []
        if proc.returncode != 0:
            errors.append(f"{engine} exited with status {proc.returncode}")
        if not destination.exists():
            errors.append(f"{destination.name} was not generated")

        result = ConversionResult(
            success=destination.exists(),
            engine=engine,
            output_path=destination if destination.exists() else None,
            stdout=proc.stdout,
            stderr=proc.stderr,
            errors=errors,
        )
        log_conversion_result(result, time.time() - start_time)
        return result
