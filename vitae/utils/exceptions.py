"""Exception taxonomy for the build pipeline.

Every failure carries a short ``code`` (used in observer payloads and logs) and,
where one exists, the ``inner`` exception that triggered it.
"""

from pathlib import Path
from typing import Any, Iterable, Optional


class VitaeError(Exception):
    """
    Base class for all pipeline failures.

    Attributes:
        message: Error description
        inner: The original exception that caused this failure, if any
        code: Short status code identifying the failure kind
    """

    code = "error"

    def __init__(self, message: str, inner: Optional[BaseException] = None):
        self.message = message
        self.inner = inner

        parts = [message]
        if inner is not None:
            parts.append(f"\nOriginal error: {inner}")

        super().__init__("\n".join(parts))


class ResumeNotFound(VitaeError):
    """Raised when a build is invoked without any source resumes."""

    code = "resumeNotFound"

    def __init__(self, message: str = "No source resumes were specified"):
        super().__init__(message)


class ReadError(VitaeError):
    """Raised when a resume file cannot be read from disk."""

    code = "readError"

    def __init__(self, file: Path, inner: Optional[BaseException] = None):
        self.file = Path(file)
        self.raw = None
        super().__init__(f"Unable to read resume: {file}", inner)


class ParseError(VitaeError):
    """
    Raised when a resume file was read but is not valid JSON.

    Attributes:
        file: Path of the offending file
        raw: Text actually read from the file (may be empty)
    """

    code = "parseError"

    def __init__(self, file: Path, raw: str, inner: Optional[BaseException] = None):
        self.file = Path(file)
        self.raw = raw
        super().__init__(f"Unable to parse resume JSON: {file}", inner)


class UnknownSchema(VitaeError):
    """Raised when a parsed document matches no registered resume dialect."""

    code = "unknownSchema"

    def __init__(self, file: Optional[Path] = None, dialect: str = "unk"):
        self.file = Path(file) if file else None
        self.dialect = dialect
        super().__init__(f"Unrecognized resume schema ({dialect}): {file}")


class ThemeNotFound(VitaeError):
    """Raised when no theme candidate resolves. Carries the requested identifier."""

    code = "themeNotFound"

    def __init__(self, attempted: str, candidates: Iterable[str] = ()):
        self.attempted = attempted
        self.candidates = list(candidates)
        message = f"Theme not found: '{attempted}'"
        if self.candidates:
            message += f" (tried: {', '.join(self.candidates)})"
        super().__init__(message)


class ThemeLoad(VitaeError):
    """Raised when a resolved theme's manifest cannot be loaded."""

    code = "themeLoad"

    def __init__(self, attempted: str, inner: Optional[BaseException] = None):
        self.attempted = attempted
        super().__init__(f"Unable to load theme: {attempted}", inner)


class InvalidFormat(VitaeError):
    """Raised when requested outputs name formats the theme does not provide."""

    code = "invalidFormat"

    def __init__(self, formats: Iterable[str], theme_name: Optional[str] = None):
        self.formats = list(formats)
        self.theme_name = theme_name
        message = f"Invalid output format(s): {', '.join(self.formats)}"
        if theme_name:
            message += f" (theme '{theme_name}')"
        super().__init__(message)


class TemplateCompileError(VitaeError):
    """Raised when a rendering backend cannot compile a template."""

    code = "compileTemplate"

    def __init__(self, message: str, template_path: Optional[Path] = None, inner=None):
        self.template_path = template_path
        if template_path:
            message = f"{message}\nTemplate: {template_path}"
        super().__init__(message, inner)


class TemplateInvokeError(VitaeError):
    """Raised when a compiled template fails during execution."""

    code = "invokeTemplate"

    def __init__(self, message: str, template_path: Optional[Path] = None, inner=None):
        self.template_path = template_path
        if template_path:
            message = f"{message}\nTemplate: {template_path}"
        super().__init__(message, inner)


class GenerateError(VitaeError):
    """Wraps any other exception raised while generating a single target."""

    code = "generateError"

    def __init__(self, file: Path, inner: Optional[BaseException] = None):
        self.file = Path(file)
        super().__init__(f"Failed to generate {file}", inner)


class InputOutputParity(VitaeError):
    """Raised when paired source/destination lists differ in length."""

    code = "inputOutputParity"

    def __init__(self, num_sources: int, num_destinations: int):
        self.num_sources = num_sources
        self.num_destinations = num_destinations
        super().__init__(
            f"Source/destination count mismatch: {num_sources} source(s), "
            f"{num_destinations} destination(s)"
        )


class UnregisteredBackend(VitaeError):
    """Raised when a theme names a rendering backend that is not registered."""

    code = "unregisteredBackend"

    def __init__(self, name: str, available: Iterable[str] = ()):
        self.name = name
        self.available = sorted(available)
        super().__init__(
            f"Rendering backend '{name}' is not registered. Available: {self.available}"
        )


class InvalidDateFormat(VitaeError, ValueError):
    """Raised when date text cannot be parsed by any supported rule."""

    code = "invalidDateFormat"

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Invalid date format encountered: {value}")


class BuildError(VitaeError):
    """Wraps an unexpected exception raised before target generation (malformed resume data, ...)."""

    code = "buildError"

    def __init__(self, inner: BaseException):
        super().__init__(f"Build failed: {type(inner).__name__}: {inner}", inner)
