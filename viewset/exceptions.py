"""Exception hierarchy for template discovery, compilation and rendering.

All errors inherit from ViewsError, which carries a machine-readable
error_code alongside the human-readable message. Compile errors are
all-or-nothing: whenever one of them is raised, no collection is installed
and the previously installed one stays in service.
"""

from enum import Enum
from pathlib import Path


class ErrorCode(str, Enum):
    """Standardized error codes for registry failures."""

    TRAVERSAL_FAILED = "TRAVERSAL_FAILED"
    """The template root could not be walked."""

    TEMPLATE_READ_FAILED = "TEMPLATE_READ_FAILED"
    """A matched template file could not be read or decoded."""

    TEMPLATE_PARSE_FAILED = "TEMPLATE_PARSE_FAILED"
    """A template file failed to compile."""

    DUPLICATE_TEMPLATE_NAME = "DUPLICATE_TEMPLATE_NAME"
    """Two template files derived the same name."""

    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    """No template with the requested name is installed."""

    RENDER_FAILED = "RENDER_FAILED"
    """The template engine failed while rendering."""


class ViewsError(Exception):
    """Base exception for all registry errors."""

    error_code: ErrorCode

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class TraversalError(ViewsError):
    """Raised when the template root cannot be walked."""

    error_code = ErrorCode.TRAVERSAL_FAILED

    def __init__(self, message: str, root: Path | str) -> None:
        super().__init__(message)
        self.root = str(root)


class TemplateReadError(ViewsError):
    """Raised when a matched template file cannot be read."""

    error_code = ErrorCode.TEMPLATE_READ_FAILED

    def __init__(self, message: str, path: Path | str) -> None:
        super().__init__(message)
        self.path = str(path)


class TemplateParseError(ViewsError):
    """Raised when a template file contains a syntax error."""

    error_code = ErrorCode.TEMPLATE_PARSE_FAILED

    def __init__(
        self,
        message: str,
        name: str,
        path: Path | str,
        lineno: int | None = None,
    ) -> None:
        super().__init__(message)
        self.name = name
        self.path = str(path)
        self.lineno = lineno


class DuplicateTemplateNameError(ViewsError):
    """Raised when two files under the root derive the same template name."""

    error_code = ErrorCode.DUPLICATE_TEMPLATE_NAME

    def __init__(self, message: str, name: str, paths: list[str]) -> None:
        super().__init__(message)
        self.name = name
        self.paths = paths


class TemplateLookupError(ViewsError, LookupError):
    """Raised when a render names a template that is not installed."""

    error_code = ErrorCode.TEMPLATE_NOT_FOUND

    def __init__(self, message: str, name: str | None = None) -> None:
        super().__init__(message)
        self.name = name


class RenderError(ViewsError):
    """Raised when the template engine fails to render a template."""

    error_code = ErrorCode.RENDER_FAILED

    def __init__(self, message: str, name: str) -> None:
        super().__init__(message)
        self.name = name
