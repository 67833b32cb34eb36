"""viewset: a directory of text templates compiled into one hot-reloadable set.

Usage:
    from viewset import Views

    views = Views("templates", ".tmpl", reload=True)
    views.render_named(sys.stdout, "users/index", {"users": users})
"""

from viewset.collection import TemplateCollection, TemplateSource
from viewset.discovery import compile_templates, derive_name
from viewset.exceptions import (
    DuplicateTemplateNameError,
    ErrorCode,
    RenderError,
    TemplateLookupError,
    TemplateParseError,
    TemplateReadError,
    TraversalError,
    ViewsError,
)
from viewset.views import Views

__all__ = [
    "DuplicateTemplateNameError",
    "ErrorCode",
    "RenderError",
    "TemplateCollection",
    "TemplateLookupError",
    "TemplateParseError",
    "TemplateReadError",
    "TemplateSource",
    "TraversalError",
    "Views",
    "ViewsError",
    "compile_templates",
    "derive_name",
]
