"""Immutable compiled template sets.

A TemplateCollection is the product of exactly one compile pass. All of its
templates share one Jinja2 environment whose loader is a private snapshot
of the sources read during that pass, so templates can include or extend
each other by derived name and nothing on disk is consulted again.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from jinja2 import (
    DictLoader,
    Environment,
    StrictUndefined,
    Template,
    TemplateSyntaxError,
    Undefined,
)

from viewset.config.models.views import ViewsConfig
from viewset.exceptions import RenderError, TemplateLookupError, TemplateParseError


@dataclass(frozen=True, slots=True)
class TemplateSource:
    """One template file read from disk, keyed by its derived name."""

    name: str
    path: str
    text: str


def create_environment(sources: Mapping[str, str], config: ViewsConfig) -> Environment:
    """Create the Jinja2 environment shared by one collection."""
    return Environment(
        loader=DictLoader(dict(sources)),
        autoescape=config.autoescape,
        undefined=StrictUndefined if config.strict_undefined else Undefined,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
        keep_trailing_newline=True,
        auto_reload=False,
        cache_size=-1,
    )


class TemplateCollection:
    """Read-only set of compiled templates addressable by name.

    Instances are never modified after build_collection() returns them and
    can be rendered from any number of threads at once.
    """

    def __init__(
        self,
        environment: Environment,
        templates: Mapping[str, Template],
        paths: Mapping[str, str],
        default_name: str | None,
    ) -> None:
        self._environment = environment
        self._templates = MappingProxyType(dict(templates))
        self._paths = MappingProxyType(dict(paths))
        self._default_name = default_name

    @property
    def names(self) -> tuple[str, ...]:
        """Template names in discovery order."""
        return tuple(self._templates)

    @property
    def default_name(self) -> str | None:
        """Name rendered by render_default, or None for an empty collection."""
        return self._default_name

    @property
    def sources(self) -> Mapping[str, str]:
        """Read-only mapping of template name to source file path."""
        return self._paths

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __iter__(self) -> Iterator[str]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    def __repr__(self) -> str:
        return f"TemplateCollection(templates={len(self)}, default={self._default_name!r})"

    def get(self, name: str) -> Template:
        """Return the compiled template for name.

        Raises:
            TemplateLookupError: If no template with that name exists
        """
        try:
            return self._templates[name]
        except KeyError:
            raise TemplateLookupError(
                f"Template {name!r} is not defined", name=name
            ) from None

    def render(self, name: str, data: Mapping[str, Any] | None = None) -> str:
        """Render the named template to a string.

        Raises:
            TemplateLookupError: If no template with that name exists
            RenderError: If the engine fails while rendering
        """
        template = self.get(name)
        try:
            return template.render(dict(data or {}))
        except Exception as exc:
            raise RenderError(
                f"Failed to render template {name!r}: {exc}", name=name
            ) from exc

    def render_default(self, data: Mapping[str, Any] | None = None) -> str:
        """Render the collection's default template to a string."""
        if self._default_name is None:
            raise TemplateLookupError("Collection has no templates to render")
        return self.render(self._default_name, data)


def build_collection(
    sources: list[TemplateSource],
    config: ViewsConfig,
) -> TemplateCollection:
    """Compile every source into one new collection.

    Compilation is eager: a syntax error in any source aborts the whole
    build instead of surfacing later at render time.

    Raises:
        TemplateParseError: If any source fails to compile
    """
    environment = create_environment({s.name: s.text for s in sources}, config)
    templates: dict[str, Template] = {}

    for source in sources:
        try:
            templates[source.name] = environment.get_template(source.name)
        except TemplateSyntaxError as exc:
            raise TemplateParseError(
                f"{source.path}:{exc.lineno}: {exc.message}",
                name=source.name,
                path=source.path,
                lineno=exc.lineno,
            ) from exc

    if config.default_template is not None:
        default_name: str | None = config.default_template
    else:
        default_name = sources[0].name if sources else None

    return TemplateCollection(
        environment,
        templates,
        {s.name: s.path for s in sources},
        default_name,
    )
