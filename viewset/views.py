"""Template registry with pull-based hot reload.

Views owns the currently installed TemplateCollection and serves renders
from it. With reload enabled every render first compiles the whole tree
again and installs the result.

Locking: one lock guards the reload flag, the installed collection and the
in-flight compile marker. It is held only to read those values or to swap
a finished collection in. Walking, reading, parsing and rendering all run
outside it, so renders on the current collection never wait for disk I/O.
"""

import threading
from collections.abc import Mapping
from concurrent.futures import Future
from pathlib import Path
from typing import Any, Protocol

from viewset.collection import TemplateCollection
from viewset.config.models.views import ViewsConfig
from viewset.discovery import compile_templates
from viewset.exceptions import ViewsError
from viewset.observability.logging import get_logger

logger = get_logger(__name__)


class Writer(Protocol):
    """Anything rendered output can be written to."""

    def write(self, s: str, /) -> Any: ...


class Views:
    """Registry of templates compiled from one directory tree.

    Construction compiles the tree once and raises if that fails, so a
    Views instance always has a collection to render from. A failed
    recompile later on leaves the installed collection untouched.

    Usage:
        views = Views("templates", ".tmpl", reload=settings.views.reload)
        views.render_named(response, "users/index", {"users": users})
    """

    def __init__(
        self,
        root: str | Path,
        extension: str,
        reload: bool = False,
        *,
        default_template: str | None = None,
        coalesce_reloads: bool = False,
        encoding: str = "utf-8",
        autoescape: bool = False,
        strict_undefined: bool = True,
        trim_blocks: bool = False,
        lstrip_blocks: bool = False,
    ) -> None:
        """Compile the template tree and build the registry.

        Args:
            root: Directory searched recursively for templates
            extension: Exact extension of template files, e.g. ".tmpl"
            reload: Recompile the tree before every render
            default_template: Name used by render_default (first discovered if None)
            coalesce_reloads: Let overlapping recompiles share one pass
            encoding: Encoding of template files
            autoescape: HTML-escape rendered values
            strict_undefined: Fail rendering on undefined variables
            trim_blocks: Jinja2 trim_blocks
            lstrip_blocks: Jinja2 lstrip_blocks

        Raises:
            ValueError: If the extension is not dot-prefixed
            ViewsError: If the first compile pass fails
        """
        self._config = ViewsConfig(
            root=Path(root),
            extension=extension,
            reload=reload,
            coalesce_reloads=coalesce_reloads,
            default_template=default_template,
            encoding=encoding,
            autoescape=autoescape,
            strict_undefined=strict_undefined,
            trim_blocks=trim_blocks,
            lstrip_blocks=lstrip_blocks,
        )
        self._lock = threading.Lock()
        self._reload = reload
        self._inflight: Future[TemplateCollection] | None = None
        self._collection = compile_templates(self._config)

        logger.info(
            "views_initialized",
            root=str(self._config.root),
            extension=extension,
            templates=len(self._collection),
            reload=reload,
        )

    @classmethod
    def from_config(cls, config: ViewsConfig) -> "Views":
        """Build a registry from a ViewsConfig section."""
        return cls(
            config.root,
            config.extension,
            config.reload,
            **config.model_dump(exclude={"root", "extension", "reload"}),
        )

    @property
    def root(self) -> Path:
        return self._config.root

    @property
    def extension(self) -> str:
        return self._config.extension

    @property
    def reload(self) -> bool:
        """Whether renders recompile the tree first."""
        with self._lock:
            return self._reload

    @property
    def collection(self) -> TemplateCollection:
        """The currently installed collection."""
        with self._lock:
            return self._collection

    @property
    def names(self) -> tuple[str, ...]:
        """Names of the currently installed templates."""
        return self.collection.names

    def set_reload(self, enabled: bool) -> None:
        """Enable or disable recompiling before every render.

        Renders already in flight keep the value they started with.
        """
        with self._lock:
            self._reload = enabled
        logger.info("views_reload_toggled", reload=enabled)

    def recompile(self) -> None:
        """Compile the tree again and install the result.

        Raises:
            ViewsError: If the pass fails; the installed collection is kept
        """
        self._recompile()

    def render_named(
        self,
        writer: Writer,
        name: str,
        data: Mapping[str, Any] | None = None,
    ) -> None:
        """Render the named template into writer.

        Output is produced in full before it is written, so a failed
        render writes nothing.

        Raises:
            ViewsError: If a reload fails
            TemplateLookupError: If name is not installed
            RenderError: If the engine fails while rendering
        """
        writer.write(self._current().render(name, data))

    def render_default(
        self,
        writer: Writer,
        data: Mapping[str, Any] | None = None,
    ) -> None:
        """Render the collection's default template into writer.

        Raises:
            ViewsError: If a reload fails
            TemplateLookupError: If there is no default template
            RenderError: If the engine fails while rendering
        """
        writer.write(self._current().render_default(data))

    def render(self, name: str, data: Mapping[str, Any] | None = None) -> str:
        """Render the named template and return the text."""
        return self._current().render(name, data)

    def _current(self) -> TemplateCollection:
        """Collection a render should use, recompiling first if enabled."""
        with self._lock:
            reload = self._reload
            collection = self._collection
        if reload:
            return self._recompile()
        return collection

    def _recompile(self) -> TemplateCollection:
        if not self._config.coalesce_reloads:
            collection = self._compile()
            with self._lock:
                self._collection = collection
            logger.debug("views_recompiled", templates=len(collection))
            return collection

        with self._lock:
            if self._inflight is not None:
                inflight, owner = self._inflight, False
            else:
                inflight = self._inflight = Future()
                owner = True

        if not owner:
            return inflight.result()

        try:
            collection = self._compile()
        except BaseException as exc:
            with self._lock:
                self._inflight = None
            inflight.set_exception(exc)
            raise

        with self._lock:
            self._collection = collection
            self._inflight = None
        inflight.set_result(collection)
        logger.debug("views_recompiled", templates=len(collection), coalesced=True)
        return collection

    def _compile(self) -> TemplateCollection:
        try:
            return compile_templates(self._config)
        except ViewsError as exc:
            logger.warning(
                "template_compile_failed",
                root=str(self._config.root),
                error_code=exc.error_code.value,
                error=exc.message,
            )
            raise
