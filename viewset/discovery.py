"""Template discovery and compilation.

Walks a template root, selects files by exact extension, derives a name
for each one from its path and compiles the lot into a TemplateCollection.
Nothing here touches a registry; installing the result is the caller's job.
"""

import os
import time
from pathlib import Path

from viewset.collection import TemplateCollection, TemplateSource, build_collection
from viewset.config.models.views import ViewsConfig
from viewset.exceptions import (
    DuplicateTemplateNameError,
    TemplateReadError,
    TraversalError,
)
from viewset.observability.logging import get_logger

logger = get_logger(__name__)

_SEPARATORS = "/" + os.sep


def file_extension(path: str) -> str:
    """Return the suffix of the base name from its last dot, or ""."""
    base = os.path.basename(path)
    dot = base.rfind(".")
    return base[dot:] if dot >= 0 else ""


def derive_name(path: str | Path, root: str | Path, extension: str) -> str:
    """Derive a template name from a file path.

    The root, trimmed of surrounding separators and dots, is removed at its
    first occurrence in the path, leading separators are dropped and then
    len(extension) characters are cut from the end:

        derive_name("templates/foo/bar/index.tmpl", "templates", ".tmpl")
        -> "foo/bar/index"
    """
    name = os.fspath(path)
    trimmed_root = os.fspath(root).strip(_SEPARATORS + ".")
    if trimmed_root:
        name = name.replace(trimmed_root, "", 1)
    name = name.lstrip(_SEPARATORS)
    name = name[: len(name) - len(extension)]
    if os.sep != "/":
        name = name.replace(os.sep, "/")
    return name


def find_template_files(root: str | Path, extension: str) -> list[str]:
    """List every non-directory entry under root whose extension matches.

    Paths come back in lexical walk order: entries of a directory sorted by
    name, subdirectories expanded in place. Unreadable entries below the
    root are logged and skipped.

    Raises:
        TraversalError: If the root itself cannot be listed
    """
    root_path = os.path.normpath(os.fspath(root))

    def on_error(exc: OSError) -> None:
        failed = os.path.normpath(exc.filename) if exc.filename else root_path
        if failed == root_path:
            raise TraversalError(
                f"Cannot walk template root {root_path}: {exc.strerror or exc}",
                root=root_path,
            ) from exc
        logger.warning("template_walk_error", path=failed, error=str(exc))

    matches: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root_path, onerror=on_error):
        dirnames.sort()
        for filename in filenames:
            if file_extension(filename) == extension:
                matches.append(os.path.normpath(os.path.join(dirpath, filename)))

    matches.sort(key=lambda p: os.path.relpath(p, root_path).split(os.sep))
    return matches


def read_template_sources(
    paths: list[str],
    root: str | Path,
    extension: str,
    encoding: str = "utf-8",
) -> list[TemplateSource]:
    """Read each template file and pair it with its derived name.

    Raises:
        TemplateReadError: If a file cannot be read or decoded
        DuplicateTemplateNameError: If two paths derive the same name
    """
    sources: list[TemplateSource] = []
    seen: dict[str, str] = {}

    for path in paths:
        name = derive_name(path, root, extension)
        if name in seen:
            raise DuplicateTemplateNameError(
                f"Template name {name!r} is derived from both {seen[name]} and {path}",
                name=name,
                paths=[seen[name], path],
            )
        seen[name] = path

        try:
            text = Path(path).read_text(encoding=encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise TemplateReadError(
                f"Cannot read template {path}: {exc}", path=path
            ) from exc

        sources.append(TemplateSource(name=name, path=path, text=text))

    return sources


def compile_templates(config: ViewsConfig) -> TemplateCollection:
    """Run one full discovery and compile pass.

    Returns a new collection or raises; there is no partial result.

    Raises:
        TraversalError: If the root cannot be walked
        TemplateReadError: If a template file cannot be read
        DuplicateTemplateNameError: If two files derive the same name
        TemplateParseError: If a template fails to compile
    """
    started = time.perf_counter()
    root = os.path.normpath(os.fspath(config.root))

    paths = find_template_files(root, config.extension)
    sources = read_template_sources(paths, root, config.extension, config.encoding)
    collection = build_collection(sources, config)

    logger.debug(
        "templates_compiled",
        root=root,
        count=len(collection),
        elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
    )
    return collection
