"""Tests for the Views registry."""

import io
from collections.abc import Callable
from pathlib import Path

import pytest

from viewset import Views
from viewset.config.models.views import ViewsConfig
from viewset.exceptions import (
    RenderError,
    TemplateLookupError,
    TemplateParseError,
    TraversalError,
)


@pytest.fixture
def site(write_templates: Callable[[dict[str, str]], Path]) -> Path:
    """A small template tree."""
    return write_templates({
        "index.tmpl": "Hello {{ name }}!",
        "foo/bar/index.tmpl": "nested {{ n }}",
        "users/list.tmpl": "{% for u in users %}[{{ u }}]{% endfor %}",
    })


class TestConstruction:
    """Tests for building a Views registry."""

    def test_compiles_on_construction(self, site: Path) -> None:
        """The first compile pass runs in the constructor."""
        views = Views(site, ".tmpl")
        assert set(views.names) == {"index", "foo/bar/index", "users/list"}
        assert views.root == site
        assert views.extension == ".tmpl"
        assert views.reload is False

    def test_missing_root_fails_construction(self, tmp_path: Path) -> None:
        """A root that cannot be walked fails construction."""
        with pytest.raises(TraversalError):
            Views(tmp_path / "nope", ".tmpl")

    def test_parse_error_fails_construction(
        self, write_templates: Callable[[dict[str, str]], Path]
    ) -> None:
        """A broken template fails construction."""
        root = write_templates({"broken.tmpl": "{% for %}"})
        with pytest.raises(TemplateParseError):
            Views(root, ".tmpl")

    @pytest.mark.parametrize("extension", ["tmpl", "", ".", ".html.tmpl"])
    def test_extension_must_be_single_suffix(self, site: Path, extension: str) -> None:
        """Extensions must be one dot-prefixed suffix."""
        with pytest.raises(ValueError):
            Views(site, extension)

    def test_from_config(self, site: Path) -> None:
        """A ViewsConfig section builds an equivalent registry."""
        config = ViewsConfig(root=site, reload=True, default_template="users/list")
        views = Views.from_config(config)

        out = io.StringIO()
        views.render_default(out, {"users": ["a"]})

        assert views.reload is True
        assert out.getvalue() == "[a]"


class TestRenderNamed:
    """Tests for Views.render_named."""

    def test_writes_rendered_output(self, site: Path) -> None:
        """Rendered text is written to the writer."""
        views = Views(site, ".tmpl")
        out = io.StringIO()

        views.render_named(out, "foo/bar/index", {"n": 3})

        assert out.getvalue() == "nested 3"

    def test_unknown_name_writes_nothing(self, site: Path) -> None:
        """A lookup failure raises and leaves the writer untouched."""
        views = Views(site, ".tmpl")
        out = io.StringIO()

        with pytest.raises(TemplateLookupError):
            views.render_named(out, "does/not/exist", {})

        assert out.getvalue() == ""

    def test_render_error_writes_nothing(self, site: Path) -> None:
        """A failure while rendering raises and writes nothing."""
        views = Views(site, ".tmpl")
        out = io.StringIO()

        with pytest.raises(RenderError):
            views.render_named(out, "users/list", {})

        assert out.getvalue() == ""

    def test_render_returns_text(self, site: Path) -> None:
        """render() returns the output instead of writing it."""
        views = Views(site, ".tmpl")
        assert views.render("index", {"name": "World"}) == "Hello World!"


class TestRenderDefault:
    """Tests for Views.render_default."""

    def test_first_discovered_is_default(self, site: Path) -> None:
        """Without configuration the first template in walk order is rendered."""
        views = Views(site, ".tmpl")
        out = io.StringIO()

        views.render_default(out, {"n": 1})

        assert views.collection.default_name == "foo/bar/index"
        assert out.getvalue() == "nested 1"

    def test_configured_default(self, site: Path) -> None:
        """The configured default template is rendered."""
        views = Views(site, ".tmpl", default_template="index")
        out = io.StringIO()

        views.render_default(out, {"name": "there"})

        assert out.getvalue() == "Hello there!"

    def test_unknown_configured_default(self, site: Path) -> None:
        """A configured default that does not exist is a lookup failure."""
        views = Views(site, ".tmpl", default_template="missing")
        with pytest.raises(TemplateLookupError):
            views.render_default(io.StringIO())

    def test_empty_tree(self, template_root: Path) -> None:
        """An empty tree constructs but has no default to render."""
        views = Views(template_root, ".tmpl")
        assert views.names == ()
        with pytest.raises(TemplateLookupError):
            views.render_default(io.StringIO())


class TestReload:
    """Tests for reload and recompile behavior."""

    def test_edits_ignored_without_reload(self, site: Path) -> None:
        """With reload off, on-disk edits do not change output."""
        views = Views(site, ".tmpl", reload=False)
        (site / "index.tmpl").write_text("Changed {{ name }}")

        assert views.render("index", {"name": "x"}) == "Hello x!"

    def test_recompile_picks_up_edits(self, site: Path) -> None:
        """A manual recompile installs edited templates."""
        views = Views(site, ".tmpl", reload=False)
        (site / "index.tmpl").write_text("Changed {{ name }}")

        views.recompile()

        assert views.render("index", {"name": "x"}) == "Changed x"

    def test_edits_reflected_with_reload(self, site: Path) -> None:
        """With reload on, the next render sees the edit."""
        views = Views(site, ".tmpl", reload=True)
        (site / "index.tmpl").write_text("Changed {{ name }}")

        out = io.StringIO()
        views.render_named(out, "index", {"name": "x"})

        assert out.getvalue() == "Changed x"

    def test_new_file_visible_with_reload(self, site: Path) -> None:
        """With reload on, files added after construction become renderable."""
        views = Views(site, ".tmpl", reload=True)
        (site / "added.tmpl").write_text("new")

        assert views.render("added") == "new"
        assert "added" in views.names

    def test_deleted_file_disappears_after_recompile(self, site: Path) -> None:
        """Removing a file removes its template on the next pass."""
        views = Views(site, ".tmpl")
        (site / "users" / "list.tmpl").unlink()

        views.recompile()

        with pytest.raises(TemplateLookupError):
            views.render("users/list", {"users": []})

    def test_failed_recompile_keeps_previous_collection(self, site: Path) -> None:
        """A parse failure leaves the installed collection fully renderable."""
        views = Views(site, ".tmpl")
        before = views.collection
        (site / "index.tmpl").write_text("{% if %}")
        (site / "extra.tmpl").write_text("extra")

        with pytest.raises(TemplateParseError):
            views.recompile()

        assert views.collection is before
        assert views.render("index", {"name": "still"}) == "Hello still!"
        assert "extra" not in views.names

    def test_reload_failure_aborts_render(self, site: Path) -> None:
        """With reload on, a compile failure is raised and nothing is rendered."""
        views = Views(site, ".tmpl", reload=True)
        (site / "index.tmpl").write_text("{{ broken")
        out = io.StringIO()

        with pytest.raises(TemplateParseError):
            views.render_named(out, "foo/bar/index", {"n": 1})

        assert out.getvalue() == ""

    def test_root_removed_after_construction(self, site: Path) -> None:
        """Losing the root fails the pass but keeps serving the old set."""
        views = Views(site, ".tmpl")
        renamed = site.with_name("moved")
        site.rename(renamed)

        with pytest.raises(TraversalError):
            views.recompile()

        assert views.render("foo/bar/index", {"n": 2}) == "nested 2"

    def test_set_reload_toggles(self, site: Path) -> None:
        """Toggling reload changes behavior for later renders."""
        views = Views(site, ".tmpl")
        views.set_reload(True)
        assert views.reload is True

        (site / "index.tmpl").write_text("v2")
        assert views.render("index") == "v2"

        views.set_reload(False)
        (site / "index.tmpl").write_text("v3")
        assert views.render("index") == "v2"

    def test_recompile_replaces_collection(self, site: Path) -> None:
        """Each successful pass installs a new collection object."""
        views = Views(site, ".tmpl")
        before = views.collection

        views.recompile()

        assert views.collection is not before
        assert views.collection.names == before.names
