"""Shared test fixtures for the viewset test suite."""

from collections.abc import Callable, Generator
from pathlib import Path

import pytest


@pytest.fixture
def template_root(tmp_path: Path) -> Path:
    """Create an empty template root directory."""
    root = tmp_path / "templates"
    root.mkdir()
    return root


@pytest.fixture
def write_templates(template_root: Path) -> Callable[[dict[str, str]], Path]:
    """Factory fixture to create template files under the template root.

    Usage:
        def test_something(write_templates):
            root = write_templates({
                "index.tmpl": "Hello {{ name }}",
                "users/list.tmpl": "{% for u in users %}{{ u }}{% endfor %}",
            })
    """

    def _write(files: dict[str, str]) -> Path:
        for relative, content in files.items():
            path = template_root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return template_root

    return _write


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory."""

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            (test_config_dir / filename).write_text(content)

    return _create_toml_files


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test."""
    from viewset.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
