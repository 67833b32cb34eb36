"""Template registry configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class ViewsConfig(BaseModel):
    """Where templates live and how the registry compiles and serves them."""

    root: Path = Field(default=Path("templates"), description="Template root directory")
    extension: str = Field(
        default=".tmpl",
        description="Exact file extension selecting template files, dot included",
    )
    reload: bool = Field(
        default=False,
        description="Recompile the whole tree before every render",
    )
    coalesce_reloads: bool = Field(
        default=False,
        description="Let concurrent recompiles join the one already in flight",
    )
    default_template: str | None = Field(
        default=None,
        description="Template rendered by render_default; first discovered if unset",
    )
    encoding: str = Field(default="utf-8", description="Template file encoding")
    autoescape: bool = Field(default=False, description="HTML-escape rendered values")
    strict_undefined: bool = Field(
        default=True,
        description="Fail rendering on undefined variables",
    )
    trim_blocks: bool = Field(default=False, description="Jinja2 trim_blocks")
    lstrip_blocks: bool = Field(default=False, description="Jinja2 lstrip_blocks")

    @field_validator("extension")
    @classmethod
    def _extension_has_dot(cls, value: str) -> str:
        if len(value) < 2 or not value.startswith(".") or "." in value[1:]:
            # files are matched on the suffix after their last dot
            raise ValueError("extension must be a single dot-prefixed suffix such as '.tmpl'")
        return value
