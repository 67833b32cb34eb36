"""Root settings model for viewset configuration."""

from contextvars import ContextVar
from typing import Any

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from viewset.config.models.observability import ObservabilityConfig
from viewset.config.models.views import ViewsConfig

# Merged TOML layers visible to Settings() while Settings.from_toml() runs
_toml_layer: ContextVar[dict[str, Any]] = ContextVar("viewset_toml_layer", default={})


class TomlLayerSource(PydanticBaseSettingsSource):
    """Settings source serving the TOML layer of the current from_toml() call."""

    def get_field_value(
        self, field: Any, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        value = _toml_layer.get().get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return {
            name: value
            for name, value in _toml_layer.get().items()
            if name in self.settings_cls.model_fields
        }


class Settings(BaseSettings):
    """Registry and logging configuration.

    Precedence, highest first: constructor arguments, VIEWSET_* environment
    variables (`__` separates nested keys, e.g. VIEWSET_VIEWS__RELOAD),
    TOML layers passed to from_toml(), model defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="VIEWSET_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    views: ViewsConfig = Field(
        default_factory=ViewsConfig,
        description="Template registry configuration",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Observability configuration",
    )

    @classmethod
    def from_toml(cls, data: dict[str, Any], **overrides: Any) -> "Settings":
        """Build settings with data as the TOML layer."""
        token = _toml_layer.set(data)
        try:
            return cls(**overrides)
        finally:
            _toml_layer.reset(token)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlLayerSource(settings_cls),
        )
