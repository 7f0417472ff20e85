"""Maestro settings: model defaults, TOML layers, then MAESTRO_* variables."""

from typing import Any, ClassVar

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from maestro.config.models.generation import GenerationConfig
from maestro.config.models.observability import ObservabilityConfig
from maestro.config.models.sessions import SessionsConfig
from maestro.config.models.storage import StorageConfig


class TomlLayersSource(PydanticBaseSettingsSource):
    """Serves the merged TOML layers as one settings source."""

    def __init__(self, settings_cls: type[BaseSettings], layers: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._layers = layers

    def get_field_value(
        self, field: Any, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        value = self._layers.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return {k: v for k, v in self._layers.items() if k in self.settings_cls.model_fields}


class Settings(BaseSettings):
    """Everything Maestro reads at startup, one section per subsystem.

    Constructor arguments beat MAESTRO_* variables (nested sections use
    `__`, e.g. MAESTRO_SESSIONS__CAPACITY), which beat the TOML layers
    installed with use_toml_layers(), which beat the model defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="MAESTRO_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    toml_layers: ClassVar[dict[str, Any]] = {}

    storage: StorageConfig = Field(default_factory=StorageConfig)
    sessions: SessionsConfig = Field(default_factory=SessionsConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    @classmethod
    def use_toml_layers(cls, layers: dict[str, Any]) -> None:
        """Install merged TOML config for Settings built from now on."""
        cls.toml_layers = dict(layers)

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
            TomlLayersSource(settings_cls, cls.toml_layers),
        )
