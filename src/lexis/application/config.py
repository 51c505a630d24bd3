from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from lexis.application.scheduler.mastery import MasteryPolicy
from lexis.domain.constants import DEFAULT_MASTERY_THRESHOLDS, MASTERY_REACTIVATION_DAYS


class AppConfig(BaseSettings):
    """
    Configuration model for lexis.
    Supports loading from:
    1. Environment variables (LEXIS_*)
    2. Config file (~/.config/lexis/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="LEXIS_",
        extra="ignore",
    )

    # Mastery policy
    mastery_thresholds: tuple[int, int, int, int, int] = DEFAULT_MASTERY_THRESHOLDS
    reactivation_days: int = Field(default=MASTERY_REACTIVATION_DAYS, ge=1)

    # Output
    verbose: int = 1

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # First existing file wins
        toml_files = [
            Path.home() / ".config/lexis/config.toml",
            Path.home() / ".lexis.toml",
        ]
        toml_file = next((f for f in toml_files if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (
            init_settings,
            env_settings,
        )

    @field_validator("mastery_thresholds", mode="before")
    @classmethod
    def parse_thresholds(cls, v: Any) -> Any:
        if isinstance(v, str):
            return tuple(int(part.strip()) for part in v.split(",") if part.strip())
        return v

    @field_validator("mastery_thresholds")
    @classmethod
    def check_thresholds(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        # Raises ValueError on bad length or ordering
        MasteryPolicy(thresholds=v)
        return v

    def policy(self) -> MasteryPolicy:
        return MasteryPolicy(thresholds=self.mastery_thresholds)


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/lexis/config.toml (if exists)
    3. Environment variables (LEXIS_*)
    4. cli_overrides (passed from Typer)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
