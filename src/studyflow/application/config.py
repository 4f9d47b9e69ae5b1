from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from studyflow.domain.constants import (
    BREAK_DURATION_SECONDS,
    FOCUS_DURATION_SECONDS,
    REVISION_DEFAULT_SECONDS,
)


def _default_data_dir() -> Path:
    return Path.home() / ".local/share/studyflow"


class AppConfig(BaseSettings):
    """
    Configuration model for studyflow.
    Supports loading from:
    1. Environment variables (STUDYFLOW_*)
    2. Config file (~/.config/studyflow/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="STUDYFLOW_",
        extra="ignore",
    )

    # Storage
    data_dir: Path = Field(default_factory=_default_data_dir)
    user_id: str = "local"

    # Timers
    focus_seconds: int = Field(default=FOCUS_DURATION_SECONDS, gt=0)
    break_seconds: int = Field(default=BREAK_DURATION_SECONDS, gt=0)
    revision_budget_seconds: int = REVISION_DEFAULT_SECONDS

    # Log verbosity when no -v flag is given: 0 warnings, 1 info, 2 debug
    verbose: int = Field(default=0, ge=0)

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

        # Path.home() is re-read so tests can point HOME elsewhere
        candidates = [
            Path.home() / ".config/studyflow/config.toml",
            Path.home() / ".studyflow.toml",
        ]
        toml_file = next((f for f in candidates if f.exists()), None)

        # Earlier sources win: CLI overrides, then env, then the file
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("revision_budget_seconds", mode="after")
    @classmethod
    def clamp_revision_budget(cls, v: int) -> int:
        from studyflow.application.timers.revision import clamp_budget

        return clamp_budget(v)

    @field_validator("data_dir", mode="before")
    @classmethod
    def resolve_path(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/studyflow/config.toml (if exists)
    3. Environment variables (STUDYFLOW_*)
    4. cli_overrides (None values are dropped)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
