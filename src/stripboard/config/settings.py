"""Stripboard configuration settings."""

from __future__ import annotations

import json
import os
import tomllib
from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from stripboard.exceptions import ConfigurationError, check_config_keys


class StripboardSettings(BaseSettings):
    """Stripboard configuration settings.

    Settings are loaded with the following precedence (highest to lowest):
    1. CLI arguments (when provided via command flags)
       Example: stripboard schedule request.yaml --max-scenes 20

    2. Config file values (YAML, TOML, or JSON)
       Example: stripboard --config production.yaml schedule request.yaml
       Multiple files: Later files override earlier ones

    3. Environment variables (prefixed with STRIPBOARD_)
       Example: export STRIPBOARD_MAX_HOURS_PER_DAY=12

    4. .env file (in current directory or specified path)
       Example: STRIPBOARD_LOG_LEVEL=DEBUG in .env file

    5. Default values (defined in field declarations below)

    Use 'stripboard config show' to see the effective configuration
    after all sources are merged.
    """

    model_config = SettingsConfigDict(
        env_prefix="STRIPBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Debug settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # Logging settings
    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    log_format: str = Field(
        default="console",
        description="Log output format (console, json, structured)",
        pattern="^(console|json|structured)$",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional log file path",
    )

    # LLM settings
    llm_provider: str | None = Field(
        default=None,
        description="Preferred LLM provider: github_models, openai_compatible",
    )
    llm_endpoint: str | None = Field(
        default=None,
        description="OpenAI-compatible API endpoint URL",
    )
    llm_api_key: str | None = Field(
        default=None,
        description="API key for OpenAI-compatible endpoint",
    )
    llm_model: str | None = Field(
        default=None,
        description=(
            "Model to use for schedule generation. "
            "Use 'default', 'auto', 'none', or empty string for automatic selection."
        ),
    )
    llm_timeout: float = Field(
        default=60.0,
        description="HTTP timeout in seconds for a single provider request",
        gt=0,
    )
    llm_max_retries: int = Field(
        default=3,
        description="Maximum attempts for transient provider failures",
        ge=1,
        le=10,
    )
    github_token: str | None = Field(
        default=None,
        description="Token for the GitHub Models provider (falls back to GITHUB_TOKEN)",
    )

    # Scheduling settings
    max_scenes_per_batch: int = Field(
        default=35,
        description="Scene ceiling for a single generative scheduling request",
        ge=1,
    )
    max_hours_per_day: float = Field(
        default=10.0,
        description="Maximum length of a shoot day in hours",
        gt=0,
        le=24,
    )
    setup_buffer_minutes: int = Field(
        default=60,
        description="Minutes reserved per day for setup and company moves",
        ge=0,
    )
    default_scene_minutes: int = Field(
        default=45,
        description="Shoot duration assumed for scenes without an estimate",
        gt=0,
    )
    series_target_days: int = Field(
        default=21,
        description="Target number of shoot days for a whole series",
        ge=1,
    )
    series_max_days: int = Field(
        default=28,
        description="Hard ceiling on shoot days for a whole series",
        ge=1,
    )
    enforce_series_day_cap: bool = Field(
        default=False,
        description="Fail the run instead of warning when the day ceiling is exceeded",
    )

    # Generation settings
    schedule_temperature: float = Field(
        default=0.6,
        description="Temperature for schedule generation requests",
        ge=0.0,
        le=2.0,
    )
    schedule_max_tokens: int = Field(
        default=8000,
        description="Max tokens for schedule generation requests",
        gt=0,
    )
    schedule_request_timeout: float = Field(
        default=120.0,
        description="Seconds to wait for one batch before using the fallback",
        gt=0,
    )
    rehearsal_temperature: float = Field(
        default=0.7,
        description="Temperature for rehearsal suggestion requests",
        ge=0.0,
        le=2.0,
    )
    rehearsal_max_tokens: int = Field(
        default=4000,
        description="Max tokens for rehearsal suggestion requests",
        gt=0,
    )

    @property
    def day_cap_minutes(self) -> int:
        """Usable shooting minutes per day after the setup buffer."""
        return max(1, int(self.max_hours_per_day * 60) - self.setup_buffer_minutes)

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path | None:
        """Expand environment variables and resolve path."""
        if v is None:
            return None
        if isinstance(v, str):
            return Path(os.path.expandvars(v)).expanduser().resolve()
        if isinstance(v, Path):
            return v.resolve()
        raise ValueError(
            f"Path fields must be a string or Path, got {type(v).__name__}: {v!r}"
        )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        """Normalize log level to uppercase for case-insensitive handling."""
        if isinstance(v, str):
            return v.upper()
        raise ValueError(f"log_level must be a string, got {type(v).__name__}")

    @field_validator("log_format", mode="before")
    @classmethod
    def normalize_log_format(cls, v: Any) -> str:
        """Normalize log format to lowercase for case-insensitive handling."""
        if isinstance(v, str):
            return v.lower()
        raise ValueError(f"log_format must be a string, got {type(v).__name__}")

    @field_validator("llm_model", mode="before")
    @classmethod
    def normalize_llm_model(cls, v: Any) -> Any:
        """Treat placeholders like "default", "auto" or "" as unset."""
        if isinstance(v, str) and v.strip().lower() in {"", "default", "auto", "none"}:
            return None
        return v

    @classmethod
    def from_env(cls) -> StripboardSettings:
        """Create settings from environment variables."""
        return cls()

    @classmethod
    def from_file(cls, config_path: Path | str) -> StripboardSettings:
        """Load settings from a configuration file.

        Args:
            config_path: Path to configuration file (YAML, TOML, or JSON).

        Returns:
            Settings loaded from the file.

        Raises:
            ConfigurationError: If file format is not supported.
            FileNotFoundError: If config file doesn't exist.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        suffix = config_path.suffix.lower()

        if suffix in {".yml", ".yaml"}:
            with config_path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        elif suffix == ".toml":
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        elif suffix == ".json":
            with config_path.open(encoding="utf-8") as f:
                data = json.load(f)
        else:
            raise ConfigurationError(
                message=f"Unsupported configuration file format: {suffix}",
                hint="Use one of the supported formats: .yml, .yaml, .toml, or .json",
                details={
                    "file": str(config_path),
                    "detected_format": suffix,
                    "supported_formats": [".yml", ".yaml", ".toml", ".json"],
                },
            )

        check_config_keys(data)

        return cls(**data)

    @classmethod
    def from_multiple_sources(
        cls,
        config_files: list[Path | str] | None = None,
        env_file: Path | str | None = None,
        cli_args: dict[str, Any] | None = None,
    ) -> StripboardSettings:
        """Load settings with proper precedence from multiple sources.

        Args:
            config_files: Config files to load (later files override earlier).
            env_file: Path to .env file (default: .env in current directory).
            cli_args: Dictionary of CLI arguments.

        Returns:
            Merged settings from all sources.
        """
        data: dict[str, Any] = {}

        if config_files:
            for config_file in config_files:
                try:
                    file_settings = cls.from_file(config_file)
                    data.update(file_settings.model_dump(exclude_unset=True))
                except FileNotFoundError:
                    # Imported here to avoid a cycle during module initialization
                    from stripboard.config.logging import get_logger as _get_logger

                    _get_logger("stripboard.config.settings").warning(
                        "Configuration file not found, using defaults",
                        config_file=str(config_file),
                    )

        if env_file:
            settings = cast(
                "StripboardSettings", cast(Any, cls)(_env_file=env_file, **data)
            )
        else:
            settings = cls(**data)

        if cli_args:
            cli_data = {k: v for k, v in cli_args.items() if v is not None}
            if cli_data:
                updated_data = settings.model_dump()
                updated_data.update(cli_data)
                settings = cls(**updated_data)

        return settings


# Global settings instance
_settings: StripboardSettings | None = None
# Cache for config file paths that exist
_config_paths_cache: list[Path | str] | None = None


def _get_config_paths() -> list[Path | str]:
    """Get list of config file paths to check.

    Returns paths in priority order (later files override earlier).
    """
    global _config_paths_cache

    if _config_paths_cache is not None:
        return _config_paths_cache

    potential_paths = []
    for directory in (
        Path("/etc/stripboard"),
        Path.home() / ".stripboard",
        Path.home() / ".config" / "stripboard",
        Path.cwd() / ".stripboard",
    ):
        for name in ("config.yaml", "config.json", "config.toml"):
            potential_paths.append(directory / name)
    for name in ("stripboard.yaml", "stripboard.json", "stripboard.toml"):
        potential_paths.append(Path.cwd() / name)

    existing_paths: list[Path | str] = []
    for path in potential_paths:
        try:
            if path.exists() and path.is_file():
                existing_paths.append(path)
        except OSError:
            continue

    _config_paths_cache = existing_paths
    return existing_paths


def get_settings() -> StripboardSettings:
    """Get the global settings instance.

    Returns:
        Global StripboardSettings instance.
    """
    global _settings
    if _settings is None:
        config_paths = _get_config_paths()
        if config_paths:
            _settings = StripboardSettings.from_multiple_sources(
                config_files=config_paths
            )
        else:
            _settings = StripboardSettings.from_env()
    return _settings


def set_settings(settings: StripboardSettings) -> None:
    """Set the global settings instance.

    Args:
        settings: Settings instance to use globally.
    """
    global _settings
    _settings = settings


def clear_settings_cache() -> None:
    """Clear the global settings cache.

    This forces get_settings() to re-read from environment variables
    and configuration files on the next call.
    """
    global _settings, _config_paths_cache
    _settings = None
    _config_paths_cache = None


def reset_settings() -> None:
    """Reset the global settings instance."""
    clear_settings_cache()


def get_settings_for_cli(
    config_file: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> StripboardSettings:
    """Get settings for CLI commands with consistent precedence.

    Args:
        config_file: Optional specific config file to load. If not provided,
                    uses standard config locations.
        cli_overrides: Dictionary of CLI argument overrides.
                      Only non-None values are applied.

    Returns:
        StripboardSettings instance with all sources merged.

    Raises:
        FileNotFoundError: If config_file is specified but doesn't exist.
    """
    if config_file:
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")
        return StripboardSettings.from_multiple_sources(
            config_files=[config_file],
            cli_args=cli_overrides,
        )

    settings = get_settings()
    if cli_overrides:
        filtered_overrides = {k: v for k, v in cli_overrides.items() if v is not None}
        if filtered_overrides:
            data = settings.model_dump()
            data.update(filtered_overrides)
            settings = StripboardSettings(**data)
    return settings
