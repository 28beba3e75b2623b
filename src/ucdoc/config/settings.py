"""Configuration settings and loading."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ucdoc.errors import ConfigError

DEFAULT_CONFIG_FILE = "ucdoc.yaml"


def _as_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


class UcdocSettings(BaseSettings):
    """Configuration for ucdoc."""

    model_config = SettingsConfigDict(
        env_prefix="UCDOC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    generator: Literal["pict", "builtin"] = "pict"
    pict_path: str = "pict"
    pict_args: str = Field(default="", description="Extra pict arguments, shell quoted")
    tmp_dir: Path | None = Field(default=None, description="Directory for generator model files")
    seed: int | None = Field(default=0, description="Seed of the builtin generator")
    strict: bool = True
    scenario_id_prefix: str = "TP"
    keyword_format: str = "「{term}」"
    encoding: str = "utf-8"

    @field_validator("keyword_format")
    @classmethod
    def validate_keyword_format(cls, v: str) -> str:
        if "{term}" not in v:
            raise ValueError("keyword_format must contain '{term}'")
        try:
            v.format(term="x")
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(f"keyword_format is not a valid format string: {e}") from e
        return v

    @field_validator("scenario_id_prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        if not v or any(ch.isspace() for ch in v):
            raise ValueError("scenario_id_prefix must be non-empty and contain no whitespace")
        return v


def load_settings(config_path: str | Path | None = None, **overrides: Any) -> UcdocSettings:
    """Load settings from a YAML file and the environment.

    Priority: overrides (CLI options) > env vars > config file > defaults.
    Without ``config_path`` an ``ucdoc.yaml`` in the working directory is
    used when present.

    Raises:
        ConfigError: If the file is unreadable or a value is invalid.
    """
    config_data: dict[str, Any] = {}

    path = Path(config_path) if config_path is not None else Path(DEFAULT_CONFIG_FILE)
    if config_path is not None and not path.exists():
        raise ConfigError(f"configuration file not found: {path}", path=str(path))
    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"failed to read configuration: {e}", path=str(path)) from e
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigError(
                f"configuration must be a YAML mapping, got {type(loaded).__name__}",
                path=str(path),
            )
        config_data.update(loaded or {})

    config_data.update(_get_env_overrides())
    config_data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return UcdocSettings(**config_data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"invalid settings: {problems}") from e


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    env_mappings: dict[str, tuple[str, Any]] = {
        "UCDOC_GENERATOR": ("generator", str),
        "UCDOC_PICT_PATH": ("pict_path", str),
        "UCDOC_PICT_ARGS": ("pict_args", str),
        "UCDOC_TMP_DIR": ("tmp_dir", str),
        "UCDOC_SEED": ("seed", int),
        "UCDOC_STRICT": ("strict", _as_bool),
        "UCDOC_SCENARIO_ID_PREFIX": ("scenario_id_prefix", str),
        "UCDOC_KEYWORD_FORMAT": ("keyword_format", str),
        "UCDOC_ENCODING": ("encoding", str),
    }

    for env_key, (config_key, converter) in env_mappings.items():
        value = os.environ.get(env_key)
        if value is not None:
            try:
                overrides[config_key] = converter(value)
            except (ValueError, TypeError) as e:
                raise ConfigError(f"invalid value for {env_key}: {value}") from e

    return overrides
