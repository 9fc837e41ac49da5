from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import json

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sample_shrinker.audio_contract import (
    BIT_DEPTH_CHOICES,
    DEFAULT_AUTO_MONO_THRESHOLD_DB,
    DEFAULT_BACKUP_DIR,
    DEFAULT_SOURCE_EXTENSION,
    DEFAULT_TARGET_BIT_DEPTH,
    DEFAULT_TARGET_CHANNELS,
    normalize_extension,
)
from sample_shrinker.domain.errors import ConfigError

MAX_VERBOSITY = 2


class RunMode(str, Enum):
    """What a run does with each planned sample."""

    CONVERT = "convert"
    DRY_RUN = "dry-run"
    LIST = "list"


class TargetConfig(BaseModel):
    """Process-wide conversion targets, immutable once built."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    target_bit_depth: int = DEFAULT_TARGET_BIT_DEPTH
    minimum_bit_depth: int | None = None
    target_sample_rate: int | None = Field(None, gt=0)
    minimum_sample_rate: int | None = Field(None, gt=0)
    target_channels: int = Field(DEFAULT_TARGET_CHANNELS, ge=1)
    auto_mono: bool = False
    auto_mono_threshold_db: float = Field(DEFAULT_AUTO_MONO_THRESHOLD_DB, le=0.0)
    pre_normalize: bool = False
    generate_spectrograms: bool = True
    backup_dir: Path = DEFAULT_BACKUP_DIR
    mode: RunMode = RunMode.CONVERT
    source_extension: str = DEFAULT_SOURCE_EXTENSION
    log_file: Path | None = None
    verbosity: int = Field(0, ge=0)
    tool_timeout_seconds: float = Field(300.0, gt=0.0)
    jobs: int = Field(1, ge=1)

    @property
    def sample_rate_configured(self) -> bool:
        """Whether a sample-rate target or minimum was requested."""

        return (
            self.target_sample_rate is not None
            or self.minimum_sample_rate is not None
        )

    @field_validator("target_bit_depth", "minimum_bit_depth")
    @classmethod
    def _validate_bit_depth(cls, value: int | None) -> int | None:
        if value is None:
            return value
        if value not in BIT_DEPTH_CHOICES:
            allowed = ", ".join(str(choice) for choice in BIT_DEPTH_CHOICES)
            raise ValueError(f"bit-depth must be one of {allowed}; got {value}.")
        return value

    @field_validator("source_extension")
    @classmethod
    def _validate_source_extension(cls, value: str) -> str:
        normalized = normalize_extension(value)
        if not normalized:
            raise ValueError("source_extension must not be empty.")
        return normalized

    @field_validator("verbosity")
    @classmethod
    def _clamp_verbosity(cls, value: int) -> int:
        return min(value, MAX_VERBOSITY)


def build_target_config(**values: Any) -> TargetConfig:
    """Validate ``values`` into a :class:`TargetConfig`.

    Raises :class:`ConfigError` listing every invalid field.
    """

    try:
        return TargetConfig.model_validate(values)
    except ValidationError as exc:
        messages = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'config'}: "
            f"{error['msg']}"
            for error in exc.errors()
        )
        raise ConfigError(messages) from exc


def load_target_config(path: Path, **overrides: Any) -> TargetConfig:
    """Load a JSON or YAML mapping of TargetConfig fields, then apply ``overrides``."""

    data = _load_config_data(path)
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: '{path}'")
    return build_target_config(**{**data, **overrides})


def _load_config_data(path: Path) -> Any:
    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            with path.open("r", encoding="utf-8") as handle:
                return yaml.safe_load(handle) or {}

        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except OSError as exc:
        raise ConfigError(f"Cannot read config file '{path}': {exc}") from exc
    except (ValueError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot parse config file '{path}': {exc}") from exc
