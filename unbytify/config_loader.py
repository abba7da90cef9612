from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Dict

import yaml
from pydantic import BaseModel, BeforeValidator, Field, ValidationError, field_validator

from unbytify.size_format import DEFAULT_PRECISION
from unbytify.size_parser import SizeParseError, parse_size
from unbytify.units import U64_MAX

LOGGER = logging.getLogger(__name__)


def _coerce_size(value: object) -> int:
    if isinstance(value, bool):
        raise ValueError("size must be a number or a size string")
    if isinstance(value, int):
        if value < 0 or value > U64_MAX:
            raise ValueError(f"size out of range: {value}")
        return value
    if isinstance(value, str):
        try:
            return parse_size(value)
        except SizeParseError as exc:
            raise ValueError(str(exc)) from exc
    raise ValueError("size must be a number or a size string")


SizeBytes = Annotated[int, BeforeValidator(_coerce_size)]


class AppSettings(BaseModel):
    precision: int = Field(default=DEFAULT_PRECISION, ge=0, le=3)


class AppConfig(BaseModel):
    settings: AppSettings = Field(default_factory=AppSettings)
    limits: Dict[str, SizeBytes] = Field(default_factory=dict, validate_default=True)

    @field_validator("limits")
    @classmethod
    def validate_limits(cls, limits: Dict[str, int]) -> Dict[str, int]:
        if not limits:
            raise ValueError("At least one limit is required")
        return limits


def load_config(config_path: Path) -> AppConfig:
    LOGGER.info("Loading config path=%s", config_path, extra={"category": "CONFIG"})
    if not config_path.exists():
        raise ValueError(f"Config file not found: {config_path}")

    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        LOGGER.error("Config read failed path=%s error=%s", config_path, exc, extra={"category": "ERRORS"})
        raise ValueError(f"Cannot read config file: {exc}") from exc

    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in config file: {exc}") from exc

    if not isinstance(parsed, dict):
        raise ValueError("Configuration root must be a YAML object")

    try:
        cfg = AppConfig.model_validate(parsed)
        LOGGER.info("Config loaded limits=%s", sorted(cfg.limits.keys()), extra={"category": "CONFIG"})
        return cfg
    except ValidationError as exc:
        LOGGER.error("Config validation failed error=%s", exc, extra={"category": "ERRORS"})
        raise ValueError(f"Invalid configuration: {exc}") from exc
