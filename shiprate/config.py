"""YAML configuration loader with env var resolution and Pydantic validation.

Loads config from (priority order):
1. explicit ``config_path`` argument
2. ./shiprate.yaml (working directory)
3. ~/.shiprate/config.yaml (user home)

Environment variables override YAML: SHIPRATE_<FIELD>.
${VAR} references in YAML values resolve from environment at load time.

The resulting RateConfig is frozen and is passed explicitly into every
calculator; nothing in the rating path reads ambient settings.
"""

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from shiprate.errors.domain import ConfigError

logger = logging.getLogger(__name__)

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")
_ENV_PREFIX = "SHIPRATE_"


def resolve_env_vars(value: str) -> str:
    """Resolve ${VAR} references in a string from environment variables.

    Missing env vars resolve to empty string.
    """
    def _replace(match: re.Match) -> str:
        return os.environ.get(match.group(1), "")

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _resolve_env_vars_recursive(data: Any) -> Any:
    if isinstance(data, str):
        return resolve_env_vars(data)
    elif isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    return data


class RateConfig(BaseModel):
    """Settings for rate calculation.

    Attributes:
        unit_multiplier: Converts stored variant weights into ounces.
        default_weight: Weight used for variants with no positive weight.
        units: Unit system reported on greedy packages.
        max_weight_per_package: Global per-package cap (0 = unlimited),
            expressed in stored weight units.
        handling_fee: Flat fee in major currency units added to every rate.
        country_max_weights: ISO country code to max ounces per package
            (0 = unlimited, null = service not offered).
        cache_ttl_seconds: Lifetime of cached carrier responses.
        locale: Locale folded into cache keys.
        freight_account: Account used for freight services.
        multi_warehouse: Use per-stock-location carrier credentials.
    """

    model_config = ConfigDict(frozen=True)

    unit_multiplier: float = 1.0
    default_weight: float = 0.0
    units: Literal["imperial", "metric"] = "imperial"
    max_weight_per_package: float = 0.0
    handling_fee: float = 0.0
    country_max_weights: dict[str, float | None] = Field(default_factory=dict)
    cache_ttl_seconds: int = 3600
    locale: str = "en"
    freight_account: str = ""
    multi_warehouse: bool = False

    @field_validator("unit_multiplier")
    @classmethod
    def multiplier_positive(cls, value: float) -> float:
        """Reject multipliers that would zero out every weight."""
        if value <= 0:
            raise ValueError("unit_multiplier must be positive")
        return value

    @field_validator("max_weight_per_package", "default_weight", "cache_ttl_seconds")
    @classmethod
    def not_negative(cls, value: float) -> float:
        """Reject negative limits."""
        if value < 0:
            raise ValueError("must not be negative")
        return value

    @field_validator("country_max_weights")
    @classmethod
    def normalize_countries(cls, value: dict[str, float | None]) -> dict[str, float | None]:
        """Upper-case ISO keys so lookups match address data."""
        normalized = {}
        for country, limit in value.items():
            if limit is not None and limit < 0:
                raise ValueError(f"max weight for {country} must not be negative")
            normalized[country.strip().upper()] = limit
        return normalized


def _find_config_file() -> Path | None:
    """Search for config file in standard locations."""
    candidates = [
        Path.cwd() / "shiprate.yaml",
        Path.cwd() / "shiprate.yml",
        Path.home() / ".shiprate" / "config.yaml",
        Path.home() / ".shiprate" / "config.yml",
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply SHIPRATE_<FIELD> env var overrides to config data.

    ``SHIPRATE_COUNTRY_MAX_WEIGHTS`` is parsed as a JSON object; every
    other value is handed to Pydantic as a string for coercion.
    """
    known_fields = set(RateConfig.model_fields.keys())
    result = dict(data)
    for key, value in os.environ.items():
        if not key.startswith(_ENV_PREFIX):
            continue
        field = key[len(_ENV_PREFIX):].lower()
        if field not in known_fields:
            continue
        if field == "country_max_weights":
            try:
                result[field] = json.loads(value)
            except json.JSONDecodeError as e:
                raise ConfigError(f"{key} is not valid JSON: {e}") from e
        else:
            result[field] = value
    return result


def load_config(config_path: str | None = None) -> RateConfig:
    """Load rate configuration from YAML file with env var resolution.

    Args:
        config_path: Explicit path to config file. If None, searches
            standard locations (cwd, then ~/.shiprate/).

    Returns:
        Validated RateConfig. Defaults apply when no file is found.

    Raises:
        FileNotFoundError: If an explicit config_path does not exist.
        ConfigError: If the file or overrides fail validation.
    """
    raw_data: dict[str, Any] = {}
    if config_path:
        path: Path | None = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        path = _find_config_file()

    if path is not None:
        logger.info("Loading config from %s", path)
        with open(path) as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"{path} must contain a mapping")
        raw_data = loaded

    data = _resolve_env_vars_recursive(raw_data)
    data = _apply_env_overrides(data)

    try:
        return RateConfig(**data)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
