"""walldash.config_loader

Config loader for walldash.

- Prefers YAML (PyYAML), falls back to JSON for files PyYAML cannot read.
- Environment variables override file values.
- Exposes a typed dataclass `Config` and a `load_config()` helper that accepts
  an optional path override.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from typing import Any

import yaml

from walldash.core.timezone_utils import resolve_timezone

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "walldash.yaml"

ENV_OVERRIDES = {
    "WALLDASH_TIMEZONE": "timezone",
    "WALLDASH_CALENDAR_URL": "calendar_url",
    "WALLDASH_SHEET_URL": "sheet_url",
    "WALLDASH_LOG_LEVEL": "log_level",
}


@dataclass
class Config:
    """Typed configuration for walldash.

    Fields:
        timezone: IANA name of the observer zone for floating ICS times (None = host)
        calendar_url: default ICS feed URL
        sheet_url: default published sheet CSV URL
        service_interval_months: age at which the latest service is overdue (1..60)
        fetch_timeout_seconds: HTTP timeout for feed fetches (1..300)
        fetch_retries: extra fetch attempts after a failure (0..5)
        log_level: logging level name
    """

    timezone: str | None = None
    calendar_url: str | None = None
    sheet_url: str | None = None
    service_interval_months: int = 6
    fetch_timeout_seconds: int = 30
    fetch_retries: int = 2
    log_level: str = "INFO"

    @property
    def tz(self) -> tzinfo | None:
        """Resolved observer zone, or None for the host local zone."""
        return resolve_timezone(self.timezone)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Config:
        """Create Config from a plain mapping, applying defaults and bounds.

        Numeric-like values are coerced to int and clamped to their allowed
        range, with a warning logged for every coercion.
        """
        if data is None:
            data = {}

        def _coerce_int(key: str, default: int, low: int, high: int) -> int:
            raw = data.get(key, default)
            try:
                value = int(raw)
            except (TypeError, ValueError):
                logger.warning("Config %s=%r is not an int; using default %d", key, raw, default)
                return default
            if value < low:
                logger.warning("%s %d below minimum; coercing to %d", key, value, low)
                return low
            if value > high:
                logger.warning("%s %d above maximum; coercing to %d", key, value, high)
                return high
            return value

        def _optional_str(key: str) -> str | None:
            raw = data.get(key)
            if raw is None or str(raw).strip() == "":
                return None
            return str(raw).strip()

        timezone = _optional_str("timezone")
        if timezone is not None and resolve_timezone(timezone) is None:
            timezone = None

        log_level = data.get("log_level", "INFO")
        log_level = str(log_level).upper() if log_level is not None else "INFO"

        return cls(
            timezone=timezone,
            calendar_url=_optional_str("calendar_url"),
            sheet_url=_optional_str("sheet_url"),
            service_interval_months=_coerce_int("service_interval_months", 6, 1, 60),
            fetch_timeout_seconds=_coerce_int("fetch_timeout_seconds", 30, 1, 300),
            fetch_retries=_coerce_int("fetch_retries", 2, 0, 5),
            log_level=log_level,
        )


def _load_yaml_or_json(path: Path) -> Any:
    """Load a mapping from a YAML or JSON file.

    JSON is a subset of YAML for practical purposes; the JSON parser is only
    tried when YAML parsing fails, to report the clearer error.
    """
    text = path.read_text()
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as yaml_exc:
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            raise ValueError(f"Config file {path} is neither valid YAML nor JSON") from yaml_exc
    # safe_load returns None for empty files
    return {} if loaded is None else loaded


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    merged = dict(raw)
    for env_name, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            logger.debug("Config %s overridden by %s", key, env_name)
            merged[key] = value
    return merged


def load_config(path: str | None = None) -> Config:
    """Load configuration from a YAML/JSON file and the environment.

    Args:
        path: Optional path to the config file. Defaults to ./walldash.yaml.

    Returns:
        Config dataclass instance with values from file, env and defaults.

    Behavior:
    - If the file is missing: defaults, still subject to env overrides.
    - If the file exists but top-level is not a mapping: raises ValueError.
    """
    p = Path(path) if path else Path.cwd() / DEFAULT_CONFIG_PATH
    logger.debug("Attempting to load config from %s", p)

    raw: Any = {}
    if p.exists():
        raw = _load_yaml_or_json(p)
        if not isinstance(raw, dict):
            logger.warning("Config file %s parsed but top-level is not a mapping: %r", p, raw)
            raise ValueError("Config file must contain a mapping at top level")  # noqa: TRY004
        logger.info("Loaded configuration from %s", p)
    else:
        logger.info("Config file %s not found; using defaults", p)

    cfg = Config.from_dict(_apply_env_overrides(raw))
    logger.debug("Configuration values: %s", cfg)
    return cfg
