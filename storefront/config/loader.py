from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from ..errors import ConfigError
from ..util.env import env_flag, env_float
from .schema import AppConfig, LoadedConfig, default_app_config

LOGGER = logging.getLogger(__name__)

CONFIG_PATH_ENV = "STOREFRONT_CONFIG"
INTERVAL_ENV = "STOREFRONT_REFRESH_INTERVAL_SEC"
TIMEOUT_ENV = "STOREFRONT_HTTP_TIMEOUT_SEC"
PROFILE_ENV = "STOREFRONT_PROFILE"
SCHEDULER_ENABLED_ENV = "STOREFRONT_SCHEDULER_ENABLED"


def load_yaml(path: Path | str) -> dict[str, Any]:
    cfg_path = Path(path)
    with cfg_path.open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}
    if not isinstance(payload, dict):
        raise ConfigError(f"Configuration root must be a mapping, got {type(payload)!r}")
    return payload


def _format_errors(exc: PydanticValidationError) -> list[str]:
    errors: list[str] = []
    for entry in exc.errors():
        location = ".".join(str(part) for part in entry.get("loc", ()))
        message = str(entry.get("msg") or "invalid")
        errors.append(f"{location}: {message}" if location else message)
    return errors


def load_app_config(path: str | Path) -> LoadedConfig:
    cfg_path = Path(path)
    raw = load_yaml(cfg_path)
    try:
        app_config = AppConfig.model_validate(raw)
    except PydanticValidationError as exc:
        raise ConfigError(f"{cfg_path}: " + "; ".join(_format_errors(exc))) from exc
    return LoadedConfig(path=cfg_path, data=app_config)


def _apply_env_overrides(config: AppConfig) -> AppConfig:
    interval = env_float(INTERVAL_ENV)
    timeout = env_float(TIMEOUT_ENV)
    updates: dict[str, Any] = {}
    profile = (os.getenv(PROFILE_ENV) or "").strip()
    if profile:
        updates["profile"] = profile
    scheduler_update: dict[str, Any] = {}
    if os.getenv(SCHEDULER_ENABLED_ENV) is not None:
        scheduler_update["enabled"] = env_flag(SCHEDULER_ENABLED_ENV)
    if interval is not None and interval > 0:
        scheduler_update["interval_sec"] = interval
    if scheduler_update:
        updates["scheduler"] = config.scheduler.model_copy(update=scheduler_update)
    if timeout is not None and timeout > 0:
        updates["http"] = config.http.model_copy(update={"timeout_sec": timeout})
    if not updates:
        return config
    LOGGER.debug("config.env_overrides", extra={"fields": sorted(updates)})
    return config.model_copy(update=updates)


def resolve_config(path: str | Path | None = None) -> LoadedConfig:
    """Load configuration from ``path``, ``$STOREFRONT_CONFIG`` or the built-in defaults."""

    candidate = path or os.getenv(CONFIG_PATH_ENV)
    if candidate:
        loaded = load_app_config(candidate)
    else:
        loaded = LoadedConfig(path=None, data=default_app_config())
    return LoadedConfig(path=loaded.path, data=_apply_env_overrides(loaded.data))


def validate_payload(payload: Any) -> list[str]:
    """Return a list of validation errors for ``payload``.

    The function returns an empty list when the payload is valid.
    """

    try:
        AppConfig.model_validate(payload)
    except PydanticValidationError as exc:
        return _format_errors(exc)
    return []


__all__ = ["LoadedConfig", "load_app_config", "load_yaml", "resolve_config", "validate_payload"]
