from .loader import load_app_config, resolve_config, validate_payload
from .schema import AppConfig, LoadedConfig, default_app_config

__all__ = [
    "AppConfig",
    "LoadedConfig",
    "default_app_config",
    "load_app_config",
    "resolve_config",
    "validate_payload",
]
