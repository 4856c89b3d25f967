from __future__ import annotations

import os
from pathlib import Path

_COMMENT_PREFIXES: tuple[str, ...] = ("#", "//")
_TRUE_VALUES = {"1", "true", "yes", "on"}


def _strip_quotes(value: str) -> str:
    if not value:
        return value
    if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
        return value[1:-1]
    return value


def load_env_file(path: str | Path = ".env") -> None:
    """Populate ``os.environ`` using key=value pairs from ``path``.

    Existing environment variables are never overwritten.
    Lines starting with ``#`` or ``//`` (after stripping leading whitespace)
    are ignored, as are empty lines. ``export `` prefixes are also supported.
    """

    env_path = Path(path)
    if not env_path.is_file():
        return

    try:
        content = env_path.read_text(encoding="utf-8")
    except OSError:
        return

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith(_COMMENT_PREFIXES):
            continue
        if line.startswith("export "):
            line = line[len("export "):]
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        os.environ.setdefault(key, _strip_quotes(value.strip()))


def env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE_VALUES


def env_float(name: str, default: float | None = None) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default
