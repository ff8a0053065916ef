"""Settings loading with deterministic precedence.

The cascade is always:
1) Explicit keyword overrides
2) Environment variables
3) YAML config file (``~/.config/pastebin/pastebin.yaml`` by default)
4) Built-in model defaults

Environment variable format:
- Prefix: ``PASTEBIN_``
- Nested keys: ``__`` separator
- Example: ``PASTEBIN_LOGGING__LEVEL=DEBUG`` -> ``logging.level = "DEBUG"``
- ``PASTEBIN_CONFIG_FILE`` selects an alternate YAML file.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

from .models import DEFAULT_CONFIG_PATH, PastebinSettings

CONFIG_FILE_ENV = "PASTEBIN_CONFIG_FILE"


def load_settings(
    *,
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> PastebinSettings:
    """Load ``PastebinSettings`` from overrides, env, and the YAML file."""
    path = resolve_config_path(config_path=config_path, environ=environ)
    settings_cls = type(
        "PastebinSettings",
        (PastebinSettings,),
        {"_config_path": path, "__module__": PastebinSettings.__module__},
    )
    return settings_cls(**overrides)


def resolve_config_path(
    *,
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Return the YAML config path from argument, env, or the default."""
    if config_path is not None:
        return Path(config_path).expanduser()
    env = environ if environ is not None else os.environ
    raw = env.get(CONFIG_FILE_ENV, "").strip()
    if raw:
        return Path(raw).expanduser()
    return DEFAULT_CONFIG_PATH
