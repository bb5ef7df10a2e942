"""Configuration for conlog loggers.

Layered resolution (highest priority wins):
  1. Explicit arguments — Logger(...) keywords or CLI flags
  2. Environment — LOG_LEVEL / NODE_LOG_LEVEL, BORING_LOG, USE_CONSOLE_LOG,
     HIDE_ARGUMENTS, LOG_SILENT
  3. Project config — nearest .conlog.json walking up from the cwd
  4. Defaults — level "info", every flag off

A project file looks like::

    {"level": "debug", "boring": true, "hide_arguments": true}
"""

import json
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .levels import DEFAULT_LEVEL


PROJECT_CONFIG_NAME = ".conlog.json"

LEVEL_ENV_VARS = ("LOG_LEVEL", "NODE_LOG_LEVEL")

# Settings field -> environment variable
FLAG_ENV_VARS = {
    "boring": "BORING_LOG",
    "use_console_log": "USE_CONSOLE_LOG",
    "hide_arguments": "HIDE_ARGUMENTS",
    "silent": "LOG_SILENT",
}

FALSE_STRINGS = {"", "false", "0", "no", "off"}


@dataclass
class Settings:
    """Startup values for a Logger.

    Attributes:
        level: Level name or index
        boring: Disable colors
        use_console_log: Write every line through the sink's ``log``
        hide_arguments: Skip the startup/level-change banners
        silent: Start silenced
    """
    level: Union[str, int] = DEFAULT_LEVEL
    boring: bool = False
    use_console_log: bool = False
    hide_arguments: bool = False
    silent: bool = False


def parse_flag(value: Any) -> bool:
    """Interpret an environment/config value as a boolean."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() not in FALSE_STRINGS


# ---------------------------------------------------------------------------
# Project config file
# ---------------------------------------------------------------------------
def find_project_config(start_dir=None) -> Optional[Path]:
    """Walk up from start_dir looking for .conlog.json.

    Returns the path if found, None otherwise.
    """
    current = Path(start_dir or os.getcwd()).resolve()
    for _ in range(20):  # safety limit
        candidate = current / PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def load_json(path) -> Dict[str, Any]:
    """Load a JSON object file, returning an empty dict on error."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def load_project_config(start_dir=None) -> Dict[str, Any]:
    """Load the nearest .conlog.json, or an empty dict."""
    path = find_project_config(start_dir)
    return load_json(path) if path else {}


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------
def apply_overrides(settings: Settings, values: Mapping[str, Any]) -> Settings:
    """Return settings with the known, non-None keys of values applied."""
    known = {f.name for f in fields(Settings)}
    updates = {}
    for key, value in values.items():
        name = key.replace("-", "_")
        if name not in known or value is None:
            continue
        updates[name] = value if name == "level" else parse_flag(value)
    return replace(settings, **updates)


def settings_from_env(environ: Mapping[str, str]) -> Dict[str, Any]:
    """Collect the settings present in an environment mapping."""
    values: Dict[str, Any] = {}
    for var in LEVEL_ENV_VARS:
        if environ.get(var):
            values["level"] = environ[var]
            break
    for name, var in FLAG_ENV_VARS.items():
        if var in environ:
            values[name] = parse_flag(environ[var])
    return values


def load_settings(environ: Optional[Mapping[str, str]] = None,
                  start_dir=None, **overrides: Any) -> Settings:
    """Resolve Settings from defaults, project file, environment, overrides.

    Args:
        environ: Environment mapping (default: os.environ)
        start_dir: Where to start looking for .conlog.json (default: cwd)
        **overrides: Explicit values; None means "not given"

    Returns:
        Resolved Settings
    """
    if environ is None:
        environ = os.environ
    settings = Settings()
    settings = apply_overrides(settings, load_project_config(start_dir))
    settings = apply_overrides(settings, settings_from_env(environ))
    settings = apply_overrides(settings, overrides)
    return settings
