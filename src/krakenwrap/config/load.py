# src/krakenwrap/config/load.py
from __future__ import annotations

import os
import re
import shlex
import shutil
from pathlib import Path
from string import Template
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from krakenwrap.config.schema import Settings
from krakenwrap.errors import ConfigError
from krakenwrap.utils.logger import get_logger

LOG = get_logger("config")

# looked up on PATH, same as `which config-metawrap` in the shell modules
CONFIG_LOOKUP_NAME = "config-metawrap"
CONFIG_ENV_VAR = "KRAKENWRAP_CONFIG"

_ASSIGN_RE = re.compile(r"^(?:export\s+)?(?P<key>[A-Za-z_][A-Za-z0-9_]*)=(?P<value>.*)$")


def find_config(explicit: Optional[Path] = None) -> Path:
    """
    Resolve the config file:
      1) an explicit --config path,
      2) $KRAKENWRAP_CONFIG,
      3) `config-metawrap` found on PATH.
    """
    if explicit is not None:
        if not explicit.is_file():
            raise ConfigError(f"Config file {explicit} does not exist.")
        return explicit

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path).expanduser()
        if not p.is_file():
            raise ConfigError(f"Config file {p} (from ${CONFIG_ENV_VAR}) does not exist.")
        return p

    found = shutil.which(CONFIG_LOOKUP_NAME)
    if not found:
        raise ConfigError(
            f"Cannot find the config file: '{CONFIG_LOOKUP_NAME}' is not on PATH. "
            f"Pass --config or set ${CONFIG_ENV_VAR}."
        )
    return Path(found)


def _parse_shell_assignments(text: str) -> Dict[str, str]:
    """
    Read `KEY=value` lines the way `source config-file` would for simple files.
    $VAR / ${VAR} expand against earlier keys, then the environment.
    Command substitutions cannot be evaluated and are skipped.
    """
    values: Dict[str, str] = {}
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        m = _ASSIGN_RE.match(line)
        if not m:
            LOG.debug("config line %d ignored: %s", lineno, line)
            continue
        key, value = m.group("key"), m.group("value")
        if "$(" in value or "`" in value:
            LOG.debug("config line %d uses command substitution; skipped: %s", lineno, line)
            continue
        try:
            parts = shlex.split(value, comments=True)
        except ValueError as e:
            raise ConfigError(f"Malformed config line {lineno}: {line} ({e})") from e
        value = " ".join(parts)
        scope = {**os.environ, **values}
        values[key] = Template(value).safe_substitute(scope)
    return values


def read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    # Prefer a YAML mapping; anything else is treated as a sourced shell file
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError:
        data = None
    if isinstance(data, dict):
        return data
    return _parse_shell_assignments(text)


def load_settings(explicit: Optional[Path] = None) -> Settings:
    path = find_config(explicit)
    LOG.debug("Loading config from %s", path)
    data = read_config(path)
    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        missing = ", ".join(str(err["loc"][0]) for err in e.errors())
        raise ConfigError(f"Config file {path} is incomplete or invalid ({missing}).") from e
