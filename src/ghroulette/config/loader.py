from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from ghroulette.config.models import RouletteSettings
from ghroulette.core.errors import ConfigError

# ${VAR} or ${VAR:-fallback}
_ENV_PATTERN = re.compile(r"\$\{(?P<name>[A-Z0-9_]+)(?::-(?P<default>[^}]*))?\}")


def load_config(path: str) -> RouletteSettings:
    """Load and validate a roulette config file (YAML, or JSON as a YAML subset)."""
    raw = _read_mapping(Path(path))
    load_dotenv()
    settings = _expand_env_vars(raw)
    try:
        return RouletteSettings.model_validate(settings)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}: {exc}") from exc


def _read_mapping(config_path: Path) -> dict[str, Any]:
    if not config_path.is_file():
        raise ConfigError(f"Config file does not exist: {config_path}")
    try:
        with config_path.open(encoding="utf-8") as handle:
            raw = yaml.safe_load(handle)
    except OSError as exc:
        raise ConfigError(f"Failed to read config file: {config_path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {config_path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")
    return raw


def _expand_env_vars(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _expand_env_vars(val) for key, val in value.items()}
    if isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    if isinstance(value, str):
        return _ENV_PATTERN.sub(_env_value, value)
    return value


def _env_value(match: re.Match[str]) -> str:
    name, default = match.group("name"), match.group("default")
    env_value = os.getenv(name)
    if env_value:
        return env_value
    if default is not None:
        return default
    raise ConfigError(f"Missing required environment variable: {name}")
