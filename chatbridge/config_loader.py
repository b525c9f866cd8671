"""YAML configuration for the bridge, with ``${VAR}`` placeholders."""

import logging
import os
import re
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import dotenv_values

logger = logging.getLogger("chatbridge")

DEFAULT_CONFIG_PATH = "configs/config_default.yaml"

ENV_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def default_config_path() -> str:
    """Config path from CHATBRIDGE_CONFIG, or the bundled default."""
    return os.getenv("CHATBRIDGE_CONFIG") or DEFAULT_CONFIG_PATH


def resolve_config_path(path: str) -> Path:
    """Relative paths are taken from the project root."""
    candidate = Path(path)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def resolve_env_path(config_path: Path, env_path: str | None = None) -> Path:
    """Pick the dotenv file that goes with ``config_path``.

    ``config_<name>.yaml`` reads ``.env_<name>`` next to it; other names read
    ``.env``.
    """
    if env_path:
        return resolve_config_path(env_path)
    if config_path.stem.startswith("config_"):
        return config_path.with_name(".env_" + config_path.stem[len("config_"):])
    return config_path.with_name(".env")


def load_env_values(env_path: Path) -> dict[str, str]:
    """Read a dotenv file into a dict; ``os.environ`` is left untouched."""
    if not env_path.exists():
        return {}
    return {key: value for key, value in dotenv_values(env_path).items() if value is not None}


def load_config(
    path: str | None = None,
    env_path: str | None = None,
    substitute_env: bool = True,
) -> dict:
    """Read the bridge config.

    Args:
        path: Config file; defaults to ``default_config_path()``.
        env_path: Dotenv file overriding the one paired with the config.
        substitute_env: Fill ``${VAR}`` / ``$VAR`` placeholders.

    Raises:
        RuntimeError: The file is missing or its top level is not a mapping.
    """
    config_path = resolve_config_path(path or default_config_path())
    if not config_path.exists():
        logger.error("Config file not found: %s", config_path)
        raise RuntimeError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise RuntimeError(f"Config file must contain a mapping: {config_path}")

    if substitute_env:
        env_file = resolve_env_path(config_path, env_path)
        env_values = load_env_values(env_file)
        if env_values:
            logger.info("Using %d values from %s", len(env_values), env_file)
        data = _substitute_env_vars(data, env_values)

    logger.info("Loaded configuration from %s", config_path)
    return data


def _substitute_env_vars(obj: Any, env_values: Mapping[str, str] | None = None) -> Any:
    """Fill placeholders in every string of ``obj``.

    Dotenv values take precedence over the process environment. Unset
    variables keep their placeholder and log a warning.
    """
    env_values = env_values or {}

    def lookup(match: re.Match) -> str:
        name = match.group(1) or match.group(2)
        value = env_values.get(name, os.getenv(name))
        if value is None:
            logger.warning("Config references unset environment variable %s", name)
            return match.group(0)
        return value

    if isinstance(obj, dict):
        return {key: _substitute_env_vars(value, env_values) for key, value in obj.items()}
    if isinstance(obj, list):
        return [_substitute_env_vars(item, env_values) for item in obj]
    if isinstance(obj, str):
        return ENV_PLACEHOLDER_RE.sub(lookup, obj)
    return obj
