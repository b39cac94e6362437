"""Configuration loading: TOML files, search path and environment overrides."""

from __future__ import annotations
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union
import structlog

from ..contracts.errors import ConfigError
from .model import AppConfig

logger = structlog.get_logger()

ENV_PREFIX = "CBW_"
CONFIG_ENV_VAR = "CBW_CONFIG"
LOCAL_CONFIG = Path("cbw.toml")
USER_CONFIG = Path(".cbw") / "config.toml"


def default_config() -> AppConfig:
    """One 10-year-old boy of normal BMI on the default logistic intake."""
    return AppConfig()


def load_config(path: Optional[Union[str, Path]] = None) -> AppConfig:
    """Load configuration from a TOML file and apply environment overrides.

    Args:
        path: Configuration file. If None, the first of ``$CBW_CONFIG``,
            ``./cbw.toml`` and ``~/.cbw/config.toml`` that exists is used,
            falling back to the defaults.

    Returns:
        Configuration with ``CBW_<SECTION>_<FIELD>`` overrides applied

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    if path is None:
        path = find_config_file()

    if path is None:
        config = default_config()
    else:
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}", {"path": str(path)})
        try:
            config = AppConfig.from_toml_file(path)
        except Exception as e:
            raise ConfigError(f"Failed to load config from {path}: {e}", {"path": str(path)}) from e
        logger.debug("Configuration loaded", path=str(path))

    overrides = env_overrides(os.environ)
    if not overrides:
        return config
    try:
        return apply_overrides(config, overrides)
    except Exception as e:
        raise ConfigError(f"Invalid environment override: {e}", {"overrides": overrides}) from e


def find_config_file() -> Optional[Path]:
    """First configuration file on the search path, if any."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    for candidate in (LOCAL_CONFIG, Path.home() / USER_CONFIG):
        if candidate.exists():
            return candidate
    return None


def env_overrides(environ: Mapping[str, str]) -> Dict[str, Dict[str, Any]]:
    """Collect ``CBW_<SECTION>_<FIELD>`` variables by config section.

    Only sections and fields that exist on the config models are picked up;
    anything else is logged and ignored. Population fields take
    comma-separated lists, e.g. ``CBW_POPULATION_AGE=8,9.5``.
    """
    overrides: Dict[str, Dict[str, Any]] = {}
    sections = AppConfig.model_fields

    for key, raw in environ.items():
        if not key.startswith(ENV_PREFIX) or key == CONFIG_ENV_VAR:
            continue

        section, _, field = key[len(ENV_PREFIX):].lower().partition("_")
        if section not in sections or not field:
            logger.warning("Ignoring unknown environment override", variable=key)
            continue
        section_model = sections[section].annotation
        if field not in section_model.model_fields:
            logger.warning("Ignoring unknown environment override", variable=key)
            continue

        if section == "population":
            value: Any = [_convert_env_value(item) for item in _split_list(raw)]
        else:
            value = _convert_env_value(raw)
        overrides.setdefault(section, {})[field] = value

    return overrides


def apply_overrides(config: AppConfig, overrides: Mapping[str, Mapping[str, Any]]) -> AppConfig:
    """Return a re-validated copy of ``config`` with section fields replaced."""
    data = config.model_dump()
    for section, fields in overrides.items():
        data[section].update(fields)
    logger.debug("Environment overrides applied",
                 fields=sorted(f"{s}.{f}" for s, fs in overrides.items() for f in fs))
    return AppConfig.model_validate(data)


def _split_list(raw: str) -> List[str]:
    return [item.strip() for item in raw.strip("[]").split(",") if item.strip()]


def _convert_env_value(value: str) -> Any:
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            pass
    return value
