"""Configuration loading from environment variables and .env files."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError

from evntboard_openai.config.models import ConfigError, ModuleConfig

REQUIRED_ENV_VARS = ("EVNTBOARD_HOST", "MODULE_NAME", "MODULE_TOKEN")

# Optional variables mapped onto nested config keys
OPTIONAL_ENV_VARS: dict[str, tuple[str, ...]] = {
    "MODULE_CODE": ("module", "code"),
    "LOG_LEVEL": ("log_level",),
    "OPENAI_VISION_MODEL": ("openai", "vision_model"),
    "OPENAI_VISION_MAX_TOKENS": ("openai", "vision_max_tokens"),
    "OPENAI_IMAGE_MODEL": ("openai", "image_model"),
    "MODULE_UNIQUE_QUEUE_IDS": ("openai", "unique_queue_ids"),
    "MODULE_MAX_FRAME_SIZE": ("max_frame_size",),
}


def _set_nested(config: dict[str, Any], keys: tuple[str, ...], value: Any) -> None:
    section = config
    for key in keys[:-1]:
        section = section.setdefault(key, {})
    section[keys[-1]] = value


def _require(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name, "").strip()
    if not value:
        raise ConfigError(f"{name} not set")
    return value


def load_config(
    env_file: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> ModuleConfig:
    """Load configuration from the environment.

    Args:
        env_file: Explicit .env file. If None, a .env in the current
            directory (or a parent) is used when present.
        environ: Variables to read instead of the process environment.
            No .env file is loaded when this is given.

    Returns:
        Validated ModuleConfig instance.

    Raises:
        ConfigError: If a required variable is missing or a value is invalid.
    """
    if environ is None:
        if env_file is not None:
            env_file = Path(env_file).expanduser()
            if not env_file.exists():
                raise ConfigError(f"Env file not found: {env_file}")
            load_dotenv(env_file)
        else:
            load_dotenv()
        environ = os.environ

    host, name, token = (_require(environ, var) for var in REQUIRED_ENV_VARS)

    raw_config: dict[str, Any] = {
        "host": host,
        "module": {"name": name, "token": token},
    }
    for env_var, keys in OPTIONAL_ENV_VARS.items():
        value = environ.get(env_var, "").strip()
        if value:
            _set_nested(raw_config, keys, value)

    if "log_level" in raw_config:
        raw_config["log_level"] = raw_config["log_level"].upper()

    try:
        return ModuleConfig.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
