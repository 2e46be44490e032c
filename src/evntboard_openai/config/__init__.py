"""Configuration module."""

from evntboard_openai.config.loader import REQUIRED_ENV_VARS, load_config
from evntboard_openai.config.models import (
    DEFAULT_MAX_FRAME_SIZE,
    DEFAULT_MODULE_CODE,
    ConfigError,
    ModuleConfig,
    ModuleIdentity,
    OpenAIConfig,
)

__all__ = [
    "DEFAULT_MAX_FRAME_SIZE",
    "DEFAULT_MODULE_CODE",
    "REQUIRED_ENV_VARS",
    "ConfigError",
    "ModuleConfig",
    "ModuleIdentity",
    "OpenAIConfig",
    "load_config",
]
