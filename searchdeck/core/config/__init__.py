"""Configuration package for searchdeck."""

from searchdeck.core.config.config import (
    AnswerEngineSettings,
    Config,
    ImageSettings,
    MediaSettings,
    ServerSettings,
)
from searchdeck.core.config.schema import ConfigSchema, EnvVarSpec, parse_key_list
from searchdeck.core.config.validation import ConfigError, load_env_var, validate_all

__all__ = [
    "AnswerEngineSettings",
    "Config",
    "ConfigError",
    "ConfigSchema",
    "EnvVarSpec",
    "ImageSettings",
    "MediaSettings",
    "ServerSettings",
    "load_env_var",
    "parse_key_list",
    "validate_all",
]
