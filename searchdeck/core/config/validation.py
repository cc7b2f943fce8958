"""Reading ConfigSchema entries out of the environment.

Unset and blank variables resolve to the entry's default. Anything else is
coerced by the entry's ``coerce`` function (or by its ``type_hint``) and then
checked by its ``validator``. Secret values never appear in a ConfigError.
"""

import os
from collections.abc import Callable
from typing import Any

from searchdeck.core.config.schema import ConfigSchema, EnvVarSpec

COERCERS: dict[type, Callable[[str], Any]] = {
    int: int,
    float: float,
    str: str.strip,
}


class ConfigError(Exception):
    """An environment variable that could not be used.

    Attributes:
        env_var: Variable name
        value: Raw value, or ``<redacted>`` for secrets
        message: What was wrong with it
    """

    def __init__(self, env_var: str, value: str, message: str) -> None:
        self.env_var = env_var
        self.value = value
        self.message = message
        super().__init__(f"{env_var}={value}: {message}")


def load_env_var(spec: EnvVarSpec) -> Any:
    """Resolve one variable to its typed value.

    Raises:
        ConfigError: The value cannot be coerced or the validator rejects it
    """
    raw_value = os.environ.get(spec.name)
    if raw_value is None or not raw_value.strip():
        return spec.default

    shown_value = "<redacted>" if spec.secret else raw_value
    coerce = spec.coerce or COERCERS.get(spec.type_hint, str.strip)

    try:
        value = coerce(raw_value)
    except (ValueError, TypeError) as e:
        raise ConfigError(spec.name, shown_value, f"not a valid {spec.type_hint.__name__}") from e

    try:
        accepted = spec.validator is None or spec.validator(value)
    except TypeError as e:
        raise ConfigError(spec.name, shown_value, f"validator failed: {e}") from e
    if not accepted:
        raise ConfigError(spec.name, shown_value, "value out of range or not allowed")

    return value


def load_all_specs() -> dict[str, Any]:
    """Every schema variable by name; failures are returned as ConfigError values."""
    result: dict[str, Any] = {}
    for name, spec in ConfigSchema.all_specs().items():
        try:
            result[name] = load_env_var(spec)
        except ConfigError as e:
            result[name] = e
    return result


def validate_all() -> list[ConfigError]:
    return [value for value in load_all_specs().values() if isinstance(value, ConfigError)]
