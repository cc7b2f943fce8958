"""Context managers for test isolation without mutating global state.

Tests create isolated configuration from a controlled environment without
touching sys.modules or a shared singleton. The environment is restored
automatically on exit.
"""

import os
from collections.abc import Generator
from contextlib import contextmanager

from searchdeck.core.config.config import Config
from searchdeck.core.config.schema import ConfigSchema


@contextmanager
def temporary_config(
    env_overrides: dict[str, str] | None = None,
    clear_credentials: bool = True,
) -> Generator[Config, None, None]:
    """Create a temporary config instance for testing.

    Args:
        env_overrides: Environment variables to set for this context.
        clear_credentials: If True, remove every secret variable declared in
            ConfigSchema first so host keys never leak into a test.

    Yields:
        A new Config instance built from the test environment

    Example:
        with temporary_config({"LOG_LEVEL": "DEBUG", "YOUTUBE_KEYS": "k1 k2"}) as config:
            assert config.media.keys == ("k1", "k2")
    """
    original_env = os.environ.copy()

    try:
        if clear_credentials:
            for spec in ConfigSchema.all_specs().values():
                if spec.secret:
                    os.environ.pop(spec.name, None)

        if env_overrides:
            os.environ.update(env_overrides)

        yield Config()

    finally:
        os.environ.clear()
        os.environ.update(original_env)
