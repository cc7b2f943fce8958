"""Declarative schema for environment variable configuration.

This module provides a single source of truth for all environment variables,
including automatic type coercion, validation, and documentation generation.

The schema-based approach provides:
- Single definition point for all config options
- Automatic type coercion (str -> int/float/bool/tuple)
- Validation with clear error messages
- Self-documenting configuration
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

ANSWER_BACKENDS = ("gemini", "perplexity")
IMAGE_PROVIDERS = ("openai", "stability", "gemini", "replicate")


def parse_key_list(value: str) -> tuple[str, ...]:
    """Split a configured key list on whitespace and commas."""
    return tuple(part for part in re.split(r"[\s,]+", value.strip()) if part)


@dataclass(frozen=True)
class EnvVarSpec:
    """Specification for a single environment variable.

    Attributes:
        name: Environment variable name (e.g., "PORT", "LOG_LEVEL")
        default: Default value if env var not set
        type_hint: Type for validation (int, str, float, bool, tuple)
        description: Human-readable description for docs
        validator: Optional custom validation function
        coerce: Optional function to convert string to target type
        secret: Whether the value must be masked when displayed
    """

    name: str
    default: Any
    type_hint: type
    description: str
    validator: Callable[[Any], bool] | None = None
    coerce: Callable[[str], Any] | None = None
    secret: bool = False


def _key_list(name: str, description: str) -> EnvVarSpec:
    return EnvVarSpec(
        name=name,
        default=(),
        type_hint=tuple,
        description=description,
        coerce=parse_key_list,
        secret=True,
    )


class ConfigSchema:
    """Registry of all configuration environment variables.

    Each attribute is an EnvVarSpec that defines:
    - The environment variable name
    - Default value
    - Type for validation
    - Human-readable description
    - Optional validation rules
    """

    # === Server Settings ===

    HOST = EnvVarSpec(
        name="HOST",
        default="127.0.0.1",
        type_hint=str,
        description="Server host address to bind to",
    )

    PORT = EnvVarSpec(
        name="PORT",
        default=8090,
        type_hint=int,
        description="Server port number",
        validator=lambda x: 1 <= x <= 65535,
    )

    LOG_LEVEL = EnvVarSpec(
        name="LOG_LEVEL",
        default="INFO",
        type_hint=str,
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        validator=lambda x: x.upper() in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    )

    REQUEST_TIMEOUT = EnvVarSpec(
        name="REQUEST_TIMEOUT",
        default=60.0,
        type_hint=float,
        description="Timeout in seconds for a single upstream HTTP request",
        validator=lambda x: x > 0,
    )

    # === Answer Engine ===

    ANSWER_ENGINE_BACKEND = EnvVarSpec(
        name="ANSWER_ENGINE_BACKEND",
        default="gemini",
        type_hint=str,
        description="Answer engine backend: 'gemini' or 'perplexity'",
        validator=lambda x: x in ANSWER_BACKENDS,
    )

    ANSWER_ENGINE_MODEL = EnvVarSpec(
        name="ANSWER_ENGINE_MODEL",
        default=None,
        type_hint=str,
        description="Default answer model (backend default when unset)",
    )

    API_KEY = EnvVarSpec(
        name="API_KEY",
        default=None,
        type_hint=str,
        description="Default answer engine credential used when no keys are configured",
        secret=True,
    )

    ANSWER_ENGINE_KEYS = _key_list(
        "ANSWER_ENGINE_KEYS", "Answer engine API keys (whitespace or comma separated)"
    )

    ATTACHMENT_CONTEXT_LIMIT = EnvVarSpec(
        name="ATTACHMENT_CONTEXT_LIMIT",
        default=12000,
        type_hint=int,
        description="Maximum characters of attached-file text embedded in the system instruction",
        validator=lambda x: x >= 0,
    )

    # === Image Synthesis ===

    IMAGE_PROVIDER = EnvVarSpec(
        name="IMAGE_PROVIDER",
        default="openai",
        type_hint=str,
        description="Default image provider: openai, stability, gemini or replicate",
        validator=lambda x: x in IMAGE_PROVIDERS,
    )

    OPENAI_IMAGE_KEYS = _key_list("OPENAI_IMAGE_KEYS", "OpenAI image API keys")
    STABILITY_KEYS = _key_list("STABILITY_KEYS", "Stability AI API keys")
    GEMINI_IMAGE_KEYS = _key_list("GEMINI_IMAGE_KEYS", "Gemini image API keys")
    REPLICATE_KEYS = _key_list("REPLICATE_KEYS", "Replicate API tokens")

    REPLICATE_DEFAULT_MODEL = EnvVarSpec(
        name="REPLICATE_DEFAULT_MODEL",
        default="black-forest-labs/flux-schnell",
        type_hint=str,
        description="Replicate model (owner/name) or version id used without a model hint",
    )

    IMAGE_POLL_INTERVAL = EnvVarSpec(
        name="IMAGE_POLL_INTERVAL",
        default=1.5,
        type_hint=float,
        description="Seconds between status checks of an asynchronous image job",
        validator=lambda x: x >= 0,
    )

    IMAGE_POLL_MAX_ATTEMPTS = EnvVarSpec(
        name="IMAGE_POLL_MAX_ATTEMPTS",
        default=80,
        type_hint=int,
        description="Status checks before an asynchronous image job times out",
        validator=lambda x: x > 0,
    )

    # === Media Discovery ===

    YOUTUBE_KEYS = _key_list("YOUTUBE_KEYS", "YouTube Data API keys")

    MEDIA_REGION_CODE = EnvVarSpec(
        name="MEDIA_REGION_CODE",
        default="US",
        type_hint=str,
        description="Region code sent with media searches",
    )

    MEDIA_RELEVANCE_LANGUAGE = EnvVarSpec(
        name="MEDIA_RELEVANCE_LANGUAGE",
        default="en",
        type_hint=str,
        description="Relevance language sent with media searches",
    )

    MEDIA_MAX_RESULTS = EnvVarSpec(
        name="MEDIA_MAX_RESULTS",
        default=15,
        type_hint=int,
        description="Default number of media items per category",
        validator=lambda x: 1 <= x <= 50,
    )

    @classmethod
    def all_specs(cls) -> dict[str, EnvVarSpec]:
        """Get all environment variable specifications.

        Returns:
            Dictionary mapping spec names to EnvVarSpec objects
        """
        return {
            name: getattr(cls, name)
            for name in dir(cls)
            if isinstance(getattr(cls, name), EnvVarSpec)
        }

    @classmethod
    def generate_markdown_docs(cls) -> str:
        """Generate Markdown documentation for all environment variables.

        Returns:
            Markdown documentation string
        """
        lines = ["# Configuration Options\n\n"]
        lines.extend(
            [
                "This document is auto-generated from `ConfigSchema`.\n\n",
                "## Environment Variables\n\n",
            ]
        )

        specs = cls.all_specs()
        for _name, spec in sorted(specs.items()):
            default_repr = f"`{spec.default}`" if spec.default not in (None, ()) else "None"
            lines.extend(
                [
                    f"### `{spec.name}`\n\n",
                    f"- **Type**: `{spec.type_hint.__name__}`\n",
                    f"- **Default**: {default_repr}\n",
                    f"- **Description**: {spec.description}\n\n",
                ]
            )

        return "\n".join(lines)
