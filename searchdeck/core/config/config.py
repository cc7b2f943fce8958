"""Configuration object for searchdeck.

Configuration is organized into focused, frozen settings groups:
- server: bind address, log level, upstream timeout
- answer: answer engine backend, model and credentials
- image: image providers, credentials and job polling
- media: media discovery credentials and search defaults

Each group is loaded from environment variables through the ConfigSchema,
so defaults and validation live in exactly one place. Config instances are
built explicitly by the composition root (FastAPI lifespan, CLI commands);
there is no module-level singleton.
"""

from dataclasses import dataclass

from searchdeck.core.config.schema import ConfigSchema
from searchdeck.core.config.validation import load_env_var


@dataclass(frozen=True)
class ServerSettings:
    host: str
    port: int
    log_level: str
    request_timeout: float

    @staticmethod
    def load() -> "ServerSettings":
        return ServerSettings(
            host=load_env_var(ConfigSchema.HOST),
            port=load_env_var(ConfigSchema.PORT),
            log_level=load_env_var(ConfigSchema.LOG_LEVEL).upper(),
            request_timeout=load_env_var(ConfigSchema.REQUEST_TIMEOUT),
        )


@dataclass(frozen=True)
class AnswerEngineSettings:
    """Answer engine settings.

    Attributes:
        backend: "gemini" or "perplexity"
        model: Default model, or None for the backend default
        default_key: Credential used when the pool is empty
        keys: Configured credential pool
        attachment_context_limit: Max attachment characters in the system instruction
    """

    backend: str
    model: str | None
    default_key: str | None
    keys: tuple[str, ...]
    attachment_context_limit: int

    @staticmethod
    def load() -> "AnswerEngineSettings":
        return AnswerEngineSettings(
            backend=load_env_var(ConfigSchema.ANSWER_ENGINE_BACKEND),
            model=load_env_var(ConfigSchema.ANSWER_ENGINE_MODEL),
            default_key=load_env_var(ConfigSchema.API_KEY),
            keys=load_env_var(ConfigSchema.ANSWER_ENGINE_KEYS),
            attachment_context_limit=load_env_var(ConfigSchema.ATTACHMENT_CONTEXT_LIMIT),
        )


@dataclass(frozen=True)
class ImageSettings:
    default_provider: str
    keys: dict[str, tuple[str, ...]]
    replicate_default_model: str
    poll_interval: float
    poll_max_attempts: int

    @staticmethod
    def load() -> "ImageSettings":
        return ImageSettings(
            default_provider=load_env_var(ConfigSchema.IMAGE_PROVIDER),
            keys={
                "openai": load_env_var(ConfigSchema.OPENAI_IMAGE_KEYS),
                "stability": load_env_var(ConfigSchema.STABILITY_KEYS),
                "gemini": load_env_var(ConfigSchema.GEMINI_IMAGE_KEYS),
                "replicate": load_env_var(ConfigSchema.REPLICATE_KEYS),
            },
            replicate_default_model=load_env_var(ConfigSchema.REPLICATE_DEFAULT_MODEL),
            poll_interval=load_env_var(ConfigSchema.IMAGE_POLL_INTERVAL),
            poll_max_attempts=load_env_var(ConfigSchema.IMAGE_POLL_MAX_ATTEMPTS),
        )


@dataclass(frozen=True)
class MediaSettings:
    keys: tuple[str, ...]
    region_code: str
    relevance_language: str
    max_results: int

    @staticmethod
    def load() -> "MediaSettings":
        return MediaSettings(
            keys=load_env_var(ConfigSchema.YOUTUBE_KEYS),
            region_code=load_env_var(ConfigSchema.MEDIA_REGION_CODE),
            relevance_language=load_env_var(ConfigSchema.MEDIA_RELEVANCE_LANGUAGE),
            max_results=load_env_var(ConfigSchema.MEDIA_MAX_RESULTS),
        )


class Config:
    """Configuration with direct access to all settings groups.

    All values are loaded at initialization time from environment variables
    using schema-based validation; a ConfigError is raised for the first
    invalid variable.
    """

    def __init__(self) -> None:
        self.server = ServerSettings.load()
        self.answer = AnswerEngineSettings.load()
        self.image = ImageSettings.load()
        self.media = MediaSettings.load()

    # Server settings
    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port

    @property
    def log_level(self) -> str:
        return self.server.log_level

    @property
    def request_timeout(self) -> float:
        return self.server.request_timeout
