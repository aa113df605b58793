"""Studio configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..constants import (
    RETRY_BACKOFF_MULTIPLIER,
    RETRY_INITIAL_DELAY_MS,
    RETRY_MAX_ATTEMPTS,
    VIDEO_DOWNLOAD_TIMEOUT_SECONDS,
    VIDEO_MAX_WAIT_SECONDS,
    VIDEO_POLL_INTERVAL_SECONDS,
)
from ..services.errors import ConfigurationError
from ..services.retry import RetryPolicy

# Load .env file
load_dotenv()

MISSING_API_KEY_MESSAGE = (
    "Error de Clave API: La clave API de Gemini no está configurada. Define GEMINI_API_KEY "
    "(o API_KEY) en el entorno o en el archivo .env."
)


class ModelSettings(BaseModel):
    """Model ids per capability."""

    text: str = "gemini-2.5-flash"
    image: str = "imagen-4.0-generate-001"
    image_edit: str = "gemini-2.5-flash-image"
    video: str = "veo-2.0-generate-001"


class RetrySettings(BaseModel):
    """Backoff settings applied to every provider call."""

    max_attempts: int = Field(default=RETRY_MAX_ATTEMPTS, ge=1)
    initial_delay_ms: int = Field(default=RETRY_INITIAL_DELAY_MS, ge=0)
    backoff_multiplier: float = Field(default=RETRY_BACKOFF_MULTIPLIER, ge=1.0)

    def to_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.max_attempts,
            initial_delay_ms=self.initial_delay_ms,
            backoff_multiplier=self.backoff_multiplier,
        )


class VideoSettings(BaseModel):
    """Video job polling and download settings."""

    poll_interval_seconds: float = Field(default=VIDEO_POLL_INTERVAL_SECONDS, gt=0)
    max_wait_seconds: float = Field(default=VIDEO_MAX_WAIT_SECONDS, gt=0)
    download_timeout_seconds: float = Field(default=VIDEO_DOWNLOAD_TIMEOUT_SECONDS, gt=0)
    output_dir: Path = Path("output/videos")


class StudioConfig(BaseModel):
    """Full configuration handed to the generation client."""

    api_key: str | None = None
    models: ModelSettings = Field(default_factory=ModelSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    video: VideoSettings = Field(default_factory=VideoSettings)
    max_concurrency: int | None = Field(default=None, ge=1)

    def require_api_key(self) -> str:
        """Get the API key or fail with a configuration error."""
        if not self.api_key or not self.api_key.strip():
            raise ConfigurationError(MISSING_API_KEY_MESSAGE, context="configuration")
        return self.api_key.strip()


class StudioEnvironment(BaseSettings):
    """API key as read from the process environment."""

    model_config = SettingsConfigDict(extra="ignore")

    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"),
    )


def default_config_path() -> Path:
    # config/studio.yaml relative to project root
    return Path(__file__).parent.parent.parent.parent / "config" / "studio.yaml"


def load_studio_config(config_path: Path | None = None) -> StudioConfig:
    """Load studio configuration from YAML file and environment.

    The API key is read from the environment at call time. A key set in the
    YAML file is only used when the environment has none.

    Args:
        config_path: YAML file to read. Defaults to config/studio.yaml.

    Returns:
        The merged configuration (defaults when the file doesn't exist).
    """
    if config_path is None:
        config_path = default_config_path()

    data: dict = {}
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    env_key = StudioEnvironment().api_key
    if env_key:
        data["api_key"] = env_key

    return StudioConfig(**data)
