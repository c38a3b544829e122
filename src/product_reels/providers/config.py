"""Provider configuration loading and validation."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..constants import (
    AI_LOCAL_TIMEOUT_SECONDS,
    AI_HEALTH_CHECK_TIMEOUT_SECONDS,
    AI_TIMEOUT_SECONDS,
    DEFAULT_RUN_DEADLINE_SECONDS,
    RETRY_BACKOFF_BASE_SECONDS,
    RETRY_BACKOFF_MAX_SECONDS,
    RETRY_JITTER_RATIO,
    RETRY_MAX_ATTEMPTS,
)

# Load .env file
load_dotenv()

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / "config" / "providers.yaml"


class ReelSettings(BaseSettings):
    """Credentials and runtime knobs read from the environment."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    groq_api_key: str | None = None
    gemini_api_key: str | None = None
    ollama_host: str = "http://localhost:11434"

    instagram_access_token: str | None = None
    instagram_user_id: str | None = None

    shopify_store_domain: str | None = None
    shopify_storefront_token: str | None = None

    reel_brand_name: str = "BRAND"
    reel_run_deadline_seconds: float = DEFAULT_RUN_DEADLINE_SECONDS
    reel_font_path: str | None = None
    ffmpeg_binary: str | None = None

    @property
    def instagram_configured(self) -> bool:
        return bool(self.instagram_access_token and self.instagram_user_id)


class RetrySettings(BaseModel):
    """Per-provider retry policy shared by the whole cascade."""

    max_attempts: int = RETRY_MAX_ATTEMPTS
    base_delay_seconds: float = RETRY_BACKOFF_BASE_SECONDS
    max_delay_seconds: float = RETRY_BACKOFF_MAX_SECONDS
    jitter_ratio: float = RETRY_JITTER_RATIO


class TextProviderConfig(BaseModel):
    """Configuration for a text provider."""

    priority: int
    type: str  # ollama, groq, gemini
    enabled: bool = True
    model: str
    vision_model: str | None = None
    base_url: str | None = None
    base_url_env: str | None = None
    api_key: str | None = None
    api_key_env: str | None = None
    timeout: float = AI_TIMEOUT_SECONDS
    health_check_timeout: float = AI_HEALTH_CHECK_TIMEOUT_SECONDS

    @property
    def supports_images(self) -> bool:
        return self.vision_model is not None

    def get_api_key(self) -> str | None:
        """Get API key from config or environment."""
        if self.api_key:
            return self.api_key
        if self.api_key_env:
            return os.getenv(self.api_key_env) or None
        return None

    def get_base_url(self) -> str | None:
        """Get base URL from config or environment."""
        if self.base_url_env and os.getenv(self.base_url_env):
            return os.getenv(self.base_url_env)
        return self.base_url


def _default_text_providers() -> dict[str, TextProviderConfig]:
    return {
        "ollama": TextProviderConfig(
            priority=1,
            type="ollama",
            model="llama3.2",
            vision_model="llava:7b-v1.6",
            base_url="http://localhost:11434",
            base_url_env="OLLAMA_HOST",
            timeout=AI_LOCAL_TIMEOUT_SECONDS,
        ),
        "groq": TextProviderConfig(
            priority=2,
            type="groq",
            model="llama-3.3-70b-versatile",
            base_url="https://api.groq.com/openai/v1",
            api_key_env="GROQ_API_KEY",
        ),
        "gemini": TextProviderConfig(
            priority=3,
            type="gemini",
            model="gemini-2.0-flash",
            base_url="https://generativelanguage.googleapis.com/v1beta",
            api_key_env="GEMINI_API_KEY",
        ),
    }


class ProviderConfig(BaseModel):
    """Full provider configuration."""

    retry: RetrySettings = Field(default_factory=RetrySettings)
    text_providers: dict[str, TextProviderConfig] = Field(default_factory=_default_text_providers)

    def get_enabled_text_providers(self) -> list[tuple[str, TextProviderConfig]]:
        """Get enabled text providers sorted by priority."""
        enabled = [
            (name, config)
            for name, config in self.text_providers.items()
            if config.enabled
        ]
        return sorted(enabled, key=lambda x: x[1].priority)


def load_provider_config(config_path: Path | None = None) -> ProviderConfig:
    """Load provider configuration from YAML file.

    Args:
        config_path: Path to a providers.yaml. Defaults to config/providers.yaml
            at the project root.

    Returns:
        Validated ProviderConfig. Built-in defaults when the file is absent.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return ProviderConfig()

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return ProviderConfig(**data)
