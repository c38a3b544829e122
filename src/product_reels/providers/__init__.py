"""Text provider configuration and HTTP clients."""

from .config import (
    ProviderConfig,
    ReelSettings,
    RetrySettings,
    TextProviderConfig,
    load_provider_config,
)
from .text import (
    GeminiProvider,
    GroqProvider,
    OllamaProvider,
    ProviderHTTPError,
    ProviderResponseError,
    TextProvider,
    create_provider,
)

__all__ = [
    "ProviderConfig",
    "ReelSettings",
    "RetrySettings",
    "TextProviderConfig",
    "load_provider_config",
    "TextProvider",
    "OllamaProvider",
    "GroqProvider",
    "GeminiProvider",
    "ProviderHTTPError",
    "ProviderResponseError",
    "create_provider",
]
