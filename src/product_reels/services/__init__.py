"""Shared services used by the pipeline stages."""

from .provider_cascade import (
    ProviderAttempt,
    ProviderCascade,
    ProviderStatus,
    backoff_delay,
    is_retryable,
)

__all__ = [
    "ProviderCascade",
    "ProviderAttempt",
    "ProviderStatus",
    "backoff_delay",
    "is_retryable",
]
