"""Provider Cascade - ordered fallback across text providers with retry/backoff.

Tries each configured provider in priority order. Within a provider,
retryable failures (429/5xx, network errors, timeouts) are retried with
capped exponential backoff; anything else moves straight to the next
provider.

Usage:
    cascade = ProviderCascade()
    text = await cascade.generate(prompt, json_mode=True)
    # Internally handles: ollama -> groq -> gemini, 3 attempts each
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import httpx
from rich.console import Console
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt

from ..constants import RETRYABLE_STATUS_CODES
from ..errors import AllProvidersFailed
from ..providers.config import ProviderConfig, RetrySettings, load_provider_config
from ..providers.text import ProviderHTTPError, TextProvider, create_provider

_logger = logging.getLogger("ai_calls")

SleepFn = Callable[[float], Awaitable[None]]


def is_retryable(error: BaseException) -> bool:
    """Classify a provider failure as worth retrying on the same provider.

    Args:
        error: Exception raised by a provider call.

    Returns:
        True for throttling/5xx statuses, network failures and timeouts.
    """
    if isinstance(error, ProviderHTTPError):
        return error.status_code in RETRYABLE_STATUS_CODES
    return isinstance(
        error,
        (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError),
    )


def backoff_delay(
    retry_index: int,
    settings: RetrySettings,
    rng: random.Random | None = None,
) -> float:
    """Delay before retry number ``retry_index`` (0-based), in seconds.

    ``min(base * 2**n, cap)`` with symmetric jitter of ``jitter_ratio``.
    """
    delay = min(settings.base_delay_seconds * (2 ** retry_index), settings.max_delay_seconds)
    roll = (rng or random).random()
    jitter = delay * settings.jitter_ratio * (roll - 0.5) * 2
    return max(0.0, delay + jitter)


@dataclass
class ProviderAttempt:
    """Record of a single provider attempt."""
    provider: str
    model: str
    attempt: int
    max_attempts: int
    success: bool
    error: str | None = None
    duration_ms: int = 0


@dataclass
class ProviderStatus:
    """Readiness of one provider, as reported by check_providers()."""
    name: str
    type: str
    model: str
    priority: int
    ready: bool
    reason: str | None = None


class ProviderCascade:
    """Generates text through an ordered chain of providers.

    The reachability result for each provider is cached on the
    instance and never re-checked, so one cascade should be built per process
    and shared across runs.

    Example:
        cascade = ProviderCascade(console=console)
        raw = await cascade.generate("Write a reel script as JSON", json_mode=True)
    """

    def __init__(
        self,
        provider_config: ProviderConfig | None = None,
        providers: list[TextProvider] | None = None,
        sleep: SleepFn | None = None,
        rng: random.Random | None = None,
        console: Console | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the cascade.

        Args:
            provider_config: Provider configuration (loads from file if None).
            providers: Explicit provider chain, overrides provider_config.
            sleep: Async sleep used between retries.
            rng: Random source for backoff jitter.
            console: Optional rich console for progress lines.
            transport: httpx transport passed to every provider client.
        """
        self.provider_config = provider_config or load_provider_config()
        self.retry_settings = self.provider_config.retry
        self._sleep = sleep or asyncio.sleep
        self._rng = rng or random.Random()
        self._console = console

        if providers is None:
            providers = [
                create_provider(name, config, transport=transport)
                for name, config in self.provider_config.get_enabled_text_providers()
            ]
        self._providers = providers

        self._availability: dict[str, bool] = {}
        self._reachability_lock = asyncio.Lock()

        self.attempts: list[ProviderAttempt] = []
        self._stats: dict[str, Any] = {
            "total_calls": 0,
            "successful_calls": 0,
            "failed_calls": 0,
            "provider_usage": {},
        }

    @property
    def providers(self) -> list[TextProvider]:
        return list(self._providers)

    def _log_console(self, message: str, level: str = "info") -> None:
        if not self._console:
            return
        style = {
            "info": "dim",
            "error": "red",
            "warning": "yellow",
            "success": "green",
        }.get(level, "dim")
        self._console.print(f"  [{style}][AI] {message}[/{style}]")

    async def _is_available(self, provider: TextProvider) -> bool:
        """Check once per cascade lifetime; later calls read the cache."""
        cached = self._availability.get(provider.name)
        if cached is not None:
            return cached

        async with self._reachability_lock:
            if provider.name not in self._availability:
                available = await provider.is_reachable()
                self._availability[provider.name] = available
                _logger.info(
                    f"HEALTH | {provider.name} {'reachable' if available else 'unreachable'}"
                )
        return self._availability[provider.name]

    def _wait(self, retry_state: RetryCallState) -> float:
        return backoff_delay(retry_state.attempt_number - 1, self.retry_settings, self._rng)

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        _logger.warning(
            f"RETRY | attempt {retry_state.attempt_number} failed ({error}); "
            f"sleeping {delay:.2f}s"
        )

    async def _call_provider(
        self,
        provider: TextProvider,
        prompt: str,
        temperature: float,
        json_mode: bool,
        images: list[str] | None,
    ) -> str:
        max_attempts = self.retry_settings.max_attempts
        model = provider.config.vision_model if images else provider.config.model
        retrying = AsyncRetrying(
            stop=stop_after_attempt(max_attempts),
            wait=self._wait,
            retry=retry_if_exception(is_retryable),
            sleep=self._sleep,
            before_sleep=self._log_retry,
            reraise=True,
        )

        text = ""
        async for attempt in retrying:
            with attempt:
                number = attempt.retry_state.attempt_number
                self._log_console(f"{provider.name}/{model} [{number}/{max_attempts}]...")
                start_time = time.time()
                try:
                    text = await provider.complete(
                        prompt,
                        temperature=temperature,
                        json_mode=json_mode,
                        images=images,
                    )
                except Exception as e:
                    duration_ms = int((time.time() - start_time) * 1000)
                    self.attempts.append(ProviderAttempt(
                        provider=provider.name,
                        model=model or "",
                        attempt=number,
                        max_attempts=max_attempts,
                        success=False,
                        error=str(e),
                        duration_ms=duration_ms,
                    ))
                    self._log_console(f"{provider.name}: {str(e)[:80]}", "error")
                    raise

                duration_ms = int((time.time() - start_time) * 1000)
                self.attempts.append(ProviderAttempt(
                    provider=provider.name,
                    model=model or "",
                    attempt=number,
                    max_attempts=max_attempts,
                    success=True,
                    duration_ms=duration_ms,
                ))
                self._log_console(f"{provider.name}: OK ({duration_ms}ms)", "success")
                _logger.info(f"AI_CALL | {provider.name}/{model} succeeded in {duration_ms}ms")
        return text

    async def generate(
        self,
        prompt: str,
        temperature: float = 0.8,
        json_mode: bool = False,
        images: list[str] | None = None,
    ) -> str:
        """Generate text with automatic fallback.

        Args:
            prompt: The prompt to send.
            temperature: Sampling temperature.
            json_mode: Request a JSON object from providers that support it.
            images: Base64 images; restricts the chain to image-capable providers.

        Returns:
            Completion text from the first provider that succeeds.

        Raises:
            AllProvidersFailed: Every provider was skipped or failed.
        """
        self._stats["total_calls"] += 1
        errors: dict[str, str] = {}

        for provider in self._providers:
            if images and not provider.supports_images:
                _logger.debug(f"SKIP | {provider.name} has no image support")
                continue

            missing = provider.missing_credential()
            if missing:
                errors[provider.name] = f"missing credential {missing}"
                _logger.debug(f"SKIP | {provider.name} missing {missing}")
                continue

            if not await self._is_available(provider):
                errors[provider.name] = "unreachable"
                continue

            try:
                text = await self._call_provider(provider, prompt, temperature, json_mode, images)
            except Exception as e:
                errors[provider.name] = str(e)
                kind = "retries exhausted" if is_retryable(e) else "non-retryable"
                _logger.warning(f"AI_CALL | {provider.name} failed ({kind}): {e}")
                self._log_console(f"Switching from {provider.name} ({kind})", "warning")
                continue

            self._stats["successful_calls"] += 1
            self._stats["provider_usage"][provider.name] = (
                self._stats["provider_usage"].get(provider.name, 0) + 1
            )
            return text

        self._stats["failed_calls"] += 1
        self._log_console("All providers exhausted", "error")
        _logger.error(f"AI_CALL | all providers failed: {errors}")
        raise AllProvidersFailed(errors)

    async def check_providers(self) -> list[ProviderStatus]:
        """Report credential and reachability status for every provider."""
        statuses = []
        for provider in self._providers:
            missing = provider.missing_credential()
            if missing:
                ready, reason = False, f"missing {missing}"
            elif not await self._is_available(provider):
                ready, reason = False, "unreachable"
            else:
                ready, reason = True, None
            statuses.append(ProviderStatus(
                name=provider.name,
                type=provider.config.type,
                model=provider.config.model,
                priority=provider.config.priority,
                ready=ready,
                reason=reason,
            ))
        return statuses

    def get_stats(self) -> dict[str, Any]:
        """Get call statistics.

        Returns:
            Dict with call counts and per-provider usage.
        """
        return {
            **self._stats,
            "provider_usage": dict(self._stats["provider_usage"]),
            "attempts": len(self.attempts),
        }
