"""Tests for the provider cascade: ordering, retry, backoff and skipping.

Providers are the real HTTP clients wired to httpx.MockTransport, so status
classification is exercised end to end.
"""

from __future__ import annotations

import json

import httpx
import pytest

from product_reels.errors import AllProvidersFailed
from product_reels.providers.config import ProviderConfig, RetrySettings, TextProviderConfig
from product_reels.providers.text import (
    GeminiProvider,
    GroqProvider,
    OllamaProvider,
    ProviderHTTPError,
    ProviderResponseError,
)
from product_reels.services.provider_cascade import (
    ProviderCascade,
    backoff_delay,
    is_retryable,
)


def groq_config(priority: int = 1, api_key: str | None = "test-key", **kwargs) -> TextProviderConfig:
    return TextProviderConfig(
        priority=priority,
        type="groq",
        model="test-model",
        base_url=f"https://groq-{priority}.test/v1",
        api_key=api_key,
        **kwargs,
    )


def chat_response(text: str) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"content": text}}]})


class ScriptedTransport:
    """Answers requests per host from a queue of responses or exceptions."""

    def __init__(self, script: dict[str, list]):
        self.script = {host: list(items) for host, items in script.items()}
        self.requests: list[httpx.Request] = []

    def calls_to(self, host: str) -> int:
        return sum(1 for r in self.requests if r.url.host == host)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.script[request.url.host]
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item


def build_cascade(providers, recorded_sleep, fixed_rng, **settings) -> ProviderCascade:
    return ProviderCascade(
        provider_config=ProviderConfig(retry=RetrySettings(**settings), text_providers={}),
        providers=providers,
        sleep=recorded_sleep,
        rng=fixed_rng,
    )


# =============================================================================
# Classification and backoff
# =============================================================================

class TestRetryClassification:

    @pytest.mark.parametrize("status", [429, 500, 502, 503, 504])
    def test_throttle_and_server_errors_are_retryable(self, status):
        assert is_retryable(ProviderHTTPError("groq", status))

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 501])
    def test_client_errors_and_501_are_not(self, status):
        assert not is_retryable(ProviderHTTPError("groq", status))

    def test_transport_failures_are_retryable(self):
        request = httpx.Request("POST", "https://x.test")
        assert is_retryable(httpx.ReadTimeout("slow", request=request))
        assert is_retryable(httpx.ConnectError("refused", request=request))
        assert is_retryable(httpx.RemoteProtocolError("eof", request=request))

    def test_empty_completion_is_not_retryable(self):
        assert not is_retryable(ProviderResponseError("groq", "empty response"))


class TestBackoffDelay:

    def test_doubles_from_one_second(self, fixed_rng):
        settings = RetrySettings()
        delays = [backoff_delay(n, settings, fixed_rng) for n in range(4)]
        assert delays == [1.0, 2.0, 4.0, 8.0]

    def test_capped_at_ten_seconds(self, fixed_rng):
        assert backoff_delay(6, RetrySettings(), fixed_rng) == 10.0

    def test_jitter_stays_within_ten_percent(self):
        settings = RetrySettings()

        class Low:
            def random(self):
                return 0.0

        class High:
            def random(self):
                return 1.0

        assert backoff_delay(1, settings, Low()) == pytest.approx(1.8)
        assert backoff_delay(1, settings, High()) == pytest.approx(2.2)


# =============================================================================
# Cascade behavior
# =============================================================================

class TestProviderCascade:

    @pytest.mark.asyncio
    async def test_retries_then_succeeds_with_growing_delays(self, recorded_sleep, fixed_rng):
        transport = ScriptedTransport({
            "groq-1.test": [
                httpx.Response(503, text="busy"),
                httpx.Response(429, text="slow down"),
                chat_response("hello"),
            ],
        })
        provider = GroqProvider("groq", groq_config(), transport=httpx.MockTransport(transport))
        cascade = build_cascade([provider], recorded_sleep, fixed_rng)

        assert await cascade.generate("prompt") == "hello"
        assert transport.calls_to("groq-1.test") == 3
        assert recorded_sleep.calls == [1.0, 2.0]
        assert [a.success for a in cascade.attempts] == [False, False, True]

    @pytest.mark.asyncio
    async def test_at_most_three_attempts_then_next_provider(self, recorded_sleep, fixed_rng):
        transport = ScriptedTransport({
            "groq-1.test": [httpx.Response(500, text="boom")],
            "groq-2.test": [chat_response("from second")],
        })
        mock = httpx.MockTransport(transport)
        cascade = build_cascade(
            [
                GroqProvider("first", groq_config(1), transport=mock),
                GroqProvider("second", groq_config(2), transport=mock),
            ],
            recorded_sleep,
            fixed_rng,
        )

        assert await cascade.generate("prompt") == "from second"
        assert transport.calls_to("groq-1.test") == 3
        assert transport.calls_to("groq-2.test") == 1
        assert recorded_sleep.calls == sorted(recorded_sleep.calls)

    @pytest.mark.asyncio
    async def test_non_retryable_moves_on_without_sleeping(self, recorded_sleep, fixed_rng):
        transport = ScriptedTransport({
            "groq-1.test": [httpx.Response(401, text="bad key")],
            "groq-2.test": [chat_response("ok")],
        })
        mock = httpx.MockTransport(transport)
        cascade = build_cascade(
            [
                GroqProvider("first", groq_config(1), transport=mock),
                GroqProvider("second", groq_config(2), transport=mock),
            ],
            recorded_sleep,
            fixed_rng,
        )

        assert await cascade.generate("prompt") == "ok"
        assert transport.calls_to("groq-1.test") == 1
        assert recorded_sleep.calls == []

    @pytest.mark.asyncio
    async def test_timeouts_are_retried(self, recorded_sleep, fixed_rng):
        request = httpx.Request("POST", "https://groq-1.test/v1/chat/completions")
        transport = ScriptedTransport({
            "groq-1.test": [httpx.ReadTimeout("timed out", request=request), chat_response("late")],
        })
        provider = GroqProvider("groq", groq_config(), transport=httpx.MockTransport(transport))
        cascade = build_cascade([provider], recorded_sleep, fixed_rng)

        assert await cascade.generate("prompt") == "late"
        assert recorded_sleep.calls == [1.0]

    @pytest.mark.asyncio
    async def test_empty_completion_falls_through(self, recorded_sleep, fixed_rng):
        transport = ScriptedTransport({
            "groq-1.test": [chat_response("   ")],
            "groq-2.test": [chat_response("filled")],
        })
        mock = httpx.MockTransport(transport)
        cascade = build_cascade(
            [
                GroqProvider("first", groq_config(1), transport=mock),
                GroqProvider("second", groq_config(2), transport=mock),
            ],
            recorded_sleep,
            fixed_rng,
        )

        assert await cascade.generate("prompt") == "filled"
        assert transport.calls_to("groq-1.test") == 1

    @pytest.mark.asyncio
    async def test_missing_credential_is_skipped_without_a_call(
        self, recorded_sleep, fixed_rng, monkeypatch
    ):
        monkeypatch.delenv("REEL_TEST_MISSING_KEY", raising=False)
        transport = ScriptedTransport({"groq-1.test": [chat_response("never")]})
        provider = GroqProvider(
            "groq",
            groq_config(api_key=None, api_key_env="REEL_TEST_MISSING_KEY"),
            transport=httpx.MockTransport(transport),
        )
        cascade = build_cascade([provider], recorded_sleep, fixed_rng)

        with pytest.raises(AllProvidersFailed) as exc_info:
            await cascade.generate("prompt")

        assert transport.requests == []
        assert "ALL_AI_SERVICES_FAILED" in str(exc_info.value)
        assert "REEL_TEST_MISSING_KEY" in exc_info.value.errors["groq"]

    @pytest.mark.asyncio
    async def test_all_failures_raise_with_every_provider_named(self, recorded_sleep, fixed_rng):
        transport = ScriptedTransport({
            "groq-1.test": [httpx.Response(403, text="no")],
            "groq-2.test": [httpx.Response(404, text="gone")],
        })
        mock = httpx.MockTransport(transport)
        cascade = build_cascade(
            [
                GroqProvider("first", groq_config(1), transport=mock),
                GroqProvider("second", groq_config(2), transport=mock),
            ],
            recorded_sleep,
            fixed_rng,
        )

        with pytest.raises(AllProvidersFailed) as exc_info:
            await cascade.generate("prompt")

        assert set(exc_info.value.errors) == {"first", "second"}
        assert cascade.get_stats()["failed_calls"] == 1

    @pytest.mark.asyncio
    async def test_unreachable_local_provider_is_checked_once(self, recorded_sleep, fixed_rng):
        health_checks = []

        def handler(request: httpx.Request) -> httpx.Response:
            health_checks.append(request.url.path)
            raise httpx.ConnectError("refused", request=request)

        ollama = OllamaProvider(
            "ollama",
            TextProviderConfig(priority=1, type="ollama", model="llama3.2", base_url="http://ollama.test"),
            transport=httpx.MockTransport(handler),
        )
        cascade = build_cascade([ollama], recorded_sleep, fixed_rng)

        for _ in range(2):
            with pytest.raises(AllProvidersFailed):
                await cascade.generate("prompt")

        assert health_checks == ["/api/tags"]

    @pytest.mark.asyncio
    async def test_images_restrict_chain_to_vision_providers(self, recorded_sleep, fixed_rng):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.host)
            if request.url.path == "/api/tags":
                return httpx.Response(200, json={"models": []})
            body = json.loads(request.content)
            assert body["model"] == "llava:7b-v1.6"
            assert body["images"] == ["aW1n"]
            return httpx.Response(200, json={"response": "a black hoodie"})

        mock = httpx.MockTransport(handler)
        groq = GroqProvider("groq", groq_config(1), transport=mock)
        ollama = OllamaProvider(
            "ollama",
            TextProviderConfig(
                priority=2,
                type="ollama",
                model="llama3.2",
                vision_model="llava:7b-v1.6",
                base_url="http://ollama.test",
            ),
            transport=mock,
        )
        cascade = build_cascade([groq, ollama], recorded_sleep, fixed_rng)

        assert await cascade.generate("describe", images=["aW1n"]) == "a black hoodie"
        assert "groq-1.test" not in seen

    @pytest.mark.asyncio
    async def test_check_providers_reports_each_status(self, recorded_sleep, fixed_rng, monkeypatch):
        monkeypatch.delenv("REEL_TEST_GEMINI_KEY", raising=False)
        gemini = GeminiProvider(
            "gemini",
            TextProviderConfig(
                priority=3, type="gemini", model="gemini-2.0-flash",
                api_key_env="REEL_TEST_GEMINI_KEY",
            ),
        )
        groq = GroqProvider("groq", groq_config(2))
        cascade = build_cascade([groq, gemini], recorded_sleep, fixed_rng)

        statuses = await cascade.check_providers()

        assert [(s.name, s.ready) for s in statuses] == [("groq", True), ("gemini", False)]
        assert statuses[1].reason == "missing REEL_TEST_GEMINI_KEY"
