"""HTTP clients for the text-generation providers in the cascade.

Each provider speaks its own JSON API over httpx. They share one contract:
``complete()`` returns the raw completion text or raises a ProviderHTTPError /
ProviderResponseError / httpx transport error, which the cascade classifies.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from .config import TextProviderConfig

_logger = logging.getLogger("ai_calls")

JSON_SYSTEM_PROMPT = (
    "You are a social media content writer. Output ONLY valid JSON, "
    "no markdown fences and no commentary."
)


class ProviderHTTPError(Exception):
    """Provider answered with a non-2xx status."""

    def __init__(self, provider: str, status_code: int, body: str = ""):
        self.provider = provider
        self.status_code = status_code
        self.body = body
        super().__init__(f"{provider} HTTP {status_code}: {body[:200]}")


class ProviderResponseError(Exception):
    """Provider answered 2xx but the payload held no usable completion."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider}: {message}")


class TextProvider(ABC):
    """One text-generation backend."""

    def __init__(
        self,
        name: str,
        config: TextProviderConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.name = name
        self.config = config
        self._transport = transport

    @property
    def supports_images(self) -> bool:
        return self.config.supports_images

    def missing_credential(self) -> str | None:
        """Name of the missing credential, or None when ready to call."""
        if self.config.api_key_env and not self.config.get_api_key():
            return self.config.api_key_env
        return None

    async def is_reachable(self) -> bool:
        """Check the backend is reachable. Hosted providers assume yes."""
        return True

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, transport=self._transport)

    async def _post_json(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        async with self._client(self.config.timeout) as client:
            response = await client.post(url, json=payload, headers=headers, params=params)

        if response.status_code >= 400:
            raise ProviderHTTPError(self.name, response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            raise ProviderResponseError(self.name, f"invalid JSON body: {e}") from e

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        temperature: float = 0.8,
        json_mode: bool = False,
        images: list[str] | None = None,
    ) -> str:
        """Run one completion.

        Args:
            prompt: User prompt.
            temperature: Sampling temperature.
            json_mode: Ask the backend for a JSON object.
            images: Base64-encoded images (image-capable providers only).

        Returns:
            Completion text, never empty.
        """


class OllamaProvider(TextProvider):
    """Local Ollama server. Free and fast when running, often absent."""

    def _base_url(self) -> str:
        return (self.config.get_base_url() or "http://localhost:11434").rstrip("/")

    async def is_reachable(self) -> bool:
        try:
            async with self._client(self.config.health_check_timeout) as client:
                response = await client.get(f"{self._base_url()}/api/tags")
            return response.status_code == 200
        except httpx.HTTPError as e:
            _logger.debug(f"OLLAMA_HEALTH | unreachable at {self._base_url()}: {e}")
            return False

    async def complete(self, prompt, temperature=0.8, json_mode=False, images=None):
        model = self.config.vision_model if images else self.config.model
        payload: dict[str, Any] = {
            "model": model,
            "prompt": prompt,
            "stream": False,
            "options": {"temperature": temperature},
        }
        if json_mode:
            payload["format"] = "json"
        if images:
            payload["images"] = images

        data = await self._post_json(f"{self._base_url()}/api/generate", payload)
        text = (data.get("response") or "").strip()
        if not text:
            raise ProviderResponseError(self.name, "empty response")
        return text


class GroqProvider(TextProvider):
    """Groq's OpenAI-compatible chat completions endpoint."""

    async def complete(self, prompt, temperature=0.8, json_mode=False, images=None):
        base_url = (self.config.get_base_url() or "https://api.groq.com/openai/v1").rstrip("/")
        messages = []
        if json_mode:
            messages.append({"role": "system", "content": JSON_SYSTEM_PROMPT})
        messages.append({"role": "user", "content": prompt})

        payload: dict[str, Any] = {
            "model": self.config.model,
            "messages": messages,
            "temperature": temperature,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        data = await self._post_json(
            f"{base_url}/chat/completions",
            payload,
            headers={"Authorization": f"Bearer {self.config.get_api_key()}"},
        )
        try:
            text = data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderResponseError(self.name, f"unexpected payload shape: {e}") from e
        if not text.strip():
            raise ProviderResponseError(self.name, "empty response")
        return text.strip()


class GeminiProvider(TextProvider):
    """Google Gemini generateContent endpoint. Last resort in the chain."""

    async def complete(self, prompt, temperature=0.8, json_mode=False, images=None):
        base_url = (
            self.config.get_base_url()
            or "https://generativelanguage.googleapis.com/v1beta"
        ).rstrip("/")
        generation_config: dict[str, Any] = {"temperature": temperature}
        if json_mode:
            generation_config["responseMimeType"] = "application/json"

        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }
        data = await self._post_json(
            f"{base_url}/models/{self.config.model}:generateContent",
            payload,
            params={"key": self.config.get_api_key() or ""},
        )
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"] or ""
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderResponseError(self.name, f"unexpected payload shape: {e}") from e
        if not text.strip():
            raise ProviderResponseError(self.name, "empty response")
        return text.strip()


PROVIDER_TYPES: dict[str, type[TextProvider]] = {
    "ollama": OllamaProvider,
    "groq": GroqProvider,
    "gemini": GeminiProvider,
}


def create_provider(
    name: str,
    config: TextProviderConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> TextProvider:
    """Build the client for a configured provider.

    Raises:
        ValueError: Unknown provider type.
    """
    try:
        provider_cls = PROVIDER_TYPES[config.type]
    except KeyError:
        raise ValueError(f"Unknown text provider type: {config.type}") from None
    return provider_cls(name, config, transport=transport)
