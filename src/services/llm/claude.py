"""
Claude LLM provider implementation.

Uses the Anthropic Python SDK (``anthropic.AsyncAnthropic``). Concurrent
requests are capped by a semaphore, and transient failures are retried
with exponential backoff.
"""

import asyncio
import logging

from anthropic import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncAnthropic,
    RateLimitError,
)
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.core.config import get_settings
from src.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)

SUMMARY_SYSTEM_PROMPT = (
    "You summarize transcripts of recorded audio. "
    "Output ONLY valid JSON with keys: summary, keywords, topic. "
    "No markdown fences or extra text. "
    "Write the summary in the language of the transcript."
)


class ClaudeLLM(BaseLLM):
    """Claude API LLM provider with rate-limit semaphore and retry logic."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        max_concurrent: int = 5,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.claude_api_key
        self._model = model or settings.claude_model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._client = AsyncAnthropic(api_key=self._api_key)

    @property
    def model(self) -> str:
        return self._model

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=16),
        retry=retry_if_exception_type((ConnectionError, TimeoutError)),
        reraise=True,
    )
    async def _call_api(
        self,
        user_prompt: str,
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Send one Messages API request and return the concatenated text blocks.

        SDK exceptions are translated to ``ConnectionError`` / ``TimeoutError``
        (retried) or ``RuntimeError`` (not retried).
        """
        request: dict = {
            "model": self._model,
            "max_tokens": max_tokens or self._max_tokens,
            "temperature": temperature if temperature is not None else self._temperature,
            "messages": [{"role": "user", "content": user_prompt}],
        }
        if system:
            request["system"] = system

        async with self._semaphore:
            try:
                response = await self._client.messages.create(**request)
            except APITimeoutError as exc:
                logger.warning("Claude API timeout: %s", exc)
                raise TimeoutError(f"Claude API request timed out: {exc}") from exc
            except APIConnectionError as exc:
                logger.warning("Claude API connection error: %s", exc)
                raise ConnectionError(f"Failed to connect to Claude API: {exc}") from exc
            except RateLimitError as exc:
                logger.warning("Claude API rate limit hit: %s", exc)
                raise ConnectionError(f"Claude API rate limit exceeded: {exc}") from exc
            except APIStatusError as exc:
                logger.error("Claude API returned %s: %s", exc.status_code, exc)
                raise RuntimeError(f"Claude API error ({exc.status_code}): {exc}") from exc

        return "".join(getattr(block, "text", "") for block in response.content)

    async def generate(self, prompt: str, **kwargs) -> str:
        """Generate a free-form text response."""
        return await self._call_api(
            user_prompt=prompt,
            system=kwargs.get("system"),
            temperature=kwargs.get("temperature"),
            max_tokens=kwargs.get("max_tokens"),
        )

    async def summarize(self, text: str, **kwargs) -> str:
        """Produce a JSON summary of a transcript."""
        return await self._call_api(
            user_prompt=f"Summarize the following transcript:\n\n{text}",
            system=SUMMARY_SYSTEM_PROMPT,
            temperature=kwargs.get("temperature", 0.3),
            max_tokens=kwargs.get("max_tokens"),
        )
