"""
Ollama LLM provider implementation.

Talks to a locally running Ollama server through ``ollama.AsyncClient``.
Connection failures and timeouts are retried up to 3 times.
"""

import logging

from ollama import AsyncClient, ResponseError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.core.config import get_settings
from src.services.llm.base import BaseLLM
from src.services.llm.claude import SUMMARY_SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class OllamaLLM(BaseLLM):
    """Ollama local LLM provider with retry logic.

    Args:
        base_url: Ollama server URL (falls back to settings if not provided).
        model: Model name to use (e.g. "llama3.2").
        temperature: Default sampling temperature (0.0–1.0).
    """

    def __init__(
        self,
        base_url: str | None = None,
        model: str | None = None,
        temperature: float = 0.7,
    ) -> None:
        settings = get_settings()
        self._base_url = base_url or settings.ollama_base_url
        self._model = model or settings.ollama_model
        self._temperature = temperature
        self._client = AsyncClient(host=self._base_url)

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
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Send a chat request; ``max_tokens`` maps to Ollama's ``num_predict``."""
        options: dict = {
            "temperature": temperature if temperature is not None else self._temperature
        }
        if max_tokens:
            options["num_predict"] = max_tokens

        try:
            response = await self._client.chat(
                model=self._model,
                messages=messages,
                options=options,
            )
        except ConnectionError as exc:
            logger.warning("Ollama connection error (%s): %s", self._base_url, exc)
            raise ConnectionError(
                f"Failed to connect to Ollama at {self._base_url}: {exc}"
            ) from exc
        except TimeoutError as exc:
            logger.warning("Ollama timeout (%s): %s", self._base_url, exc)
            raise TimeoutError(f"Ollama request timed out ({self._base_url}): {exc}") from exc
        except ResponseError as exc:
            logger.error("Ollama response error: %s", exc)
            raise RuntimeError(f"Ollama error: {exc}") from exc
        return response.message.content

    @staticmethod
    def _messages(prompt: str, system: str | None) -> list[dict[str, str]]:
        messages = [{"role": "system", "content": system}] if system else []
        messages.append({"role": "user", "content": prompt})
        return messages

    async def generate(self, prompt: str, **kwargs) -> str:
        """Generate a free-form text response."""
        return await self._call_api(
            messages=self._messages(prompt, kwargs.get("system")),
            temperature=kwargs.get("temperature"),
            max_tokens=kwargs.get("max_tokens"),
        )

    async def summarize(self, text: str, **kwargs) -> str:
        """Produce a JSON summary of a transcript."""
        return await self._call_api(
            messages=self._messages(
                f"Summarize the following transcript:\n\n{text}", SUMMARY_SYSTEM_PROMPT
            ),
            temperature=kwargs.get("temperature", 0.3),
            max_tokens=kwargs.get("max_tokens"),
        )
