"""
Abstract base class for LLM providers.

All LLM implementations (Claude, Ollama) must implement this interface,
enabling provider-agnostic title generation and summarization.
"""

from abc import ABC, abstractmethod


class BaseLLM(ABC):
    """Interface that every LLM provider must implement."""

    @abstractmethod
    async def generate(self, prompt: str, **kwargs) -> str:
        """Generate a free-form text response.

        Args:
            prompt: The user/system prompt to send to the model.
            **kwargs: Provider-specific options (system, temperature, max_tokens).

        Returns:
            The model's text response.
        """

    @abstractmethod
    async def summarize(self, text: str, **kwargs) -> str:
        """Produce a concise summary of the given text.

        Args:
            text: Source text to summarize (a full transcript).
            **kwargs: Provider-specific options.

        Returns:
            JSON string with at least ``summary`` and ``keywords`` fields.
        """
