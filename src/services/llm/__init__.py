"""
LLM module - Language model abstraction layer.

Title generation and summarization go through ``create_llm``, which picks
the provider named in settings unless one is passed explicitly.
"""

from src.core.config import get_settings

from .base import BaseLLM

__all__ = ["BaseLLM", "create_llm"]


def create_llm(provider: str | None = None, **kwargs) -> BaseLLM:
    """
    Factory function to create LLM instance based on provider.

    Args:
        provider: LLM provider name ("claude", "ollama"); None = settings.llm_provider
        **kwargs: Provider-specific configuration

    Returns:
        BaseLLM implementation instance

    Raises:
        ValueError: If provider is unknown
    """
    provider = provider or get_settings().llm_provider
    if provider == "claude":
        from .claude import ClaudeLLM

        return ClaudeLLM(**kwargs)
    elif provider == "ollama":
        from .ollama import OllamaLLM

        return OllamaLLM(**kwargs)
    else:
        raise ValueError(f"Unknown LLM provider: {provider}")
