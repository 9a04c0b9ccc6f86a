"""Factory function for creating LLM clients from configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from concierge.llm.openai_compat import OpenAICompatibleClient

if TYPE_CHECKING:
    from concierge.config.schema import ConciergeConfig


def create_llm_client(config: ConciergeConfig) -> OpenAICompatibleClient:
    """Create an LLM client based on configuration.

    Args:
        config: Concierge configuration.

    Returns:
        An LLM client for the configured backend.

    Raises:
        ValueError: If the backend is misconfigured or not recognised.
    """
    backend = config.llm.backend

    if backend == "openai":
        if not config.llm.api_key:
            raise ValueError("OPENAI_API_KEY environment variable is required")
        return OpenAICompatibleClient(
            model=config.model.name,
            api_key=config.llm.api_key,
            timeout=config.llm.timeout,
            temperature=config.model.temperature,
        )
    elif backend == "openai-compatible":
        if not config.llm.base_url:
            raise ValueError("llm.base_url is required for the openai-compatible backend")
        return OpenAICompatibleClient(
            model=config.model.name,
            base_url=config.llm.base_url,
            api_key=config.llm.api_key or "none",
            timeout=config.llm.timeout,
            temperature=config.model.temperature,
        )
    else:
        raise ValueError(f"Unknown inference backend: {backend}")
