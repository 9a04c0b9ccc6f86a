"""Client for OpenAI and OpenAI-compatible chat completion servers."""

from typing import Any

from openai import AsyncOpenAI

from concierge.llm.client import CompletionResponse, Message


class OpenAICompatibleClient:
    """LLM client for the OpenAI API or any server exposing ``/v1/chat/completions``.

    Leaving ``base_url`` unset talks to api.openai.com; vLLM, Ollama and
    llama.cpp work by pointing ``base_url`` at their ``/v1`` endpoint.
    """

    def __init__(
        self,
        model: str,
        base_url: str | None = None,
        api_key: str = "none",
        timeout: int = 60,
        temperature: float = 0.7,
    ) -> None:
        """Initialise the client.

        Args:
            model: Model name served by the backend.
            base_url: OpenAI-compatible endpoint (must include ``/v1``), or None for OpenAI.
            api_key: API key (many self-hosted backends ignore this but the SDK requires one).
            timeout: Request timeout in seconds.
            temperature: Default sampling temperature.
        """
        self.model = model
        self.temperature = temperature
        self.client = AsyncOpenAI(base_url=base_url, api_key=api_key, timeout=timeout)

    def _convert_messages(self, messages: list[Message]) -> list[dict[str, Any]]:
        """Convert internal Message format to OpenAI format."""
        return [{"role": msg.role, "content": msg.content} for msg in messages]

    async def complete(
        self,
        messages: list[Message],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> CompletionResponse:
        """Generate a completion.

        Args:
            messages: Conversation history.
            temperature: Sampling temperature override.
            max_tokens: Maximum tokens to generate.

        Returns:
            CompletionResponse with the reply text (empty if the model sent none).
        """
        params: dict[str, Any] = {
            "model": self.model,
            "messages": self._convert_messages(messages),
            "temperature": temperature if temperature is not None else self.temperature,
        }

        if max_tokens:
            params["max_tokens"] = max_tokens

        response = await self.client.chat.completions.create(**params)

        if not response.choices:
            return CompletionResponse(content="", finish_reason="empty")

        choice = response.choices[0]
        return CompletionResponse(
            content=choice.message.content or "",
            finish_reason=choice.finish_reason or "stop",
        )
