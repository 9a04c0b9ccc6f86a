"""Conversation state for one chat session."""

import json
from typing import Any

from concierge.llm.client import Message


def format_user_turn(message: str, context: dict[str, Any] | None = None) -> str:
    """Merge an optional structured context into the user's text."""
    if context is None:
        return message
    return f"{message}\n\nAdditional context: {json.dumps(context, ensure_ascii=False)}"


class Conversation:
    """Ordered message history that always starts with the system prompt."""

    def __init__(self, system_prompt: str):
        """Initialize conversation state.

        Args:
            system_prompt: System message for the assistant
        """
        self.system_prompt = system_prompt
        self.messages: list[Message] = [Message(role="system", content=system_prompt)]

    def __len__(self) -> int:
        return len(self.messages)

    def add_user_message(self, content: str, context: dict[str, Any] | None = None) -> None:
        """Add a user message to the conversation.

        Args:
            content: User message content
            context: Optional structured context appended to the text
        """
        self.messages.append(Message(role="user", content=format_user_turn(content, context)))

    def add_assistant_message(self, content: str) -> None:
        """Add an assistant reply to the conversation."""
        self.messages.append(Message(role="assistant", content=content))

    def add_system_message(self, content: str) -> None:
        """Add a system note, e.g. to relay a tool result to the model."""
        self.messages.append(Message(role="system", content=content))

    def reset(self) -> None:
        """Drop everything but the initial system message."""
        self.messages = [Message(role="system", content=self.system_prompt)]
