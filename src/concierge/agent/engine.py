"""Conversation engine: model turns, intent extraction and action follow-ups."""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from concierge.agent.intent import Intent, extract_intent
from concierge.mcp.client import ActionResult
from concierge.tools.customer import CREATE_CUSTOMER

if TYPE_CHECKING:
    from concierge.agent.conversation import Conversation
    from concierge.llm.client import LLMClient
    from concierge.mcp.client import ActionClient

logger = logging.getLogger(__name__)

FALLBACK_FOLLOW_UP = "Action completed."


class EmptyCompletionError(RuntimeError):
    """The model returned no content."""


@dataclass
class ChatReply:
    """Reply to one user turn."""

    reply: str
    actions: list[ActionResult] = field(default_factory=list)


def summarize_action(action: ActionResult) -> str:
    """System note relaying a tool outcome to the model."""
    if action.error:
        summary = f"Error: {action.error}"
    else:
        summary = f"Success: {json.dumps(action.result, indent=2, ensure_ascii=False, default=str)}"
    return (
        f"The {action.tool} action was executed with the following result:\n{summary}\n\n"
        "Generate a friendly response to inform the user about the result."
    )


class ChatEngine:
    """Drives one conversational turn against the model and the action client."""

    def __init__(
        self,
        llm: LLMClient,
        actions: ActionClient,
        temperature: float | None = 0.7,
    ):
        """Initialize the engine.

        Args:
            llm: LLM client for generating replies
            actions: Client for worker tools
            temperature: Sampling temperature for every model call
        """
        self.llm = llm
        self.actions = actions
        self.temperature = temperature
        self._handlers: dict[str, Callable[[dict[str, Any]], Awaitable[ActionResult]]] = {
            CREATE_CUSTOMER: actions.create_customer,
        }

    async def chat(
        self,
        conversation: Conversation,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> ChatReply:
        """Run one user turn.

        The raw model reply is always kept in history. When it carries an
        action intent, the action runs and a second model call turns the
        outcome into the user-facing reply.

        Args:
            conversation: Session history, mutated in place
            message: User message
            context: Optional structured context merged into the user turn

        Returns:
            ChatReply with the reply text and any action results

        Raises:
            EmptyCompletionError: If the model returns no content
        """
        conversation.add_user_message(message, context)

        response = await self.llm.complete(conversation.messages, temperature=self.temperature)
        if not response.content:
            raise EmptyCompletionError("No response from the language model")

        conversation.add_assistant_message(response.content)

        intent = extract_intent(response.content)
        if intent is None:
            return ChatReply(reply=response.content)

        logger.info("Model requested action %s", intent.action)
        action = await self.execute_intent(intent)
        reply = await self._follow_up(conversation, action)
        return ChatReply(reply=reply, actions=[action])

    async def execute_intent(self, intent: Intent) -> ActionResult:
        """Dispatch an intent to its action; unknown actions touch nothing."""
        handler = self._handlers.get(intent.action)
        if handler is None:
            logger.warning("Unknown action requested: %s", intent.action)
            return ActionResult(
                tool=intent.action,
                input=intent.data,
                error=f"Unknown action: {intent.action}",
            )
        return await handler(intent.data)

    async def _follow_up(self, conversation: Conversation, action: ActionResult) -> str:
        conversation.add_system_message(summarize_action(action))

        response = await self.llm.complete(conversation.messages, temperature=self.temperature)
        reply = response.content or FALLBACK_FOLLOW_UP

        conversation.add_assistant_message(reply)
        return reply
