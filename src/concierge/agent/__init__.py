"""Conversation engine for the customer-service assistant."""

from concierge.agent.conversation import Conversation
from concierge.agent.engine import ChatEngine, ChatReply, EmptyCompletionError
from concierge.agent.intent import Intent, extract_intent
from concierge.agent.prompts import build_system_prompt
from concierge.agent.sessions import Session, SessionNotFoundError, SessionStore

__all__ = [
    "ChatEngine",
    "ChatReply",
    "Conversation",
    "EmptyCompletionError",
    "Intent",
    "Session",
    "SessionNotFoundError",
    "SessionStore",
    "build_system_prompt",
    "extract_intent",
]
