"""API routes for the concierge chat server."""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from concierge.agent.engine import ChatEngine
from concierge.agent.sessions import SessionNotFoundError, SessionStore
from concierge.mcp.client import ActionResult

logger = logging.getLogger(__name__)


class ChatRequest(BaseModel):
    """Request body for chat endpoint."""

    message: str = Field(..., min_length=1)
    context: dict[str, Any] | None = None
    session_id: str | None = None


class ChatResponse(BaseModel):
    """Response body for chat endpoint."""

    reply: str
    actions: list[ActionResult]
    session_id: str


class ResetRequest(BaseModel):
    """Request body for reset endpoint."""

    session_id: str | None = None


class StatusResponse(BaseModel):
    """Generic status response."""

    status: str
    message: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: str


def create_router(engine: ChatEngine, sessions: SessionStore) -> APIRouter:
    """Create API router around a chat engine and its session table.

    Args:
        engine: Conversation engine
        sessions: Live sessions

    Returns:
        Configured API router
    """
    router = APIRouter()

    @router.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc).isoformat())

    @router.post("/api/chat", response_model=ChatResponse)
    async def chat(request: ChatRequest) -> ChatResponse:
        """Run one conversational turn.

        A request without a known ``session_id`` starts a new session; its
        token comes back in the response.
        """
        session = sessions.get_or_create(request.session_id)
        try:
            async with session.lock:
                result = await engine.chat(
                    session.conversation, request.message, context=request.context
                )
        except Exception as e:
            logger.exception("Error processing chat request")
            raise HTTPException(status_code=500, detail="Internal server error") from e

        return ChatResponse(reply=result.reply, actions=result.actions, session_id=session.token)

    @router.post("/api/chat/reset", response_model=StatusResponse)
    async def reset(request: ResetRequest | None = None) -> StatusResponse:
        """Reset a session's conversation to its initial state."""
        if request is not None and request.session_id:
            try:
                session = sessions.get(request.session_id)
            except SessionNotFoundError:
                raise HTTPException(status_code=404, detail="Session not found") from None
            async with session.lock:
                session.conversation.reset()
        return StatusResponse(status="success", message="Conversation reset")

    @router.delete("/api/sessions/{session_id}", response_model=StatusResponse)
    async def end_session(session_id: str) -> StatusResponse:
        """Evict a session."""
        if not sessions.evict(session_id):
            raise HTTPException(status_code=404, detail="Session not found")
        return StatusResponse(status="success", message="Session ended")

    return router
