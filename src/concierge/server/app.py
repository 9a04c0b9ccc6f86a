"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from concierge import __version__
from concierge.agent.engine import ChatEngine
from concierge.agent.prompts import build_system_prompt
from concierge.agent.sessions import SessionStore
from concierge.config.schema import ConciergeConfig
from concierge.llm.factory import create_llm_client
from concierge.mcp.channel import ChannelError
from concierge.mcp.client import ActionClient
from concierge.server.routes import create_router

logger = logging.getLogger(__name__)


def create_app(
    config: ConciergeConfig,
    engine: ChatEngine | None = None,
    sessions: SessionStore | None = None,
    config_path: str | None = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        config: Concierge configuration
        engine: Prebuilt engine (built from config when omitted)
        sessions: Prebuilt session table (built from config when omitted)
        config_path: Config file forwarded to the worker process

    Returns:
        Configured FastAPI app
    """
    if engine is None:
        engine = ChatEngine(
            llm=create_llm_client(config),
            actions=ActionClient.from_config(config, config_path=config_path),
            temperature=config.model.temperature,
        )
    if sessions is None:
        sessions = SessionStore(
            system_prompt=build_system_prompt(config.agent.tone),
            max_sessions=config.agent.max_sessions,
            ttl=config.agent.session_ttl,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Agent tone: %s", config.agent.tone)
        try:
            await engine.actions.initialize()
        except ChannelError as e:
            # Calls retry the connection lazily
            logger.error("Failed to initialize worker: %s", e)
        yield
        logger.info("Shutting down gracefully...")
        await engine.actions.shutdown()

    app = FastAPI(
        title="Concierge",
        description="Customer-service chat assistant",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        return JSONResponse(status_code=400, content={"error": "Invalid request", "details": details})

    app.include_router(create_router(engine, sessions))

    return app
