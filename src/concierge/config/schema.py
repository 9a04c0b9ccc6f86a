"""Pydantic models for concierge.yaml configuration."""

from typing import Literal

from pydantic import BaseModel, Field

DEFAULT_TONE = "Professional, helpful, and efficient"


class ModelConfig(BaseModel):
    """LLM model configuration."""

    name: str = Field(default="gpt-4o-mini", description="Chat completion model name")
    temperature: float = Field(default=0.7, description="Sampling temperature", ge=0.0, le=2.0)


class LLMConfig(BaseModel):
    """Inference backend configuration."""

    backend: Literal["openai", "openai-compatible"] = Field(
        default="openai",
        description="Inference backend to use",
    )
    api_key: str | None = Field(default=None, description="API key (required for 'openai')")
    base_url: str | None = Field(
        default=None,
        description="OpenAI-compatible endpoint including /v1 (required for 'openai-compatible')",
    )
    timeout: int = Field(default=60, description="Request timeout in seconds", ge=1)


class AgentConfig(BaseModel):
    """Conversation engine configuration."""

    tone: str = Field(default=DEFAULT_TONE, description="Tone and style of the assistant")
    max_sessions: int = Field(
        default=100, description="Maximum number of live chat sessions", ge=1
    )
    session_ttl: int = Field(
        default=3600, description="Idle seconds before a session is evicted", ge=1
    )


class CustomerAPIConfig(BaseModel):
    """External CRM API configuration."""

    host: str | None = Field(default=None, description="CRM base URL (e.g. https://crm.example)")
    token: str | None = Field(default=None, description="Bearer token for the CRM API")
    timeout: float = Field(default=30.0, description="Request timeout in seconds", gt=0)


class AddressAPIConfig(BaseModel):
    """ViaCEP address lookup configuration."""

    base_url: str = Field(default="https://viacep.com.br/ws", description="ViaCEP base URL")
    timeout: float = Field(default=5.0, description="Request timeout in seconds", gt=0)


class WorkerConfig(BaseModel):
    """Tool worker subprocess configuration."""

    command: list[str] | None = Field(
        default=None,
        description="Command line for the worker (default: python -m concierge.mcp.worker)",
    )
    ready_signal: str = Field(
        default="running on stdio",
        description="Substring on the worker's stderr that marks it ready",
    )
    ready_timeout: float = Field(
        default=2.0, description="Seconds to wait for the ready signal", gt=0
    )
    request_timeout: float = Field(
        default=10.0, description="Seconds before an unanswered call fails", gt=0
    )


class ServerConfig(BaseModel):
    """API server configuration."""

    host: str = Field(default="127.0.0.1", description="Server bind address")
    port: int = Field(default=3000, description="Server port", ge=1, le=65535)
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Root log level"
    )


class ConciergeConfig(BaseModel):
    """Root configuration model."""

    model: ModelConfig = Field(default_factory=ModelConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    agent: AgentConfig = Field(default_factory=AgentConfig)
    customer_api: CustomerAPIConfig = Field(default_factory=CustomerAPIConfig)
    address_api: AddressAPIConfig = Field(default_factory=AddressAPIConfig)
    worker: WorkerConfig = Field(default_factory=WorkerConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
