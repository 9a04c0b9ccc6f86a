"""Worker process entry point: ``python -m concierge.mcp.worker``.

Serves the tool registry over MCP stdio. Stdout carries the protocol, so
all logging goes to stderr.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import typer

from concierge.config.loader import load_config
from concierge.logging_setup import configure_logging
from concierge.mcp.server import create_mcp_server
from concierge.mcp.transports import run_stdio_server
from concierge.tools import build_registry

logger = logging.getLogger(__name__)


def worker_command(config_path: str | None = None) -> None:
    """Load config, build the tools and serve them until stdin closes.

    Args:
        config_path: Optional path to config file
    """
    config = load_config(Path(config_path) if config_path else None)
    configure_logging(config.logging.level, rich=False, stream=sys.stderr)

    registry = build_registry(config)
    if not config.customer_api.host or not config.customer_api.token:
        logger.warning("CUSTOMER_API_HOST or CUSTOMER_API_TOKEN not set; createCustomer will fail")

    server = create_mcp_server(registry)
    asyncio.run(run_stdio_server(server))


def main(
    config_path: str = typer.Option(None, "--config", "-c", help="Path to config file"),
) -> None:
    """Run the concierge tool worker on stdio."""
    worker_command(config_path=config_path)


if __name__ == "__main__":
    typer.run(main)
