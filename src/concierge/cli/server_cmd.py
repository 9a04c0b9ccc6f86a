"""Server management commands."""

from pathlib import Path

import uvicorn
from rich.console import Console

from concierge.config.loader import load_config
from concierge.logging_setup import configure_logging
from concierge.server.app import create_app

console = Console()


def start_command(
    config_path: str | None = None,
    host: str | None = None,
    port: int | None = None,
) -> None:
    """Start the chat API server in the foreground.

    Args:
        config_path: Optional path to config file
        host: Bind address override
        port: Port override
    """
    path = Path(config_path) if config_path else None
    try:
        config = load_config(path)
    except Exception as e:
        console.print(f"[red]Failed to load config: {e}[/red]")
        return

    configure_logging(config.logging.level)

    try:
        app = create_app(config, config_path=config_path)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        return

    bind_host = host or config.server.host
    bind_port = port or config.server.port
    console.print(f"[cyan]Chat endpoint: POST http://{bind_host}:{bind_port}/api/chat[/cyan]")
    console.print(f"[cyan]Health check: GET http://{bind_host}:{bind_port}/health[/cyan]")

    uvicorn.run(app, host=bind_host, port=bind_port, log_config=None)
