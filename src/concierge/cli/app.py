"""Main CLI application using Typer."""

import sys

import typer
from rich.console import Console

from concierge import __version__

# Create Typer app
app = typer.Typer(
    name="concierge",
    help="Concierge - customer-service chat assistant",
    no_args_is_help=True,
)

console = Console()

CONFIG_OPTION_HELP = "Path to config file (default: ~/.concierge/concierge.yaml)"


@app.command()
def version():
    """Show concierge version."""
    console.print(f"concierge version {__version__}")


@app.command()
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
    config_path: str = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
):
    """Write a default configuration file."""
    from concierge.cli.init_cmd import init_command

    init_command(config_path=config_path, force=force)


@app.command()
def chat(
    config_path: str = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
):
    """Start interactive chat session."""
    from concierge.cli.chat import chat_command

    chat_command(config_path=config_path)


@app.command()
def start(
    config_path: str = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
    host: str = typer.Option(None, "--host", help="Override bind address"),
    port: int = typer.Option(None, "--port", "-p", help="Override port"),
):
    """Start the chat API server."""
    from concierge.cli.server_cmd import start_command

    start_command(config_path=config_path, host=host, port=port)


@app.command()
def worker(
    config_path: str = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
):
    """Run the tool worker on stdio (normally spawned by the server)."""
    from concierge.mcp.worker import worker_command

    worker_command(config_path=config_path)


@app.command()
def tools(
    config_path: str = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
):
    """Spawn the worker and list the tools it exposes."""
    from concierge.cli.tools_cmd import tools_command

    tools_command(config_path=config_path)


def main():
    """Entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
