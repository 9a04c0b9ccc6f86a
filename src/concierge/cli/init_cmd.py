"""Configuration initialization command."""

from pathlib import Path

from rich.console import Console

from concierge.config.loader import DEFAULT_CONFIG_PATH, save_config
from concierge.config.schema import ConciergeConfig

console = Console()


def init_command(config_path: str | None = None, force: bool = False) -> None:
    """Write a default config file.

    Secrets are left empty; provide them through the environment
    (OPENAI_API_KEY, CUSTOMER_API_TOKEN) or edit the file.

    Args:
        config_path: Destination path (default: ~/.concierge/concierge.yaml)
        force: Overwrite an existing file
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    if path.exists() and not force:
        console.print(f"[yellow]Config already exists at {path}[/yellow]")
        console.print("Use [bold]--force[/bold] to overwrite.")
        return

    save_config(ConciergeConfig(), path)
    console.print(f"[green]Wrote default config to {path}[/green]")
