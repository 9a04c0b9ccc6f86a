"""Tool listing command."""

import asyncio
from pathlib import Path

from rich.console import Console
from rich.table import Table

from concierge.config.loader import load_config
from concierge.config.schema import ConciergeConfig
from concierge.mcp.channel import ChannelError
from concierge.mcp.client import ActionClient

console = Console()


def tools_command(config_path: str | None = None) -> None:
    """Spawn the worker, list its tools, and stop it.

    Args:
        config_path: Optional path to config file
    """
    path = Path(config_path) if config_path else None
    try:
        config = load_config(path)
    except Exception as e:
        console.print(f"[red]Failed to load config: {e}[/red]")
        return

    asyncio.run(_list_tools(config, config_path))


async def _list_tools(config: ConciergeConfig, config_path: str | None) -> None:
    client = ActionClient.from_config(config, config_path=config_path)
    try:
        tools = await client.list_tools()
    except ChannelError as e:
        console.print(f"[red]Could not reach worker: {e}[/red]")
        return
    finally:
        await client.shutdown()

    table = Table(title="Worker tools")
    table.add_column("Tool", style="cyan")
    table.add_column("Required")
    table.add_column("Optional", style="dim")

    for schema in tools:
        optional = [p.name for p in schema.parameters if not p.required]
        table.add_row(schema.name, ", ".join(schema.required), ", ".join(optional))

    console.print(table)
