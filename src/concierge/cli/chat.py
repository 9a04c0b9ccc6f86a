"""Interactive chat REPL command."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt

from concierge.agent.conversation import Conversation
from concierge.agent.engine import ChatEngine
from concierge.agent.prompts import build_system_prompt
from concierge.config.loader import load_config
from concierge.llm.factory import create_llm_client
from concierge.logging_setup import configure_logging
from concierge.mcp.client import ActionClient
from concierge.render import render_actions, to_rich_panel

if TYPE_CHECKING:
    from concierge.config.schema import ConciergeConfig

console = Console()
logger = logging.getLogger(__name__)

HELP_TEXT = """[bold]Commands[/bold]
  /reset  Start the conversation over
  /help   Show this help
  /exit   Quit"""


def chat_command(config_path: str | None = None) -> None:
    """Start interactive chat session.

    Args:
        config_path: Optional path to config file
    """
    path = Path(config_path) if config_path else None
    try:
        config = load_config(path)
    except Exception as e:
        console.print(f"[red]Failed to load config: {e}[/red]")
        console.print("Run [bold]concierge init[/bold] to create a config file.")
        return

    # Keep the REPL readable: only warnings and up
    configure_logging("WARNING")

    console.print(
        Panel.fit(
            f"[bold blue]concierge chat[/bold blue]\n"
            f"Model: {config.model.name}\n"
            f"Tone: {config.agent.tone}\n"
            f"Type /help for commands, /exit to quit",
            border_style="blue",
        )
    )

    asyncio.run(_async_chat(config, config_path))


async def _async_chat(config: ConciergeConfig, config_path: str | None) -> None:
    """Async chat loop.

    Args:
        config: Concierge configuration
        config_path: Config file forwarded to the worker
    """
    try:
        llm = create_llm_client(config)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        return

    actions = ActionClient.from_config(config, config_path=config_path)
    engine = ChatEngine(llm=llm, actions=actions, temperature=config.model.temperature)
    conversation = Conversation(build_system_prompt(config.agent.tone))

    try:
        while True:
            try:
                user_input = await asyncio.to_thread(Prompt.ask, "\n[bold cyan]You[/bold cyan]")
            except (KeyboardInterrupt, EOFError):
                break

            if not user_input.strip():
                continue

            if user_input.startswith("/"):
                if _handle_slash_command(user_input, conversation):
                    break
                continue

            try:
                with console.status("[bold green]Thinking...[/bold green]", spinner="dots"):
                    result = await engine.chat(conversation, user_input)
            except Exception as e:
                logger.debug("Chat turn failed", exc_info=True)
                console.print(f"[red]Sorry, something went wrong: {e}[/red]")
                continue

            console.print("\n[bold green]concierge[/bold green]")
            console.print(Markdown(result.reply))
            for panel in render_actions(result.actions):
                console.print(to_rich_panel(panel))
    finally:
        await actions.shutdown()


def _handle_slash_command(command: str, conversation: Conversation) -> bool:
    """Handle a slash command.

    Returns:
        True if the REPL should exit
    """
    name = command.strip().lower()
    if name in ("/exit", "/quit"):
        return True
    if name == "/reset":
        conversation.reset()
        console.print("[green]Conversation reset[/green]")
    elif name == "/help":
        console.print(HELP_TEXT)
    else:
        console.print(f"[yellow]Unknown command: {command}[/yellow]")
    return False
