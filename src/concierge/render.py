"""Presentation of action results as success / error panels."""

from dataclasses import dataclass
from typing import Any, Literal

from rich.panel import Panel
from rich.text import Text

from concierge.mcp.client import ActionResult
from concierge.tools.address import ADDRESS_LOOKUP
from concierge.tools.customer import CREATE_CUSTOMER

SUCCESS_TITLES = {
    CREATE_CUSTOMER: "Customer created successfully!",
    ADDRESS_LOOKUP: "Address found",
}

ERROR_TITLES = {
    CREATE_CUSTOMER: "Error creating customer",
    ADDRESS_LOOKUP: "Error looking up address",
}


@dataclass(frozen=True)
class ActionPanel:
    """One rendered action outcome."""

    kind: Literal["success", "error"]
    tool: str
    title: str
    identifier: str | None = None
    message: str | None = None


def _error_message(action: ActionResult) -> str | None:
    if action.error:
        return action.error
    result = action.result
    if isinstance(result, dict) and result.get("status") == "error":
        message = str(result.get("error") or "Unknown error")
        errors = result.get("errors")
        if isinstance(errors, list) and errors:
            message = f"{message}: {', '.join(str(e) for e in errors)}"
        return message
    return None


def _identifier(result: Any) -> str | None:
    if not isinstance(result, dict):
        return None
    value = result.get("customerId") or result.get("id")
    return str(value) if value is not None else None


def render_action(action: ActionResult) -> ActionPanel:
    """Classify one action result as a success or error panel."""
    message = _error_message(action)
    if message is not None:
        return ActionPanel(
            kind="error",
            tool=action.tool,
            title=ERROR_TITLES.get(action.tool, f"Error running {action.tool}"),
            message=message,
        )
    return ActionPanel(
        kind="success",
        tool=action.tool,
        title=SUCCESS_TITLES.get(action.tool, f"{action.tool} succeeded"),
        identifier=_identifier(action.result),
    )


def render_actions(actions: list[ActionResult]) -> list[ActionPanel]:
    """Render every action result, in order."""
    return [render_action(action) for action in actions]


def to_rich_panel(panel: ActionPanel) -> Panel:
    """Build a rich Panel for terminal display."""
    if panel.kind == "success":
        body = Text(panel.title, style="bold green")
        if panel.identifier:
            body.append(f"\nCustomer ID: #{panel.identifier}", style="green")
        return Panel(body, border_style="green")

    body = Text(panel.title, style="bold red")
    body.append(f"\n{panel.message}", style="red")
    return Panel(body, border_style="red")
