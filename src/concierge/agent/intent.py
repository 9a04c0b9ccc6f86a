"""Extraction of action intents embedded in model replies.

The model asks for a side effect by writing a JSON object such as
``{"action": "createCustomer", "data": {...}}`` somewhere in its reply,
possibly surrounded by prose or a Markdown code fence.
"""

import json
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Intent:
    """An action the model asked to perform."""

    action: str
    data: dict[str, Any]


def _object_end(text: str, start: int) -> int | None:
    """Index just past the brace that closes the object opened at ``start``.

    Braces inside JSON strings are ignored. Returns None if the object is
    never closed.
    """
    depth = 0
    in_string = False
    escaped = False

    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1

    return None


def _parse_intent(candidate: str) -> Intent | None:
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError:
        return None

    if not isinstance(parsed, dict):
        return None

    action = parsed.get("action")
    data = parsed.get("data")
    if isinstance(action, str) and action.strip() and isinstance(data, dict):
        return Intent(action=action.strip(), data=data)
    return None


def extract_intent(text: str) -> Intent | None:
    """Find the first embedded action intent in a model reply.

    Every ``{`` is tried in order as the start of a balanced JSON object; the
    first one that parses and carries a string ``action`` and an object
    ``data`` wins.

    Args:
        text: Raw model reply

    Returns:
        The intent, or None when the reply holds no usable one
    """
    if not text or '"action"' not in text:
        return None

    start = text.find("{")
    while start != -1:
        end = _object_end(text, start)
        if end is not None and '"action"' in text[start:end]:
            intent = _parse_intent(text[start:end])
            if intent is not None:
                return intent
        start = text.find("{", start + 1)

    return None
