"""Process-wide logging configuration."""

import logging
import sys
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO", rich: bool = True, stream: TextIO | None = None) -> None:
    """Install a single root handler.

    Args:
        level: Root log level name
        rich: Use a RichHandler (interactive processes) instead of plain lines
        stream: Target stream; defaults to stderr. The worker must never log to
            stdout, which carries the JSON-RPC protocol.
    """
    stream = stream or sys.stderr
    handler: logging.Handler
    if rich:
        handler = RichHandler(console=Console(file=stream), rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    else:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(logging.WARNING, root.level))
