"""ASGI entry point for running the concierge server via uvicorn CLI.

    python -m uvicorn concierge.server.asgi:app --host ... --port ...
"""

from concierge.config.loader import load_config
from concierge.server.app import create_app

config = load_config()
app = create_app(config)
