"""Concierge - customer-service chat assistant backed by an MCP tool worker.

Concierge turns natural-language conversation into structured customer
creation requests against an external CRM API, with a Brazilian address
(CEP) lookup helper.

Key modules:

- :mod:`concierge.agent` - Conversation engine, action intent extraction, sessions
- :mod:`concierge.mcp` - JSON-RPC stdio channel, action client and the tool worker
- :mod:`concierge.tools` - createCustomer and getAddressByZipcode tools
- :mod:`concierge.services` - CRM and ViaCEP HTTP collaborators
- :mod:`concierge.llm` - LLM client abstraction (OpenAI and compatible servers)
- :mod:`concierge.server` - FastAPI chat API
"""

__version__ = "0.1.0"
