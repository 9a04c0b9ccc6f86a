"""HTTP chat API."""
