"""FastAPI transport for the replacer service."""
