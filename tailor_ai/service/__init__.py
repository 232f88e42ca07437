"""Backend completion service (FastAPI) serving the proxy endpoints."""
