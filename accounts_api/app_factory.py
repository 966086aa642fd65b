"""Entry point for ASGI servers (``uvicorn accounts_api.app_factory:app``)."""
from accounts_api.app import create_app

app = create_app()

__all__ = ["app", "create_app"]
