"""ASGI entry point for uvicorn: ``uvicorn player_api.asgi:app``."""

from player_api.main import create_app

app = create_app()
