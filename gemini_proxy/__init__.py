"""FastAPI proxy that calls the Gemini API without exposing the API key to browsers."""

from .main import app, create_app

__all__ = ["app", "create_app"]
