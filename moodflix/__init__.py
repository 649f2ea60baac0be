"""Launcher package for the Moodflix service.

``python -m moodflix`` starts the API with uvicorn; ``moodflix.app`` is the
ASGI application for other servers.
"""

from __future__ import annotations

from app import __version__
from app.main import app, create_app

__all__ = ["__version__", "app", "create_app"]
