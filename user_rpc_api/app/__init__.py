"""
Application package initializer.

The API is organised into a few small pieces: ``core`` (settings,
logging, errors and result values), ``schemas`` (pydantic models),
``services`` (the user store and the procedures operating on it) and
``api`` (the HTTP adapter exposing the procedures).
"""

from .main import app, create_app  # noqa: F401
