"""
Member Club Rental - API Module

FastAPI server exposing the rental core to a presentation client.
"""

from .server import app, create_app

__all__ = ["app", "create_app"]
