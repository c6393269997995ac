"""
QHub API package.

Provides the FastAPI application for the authentication, session and
quota enforcement service.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
