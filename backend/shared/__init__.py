"""
Shared infrastructure for QHub backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- clock: Wall-clock source
- models: Principal context and tiers

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import get_supabase_client, reset_client_cache
from .clock import Clock, utcnow, epoch_seconds
from .exceptions import (
    QHubError,
    NotFoundError,
    ValidationError,
    ConflictError,
    AuthenticationError,
    AuthorizationError,
    QuotaExceededError,
    DependencyError,
)
from .models import AuthenticatedUser, Tier

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "reset_client_cache",
    "Clock",
    "utcnow",
    "epoch_seconds",
    "QHubError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "AuthenticationError",
    "AuthorizationError",
    "QuotaExceededError",
    "DependencyError",
    "AuthenticatedUser",
    "Tier",
]
