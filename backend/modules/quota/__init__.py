"""
Quota enforcement module.

Atomically tracks and limits metered actions per principal, by resource
type and tier.

Public API:
- IQuotaEnforcer: Interface for quota checks
- QuotaEnforcer: Implementation
- ResourceType / CountingStyle: What is metered and how
- QuotaDecision / UsageSnapshot: Results
- limit_for / window_key: Static limit table and window derivation
"""

from .interfaces import IQuotaEnforcer, ITierLookup, IUsageCounterRepository
from .models import (
    CountingStyle,
    QuotaDecision,
    ResourceType,
    ResourceUsage,
    UsageSnapshot,
)
from .limits import (
    CONCURRENT_WINDOW,
    TIER_LIMITS,
    WINDOW_SECONDS,
    counting_style_for,
    limit_for,
    window_key,
)
from .exceptions import QuotaPrincipalNotFoundError, UnknownResourceError
from .repository import InMemoryUsageCounterRepository, SupabaseUsageCounterRepository
from .service import QuotaEnforcer

__all__ = [
    # Interfaces
    "IQuotaEnforcer",
    "ITierLookup",
    "IUsageCounterRepository",
    # Models
    "CountingStyle",
    "QuotaDecision",
    "ResourceType",
    "ResourceUsage",
    "UsageSnapshot",
    # Limits
    "CONCURRENT_WINDOW",
    "TIER_LIMITS",
    "WINDOW_SECONDS",
    "counting_style_for",
    "limit_for",
    "window_key",
    # Exceptions
    "QuotaPrincipalNotFoundError",
    "UnknownResourceError",
    # Implementations
    "InMemoryUsageCounterRepository",
    "SupabaseUsageCounterRepository",
    "QuotaEnforcer",
]
