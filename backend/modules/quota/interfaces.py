"""
Quota module interfaces.

Business logic that performs a metered action depends on IQuotaEnforcer,
never on counter storage directly.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from shared.models import Tier

from .models import QuotaDecision, ResourceType, UsageSnapshot


@runtime_checkable
class ITierLookup(Protocol):
    """
    Read access to a principal's stored tier.

    Satisfied by the auth module's principal repositories.
    """

    def get_by_id(self, principal_id: str) -> Optional[Any]:
        """Object with a ``tier`` attribute, or None."""
        ...


@runtime_checkable
class IUsageCounterRepository(Protocol):
    """
    Durable usage counters keyed by (principal, resource, window).

    Each method is one atomic step at the storage layer.
    """

    def try_increment(
        self,
        user_id: str,
        resource: ResourceType,
        window_key: int,
        limit: int,
    ) -> tuple[bool, int]:
        """
        Increment iff the current count is below limit.

        Returns:
            (incremented, count after the call)
        """
        ...

    def decrement(self, user_id: str, resource: ResourceType, window_key: int) -> int:
        """Decrement, never below zero. Returns the new count."""
        ...

    def get_count(self, user_id: str, resource: ResourceType, window_key: int) -> int:
        """Current count (0 if no counter exists)."""
        ...


@runtime_checkable
class IQuotaEnforcer(Protocol):
    """Interface for quota checks."""

    def limit_for(self, tier: Tier, resource: ResourceType) -> int:
        """Static limit for a tier and resource."""
        ...

    async def try_consume(
        self,
        principal_id: str,
        resource: ResourceType,
        window_key: Optional[int] = None,
    ) -> QuotaDecision:
        """
        Atomically consume one unit if under limit.

        A denial never consumes quota.
        """
        ...

    async def release(
        self,
        principal_id: str,
        resource: ResourceType,
        window_key: Optional[int] = None,
    ) -> int:
        """Return one unit of a concurrent resource."""
        ...

    async def get_usage(self, principal_id: str) -> UsageSnapshot:
        """Current standing across all resources."""
        ...
