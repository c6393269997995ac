"""
Quota enforcer implementation.

Gates metered actions per principal. The limit always comes from the
principal's stored tier, so a tier change applies immediately even to
tokens minted before it.
"""

import logging
from typing import Optional, Union

from shared.clock import Clock, utcnow
from shared.exceptions import QuotaExceededError
from shared.models import Tier

from .interfaces import IQuotaEnforcer, ITierLookup, IUsageCounterRepository
from .limits import counting_style_for, limit_for, window_key, window_resets_at
from .models import CountingStyle, QuotaDecision, ResourceType, ResourceUsage, UsageSnapshot
from .exceptions import QuotaPrincipalNotFoundError, UnknownResourceError

logger = logging.getLogger(__name__)


def _resource(value: Union[ResourceType, str]) -> ResourceType:
    try:
        return ResourceType(value)
    except ValueError:
        raise UnknownResourceError(str(value))


class QuotaEnforcer(IQuotaEnforcer):
    """
    Atomic per-principal quota checks.

    The check-and-increment is delegated to the counter repository as a
    single conditional write; this class never reads a count and then
    writes it back.
    """

    def __init__(
        self,
        repository: IUsageCounterRepository,
        principals: ITierLookup,
        clock: Optional[Clock] = None,
    ):
        self._repo = repository
        self._principals = principals
        self._clock = clock or utcnow

    def limit_for(self, tier: Tier, resource: ResourceType) -> int:
        return limit_for(tier, _resource(resource))

    def window_key(self, resource: ResourceType) -> int:
        """Current window for the resource."""
        return window_key(_resource(resource), self._clock())

    def _tier_of(self, principal_id: str) -> Tier:
        principal = self._principals.get_by_id(principal_id)
        if principal is None:
            raise QuotaPrincipalNotFoundError(principal_id)
        return Tier(principal.tier)

    async def try_consume(
        self,
        principal_id: str,
        resource: ResourceType,
        window_key: Optional[int] = None,
    ) -> QuotaDecision:
        resource = _resource(resource)
        key = self.window_key(resource) if window_key is None else window_key
        limit = self.limit_for(self._tier_of(principal_id), resource)

        allowed, current = self._repo.try_increment(principal_id, resource, key, limit)
        if allowed:
            logger.debug(
                "Quota consumed: %s %s %d/%d", principal_id, resource.value, current, limit
            )
        else:
            logger.warning(
                "Quota denied: %s %s %d/%d", principal_id, resource.value, current, limit
            )
        return QuotaDecision(
            allowed=allowed,
            resource=resource,
            current=current,
            limit=limit,
            window_key=key,
        )

    async def require(
        self,
        principal_id: str,
        resource: ResourceType,
        window_key: Optional[int] = None,
    ) -> QuotaDecision:
        """
        Like try_consume, but raise on denial.

        Raises:
            QuotaExceededError: With the current count and limit
        """
        decision = await self.try_consume(principal_id, resource, window_key)
        if not decision.allowed:
            raise QuotaExceededError(decision.resource.value, decision.current, decision.limit)
        return decision

    async def release(
        self,
        principal_id: str,
        resource: ResourceType,
        window_key: Optional[int] = None,
    ) -> int:
        """
        Give back one unit of a concurrent resource (job finished or cancelled).

        Windowed usage is history and is never given back; for those
        resources this only reports the current count.
        """
        resource = _resource(resource)
        key = self.window_key(resource) if window_key is None else window_key
        if counting_style_for(resource) is CountingStyle.WINDOWED:
            return self._repo.get_count(principal_id, resource, key)

        current = self._repo.decrement(principal_id, resource, key)
        logger.debug("Quota released: %s %s now %d", principal_id, resource.value, current)
        return current

    async def get_usage(self, principal_id: str) -> UsageSnapshot:
        tier = self._tier_of(principal_id)
        resources = []
        for resource in ResourceType:
            style = counting_style_for(resource)
            key = self.window_key(resource)
            limit = limit_for(tier, resource)
            current = self._repo.get_count(principal_id, resource, key)
            resources.append(
                ResourceUsage(
                    resource=resource,
                    style=style,
                    current=current,
                    limit=limit,
                    remaining=max(limit - current, 0),
                    window_key=key,
                    resets_at=window_resets_at(key) if style is CountingStyle.WINDOWED else None,
                )
            )
        return UsageSnapshot(principal_id=principal_id, tier=tier, resources=resources)
