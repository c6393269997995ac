"""
Static quota limit table and window derivation.
"""

from datetime import datetime

from shared.clock import epoch_seconds
from shared.models import Tier

from .models import CountingStyle, ResourceType

WINDOW_SECONDS = 86400

# Concurrent counters live in a single bucket
CONCURRENT_WINDOW = 0

TIER_LIMITS: dict[ResourceType, dict[Tier, int]] = {
    # Per calendar day (UTC)
    ResourceType.AI_MESSAGE: {
        Tier.FREE: 10,
        Tier.PRO: 100,
        Tier.ENTERPRISE: 1000,
    },
    # Simultaneously active
    ResourceType.COMPUTE_JOB: {
        Tier.FREE: 3,
        Tier.PRO: 10,
        Tier.ENTERPRISE: 50,
    },
}

COUNTING_STYLES: dict[ResourceType, CountingStyle] = {
    ResourceType.AI_MESSAGE: CountingStyle.WINDOWED,
    ResourceType.COMPUTE_JOB: CountingStyle.CONCURRENT,
}


def limit_for(tier: Tier, resource: ResourceType) -> int:
    return TIER_LIMITS[ResourceType(resource)][Tier(tier)]


def counting_style_for(resource: ResourceType) -> CountingStyle:
    return COUNTING_STYLES[ResourceType(resource)]


def window_key(resource: ResourceType, now: datetime) -> int:
    """
    Bucket a moment falls into for the resource.

    Windowed resources use ``floor(epoch / 86400)``; concurrent ones
    always use CONCURRENT_WINDOW.
    """
    if counting_style_for(resource) is CountingStyle.CONCURRENT:
        return CONCURRENT_WINDOW
    return epoch_seconds(now) // WINDOW_SECONDS


def window_resets_at(key: int) -> int:
    """Epoch seconds at which a daily window ends."""
    return (key + 1) * WINDOW_SECONDS
