"""
Quota module data models.

These models define the data structures used by the quota module
and exposed to callers that gate metered actions.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from shared.models import Tier


class ResourceType(str, Enum):
    """Metered actions."""

    AI_MESSAGE = "ai_message"
    COMPUTE_JOB = "compute_job"


class CountingStyle(str, Enum):
    """
    How a resource is counted.

    WINDOWED counters are time-bucketed and only grow; CONCURRENT
    counters track live units and shrink on release.
    """

    WINDOWED = "windowed"
    CONCURRENT = "concurrent"


class QuotaDecision(BaseModel):
    """
    Outcome of a try-consume.

    ``current`` is the count after the call: the incremented value when
    allowed, the unchanged value when denied.
    """

    allowed: bool
    resource: ResourceType
    current: int = Field(..., ge=0)
    limit: int = Field(..., ge=0)
    window_key: int

    model_config = {"frozen": True}

    @property
    def remaining(self) -> int:
        return max(self.limit - self.current, 0)


class ResourceUsage(BaseModel):
    """Current standing of one resource."""

    resource: ResourceType
    style: CountingStyle
    current: int = Field(..., ge=0)
    limit: int = Field(..., ge=0)
    remaining: int = Field(..., ge=0)
    window_key: int
    resets_at: Optional[int] = Field(
        None, description="Epoch seconds when a windowed counter rolls over"
    )


class UsageSnapshot(BaseModel):
    """All metered resources for one principal."""

    principal_id: str
    tier: Tier
    resources: list[ResourceUsage]
