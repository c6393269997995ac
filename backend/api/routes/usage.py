"""
Usage endpoints.

Read-only view of the caller's quota standing.
"""

from fastapi import APIRouter, Depends

from modules.quota.interfaces import IQuotaEnforcer
from modules.quota.models import UsageSnapshot
from shared.models import AuthenticatedUser

from ..dependencies import get_quota_enforcer
from ..middleware.auth import get_current_user

router = APIRouter()


@router.get("", response_model=UsageSnapshot)
async def get_usage(
    user: AuthenticatedUser = Depends(get_current_user),
    quota: IQuotaEnforcer = Depends(get_quota_enforcer),
) -> UsageSnapshot:
    """
    Current count and limit for every metered resource.

    Limits follow the caller's stored tier. Requires authentication.
    """
    return await quota.get_usage(user.id)
