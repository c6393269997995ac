"""
Wall-clock source.

Services accept a ``clock`` callable instead of calling ``datetime.now``
directly so that expiry and quota windows can be driven from tests.
"""

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def epoch_seconds(moment: datetime) -> int:
    """Whole seconds since the Unix epoch."""
    return int(moment.timestamp())
