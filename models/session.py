"""Explicit request context passed to scoring entry points."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Session:
    """The acting user and the clock reading to score against."""

    user_id: str
    now: datetime = field(default_factory=_utcnow)
