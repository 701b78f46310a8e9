"""Status enums for readiness, trends, missions and field reports."""

from enum import Enum


class OilStatus(Enum):
    """Oil change urgency. Lower value = more urgent."""

    OVERDUE = 1
    WARNING = 2
    GOOD = 3


class HealthStatus(Enum):
    """Readiness bucket derived from a health score. Lower value = worse."""

    GROUNDED = 1
    MAINTENANCE_REQUIRED = 2
    COMBAT_READY = 3

    @property
    def label(self) -> str:
        return self.name.replace("_", " ")


class Trend(Enum):
    """Direction of an MPG comparison between two windows."""

    DOWN = "down"
    STABLE = "stable"
    UP = "up"


class MissionStatus(Enum):
    """Mission lifecycle, mirrored from the stored status column."""

    ACTIVE = "active"
    PENDING_POD = "pending_pod"
    COMPLETED = "completed"
    HISTORY = "history"


class ReportStatus(Enum):
    """Field report moderation state."""

    PENDING = "PENDING"
    HOLD = "HOLD"
    PUBLISHED = "PUBLISHED"
