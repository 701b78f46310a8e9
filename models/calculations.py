"""Helper functions for readiness scoring and MPG trends."""

import math
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, Sequence, Union

from dateutil.parser import isoparse

from .status import HealthStatus, OilStatus, Trend

OIL_WARNING_MILES = 1000
STALE_AFTER_DAYS = 14

SCORE_GOOD = 100
SCORE_OIL_WARNING = 70
SCORE_OIL_OVERDUE = 0
SCORE_STALE_CAP = 50

COMBAT_READY_MIN_SCORE = 80
MAINTENANCE_MIN_SCORE = 50

# Fleet-wide trend: MPG logs from the last 7 days, split in half, +/-3%.
FLEET_TREND_WINDOW_DAYS = 7
FLEET_TREND_MIN_SAMPLES = 3
FLEET_TREND_THRESHOLD_PCT = 3.0

# Per-vehicle chart trend: last 3 samples vs the 3 before them, +/-5%.
VEHICLE_TREND_WINDOW = 3
VEHICLE_TREND_THRESHOLD_PCT = 5.0


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    dt = value if isinstance(value, datetime) else isoparse(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def calc_miles_until_oil_change(
    current_odometer: int, last_oil_change_odometer: int, oil_change_interval: int
) -> int:
    """Miles left before the next oil change (negative when overdue)."""
    miles_since = current_odometer - last_oil_change_odometer
    return oil_change_interval - miles_since


def check_oil_status(miles_until: float) -> OilStatus:
    """Classify remaining oil-change miles."""
    if miles_until < 0:
        return OilStatus.OVERDUE
    if miles_until < OIL_WARNING_MILES:
        return OilStatus.WARNING
    return OilStatus.GOOD


def is_data_stale(
    last_log_at: Optional[datetime],
    now: datetime,
    max_age_days: float = STALE_AFTER_DAYS,
) -> bool:
    """True when there is no fuel log or the newest one is too old."""
    if last_log_at is None:
        return True
    age = parse_timestamp(now) - parse_timestamp(last_log_at)
    return age > timedelta(days=max_age_days)


def calc_health_score(oil_status: OilStatus, stale: bool) -> int:
    """
    Synthetic 0-100 readiness score.

    Oil status sets the base (GOOD 100, WARNING 70, OVERDUE 0); stale data
    caps it at 50 but never raises it.
    """
    score = SCORE_GOOD
    if oil_status == OilStatus.OVERDUE:
        score = SCORE_OIL_OVERDUE
    elif oil_status == OilStatus.WARNING:
        score = SCORE_OIL_WARNING

    if stale:
        score = min(score, SCORE_STALE_CAP)
    return score


def health_status_for(score: float) -> HealthStatus:
    """Bucket a health score."""
    if score >= COMBAT_READY_MIN_SCORE:
        return HealthStatus.COMBAT_READY
    if score >= MAINTENANCE_MIN_SCORE:
        return HealthStatus.MAINTENANCE_REQUIRED
    return HealthStatus.GROUNDED


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calc_fleet_score(scores: Sequence[int]) -> int:
    """Rounded mean of vehicle scores; 0 for an empty fleet."""
    if not scores:
        return 0
    return round_half_up(sum(scores) / len(scores))


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def percent_difference(older: float, newer: float) -> Optional[float]:
    """Percent change from older to newer; None when older is zero."""
    if older == 0:
        return None
    return (newer - older) / older * 100


def classify_trend(difference: Optional[float], threshold: float) -> Trend:
    """Map a percent difference onto DOWN/UP/STABLE with a symmetric threshold."""
    if difference is None:
        return Trend.STABLE
    if difference < -threshold:
        return Trend.DOWN
    if difference > threshold:
        return Trend.UP
    return Trend.STABLE


def calc_fleet_efficiency_trend(
    mpg_values: Sequence[float],
    min_samples: int = FLEET_TREND_MIN_SAMPLES,
    threshold: float = FLEET_TREND_THRESHOLD_PCT,
) -> Trend:
    """
    7-day fleet efficiency trend.

    mpg_values must be ordered oldest first. The list is split at its
    midpoint (floor) and the mean of the newer half is compared to the
    mean of the older half.
    """
    if len(mpg_values) < min_samples:
        return Trend.STABLE
    half = len(mpg_values) // 2
    older = mpg_values[:half]
    newer = mpg_values[half:]
    return classify_trend(percent_difference(_mean(older), _mean(newer)), threshold)


def calc_vehicle_mpg_trend(
    mpg_values: Sequence[float],
    previous: Trend = Trend.STABLE,
    window: int = VEHICLE_TREND_WINDOW,
    threshold: float = VEHICLE_TREND_THRESHOLD_PCT,
) -> Trend:
    """
    Per-vehicle MPG chart trend: last `window` samples vs the `window` before.

    With no samples the trend resets to STABLE. With too few samples to
    compare, the previously shown trend is kept.
    """
    if not mpg_values:
        return Trend.STABLE
    if len(mpg_values) < window:
        return previous
    recent = mpg_values[-window:]
    older = mpg_values[-2 * window:-window]
    if not older:
        return previous
    return classify_trend(percent_difference(_mean(older), _mean(recent)), threshold)


def calc_trip_miles(
    odometer: int, previous_odometer: Optional[int]
) -> Optional[int]:
    """Miles since the previous reading; None for a vehicle's first log."""
    if previous_odometer is None:
        return None
    return odometer - previous_odometer


def calc_mpg(trip_miles: Optional[float], gallons: Optional[float]) -> Optional[float]:
    """Trip miles per gallon, or None when either side is unavailable."""
    if trip_miles is None or gallons is None or gallons <= 0:
        return None
    return trip_miles / gallons


def calc_average_mpg(logs: Iterable) -> Optional[float]:
    """
    Total trip miles over total gallons across fill-ups.

    Only logs with both trip miles and gallons count, so the miles of an
    odometer-only reading are not charged to the next fill-up.
    """
    fills = [
        log
        for log in logs
        if log.trip_miles is not None and log.gallons_added and log.gallons_added > 0
    ]
    if not fills:
        return None
    total_miles = sum(log.trip_miles for log in fills)
    total_gallons = sum(log.gallons_added for log in fills)
    return total_miles / total_gallons
