"""FuelLogEntry class for fill-ups and odometer-only readings."""

from datetime import datetime
from typing import Optional

from .calculations import parse_timestamp


class FuelLogEntry:
    """A fuel purchase (or odometer-only reading) for a vehicle.

    trip_miles and mpg are derived when the entry is written and stored
    with it; both are None for the first log of a vehicle, and mpg is None
    when no gallons were recorded.
    """

    def __init__(
        self,
        id: str,
        vehicle_id: str,
        created_at: str,
        odometer_reading: int,
        gallons_added: Optional[float] = None,
        total_cost: Optional[float] = None,
        trip_miles: Optional[int] = None,
        mpg: Optional[float] = None,
        merchant: Optional[str] = None,
        notes: Optional[str] = None,
    ):
        self.id = id
        self.vehicle_id = vehicle_id
        self.created_at = created_at
        self.odometer_reading = odometer_reading
        self.gallons_added = gallons_added
        self.total_cost = total_cost
        self.trip_miles = trip_miles
        self.mpg = mpg
        self.merchant = merchant
        self.notes = notes

    @property
    def timestamp(self) -> datetime:
        """created_at as a timezone-aware datetime."""
        return parse_timestamp(self.created_at)

    @property
    def is_odometer_only(self) -> bool:
        return self.gallons_added is None and self.total_cost is None


def validate_fuel_input(
    odometer: Optional[float],
    gallons: Optional[float],
    cost: Optional[float],
    odometer_only: bool = False,
) -> Optional[str]:
    """Check fuel log form input. Returns an error message, or None if valid."""
    if not odometer:
        return "Please enter an odometer reading"
    if odometer <= 0:
        return "Odometer reading must be greater than zero"
    if odometer_only:
        return None
    if gallons is None or cost is None:
        return 'Please fill in gallons and cost, or use "odometer only"'
    if gallons <= 0 or cost <= 0:
        return "Gallons and cost must be greater than zero"
    return None
