"""Vehicle class for fleet vehicles and their oil-change state."""

from typing import Optional


class Vehicle:
    """A fleet vehicle with odometer and oil-change tracking."""

    def __init__(
        self,
        id: str,
        name: str,
        year: Optional[int],
        make: Optional[str],
        model: Optional[str],
        current_odometer: int,
        oil_change_interval: int,
        last_oil_change_odometer: int,
        vehicle_type: Optional[str] = None,
        created_at: Optional[str] = None,
    ):
        self.id = id
        self.name = name
        self.year = year
        self.make = make
        self.model = model
        self.vehicle_type = vehicle_type
        self.current_odometer = current_odometer or 0
        self.oil_change_interval = oil_change_interval or 0
        self.last_oil_change_odometer = last_oil_change_odometer or 0
        self.created_at = created_at

    @property
    def display_name(self) -> str:
        """Human-readable vehicle name, e.g. '2019 Freightliner Cascadia'."""
        parts = [str(p) for p in (self.year, self.make, self.model) if p]
        return " ".join(parts) if parts else self.name
