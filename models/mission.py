"""Mission class for delivery jobs."""

from typing import Optional

from .status import MissionStatus


class Mission:
    """A delivery job run with one vehicle."""

    def __init__(
        self,
        id: str,
        vehicle_id: str,
        origin: str,
        destination: str,
        offer_amount: float,
        status: MissionStatus = MissionStatus.ACTIVE,
        estimated_miles: Optional[float] = None,
        actual_miles: Optional[float] = None,
        pod_required: bool = False,
        proof_image_url: Optional[str] = None,
        is_paid: bool = False,
        created_at: Optional[str] = None,
        completed_at: Optional[str] = None,
    ):
        self.id = id
        self.vehicle_id = vehicle_id
        self.origin = origin
        self.destination = destination
        self.offer_amount = offer_amount or 0
        self.status = status
        self.estimated_miles = estimated_miles
        self.actual_miles = actual_miles
        self.pod_required = pod_required or False
        self.proof_image_url = proof_image_url
        self.is_paid = is_paid or False
        self.created_at = created_at
        self.completed_at = completed_at

    @property
    def route(self) -> str:
        return f"{self.origin} -> {self.destination}"

    @property
    def is_finished(self) -> bool:
        """Completed or archived; these count toward mileage and earnings."""
        return self.status in (MissionStatus.COMPLETED, MissionStatus.HISTORY)
