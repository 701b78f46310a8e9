"""Expense class for non-fuel vehicle costs."""
from typing import Optional


class Expense:
    """A logged expense (tolls, repairs, insurance, ...)."""

    def __init__(
            self,
            id: str,
            vehicle_id: str,
            category: str,
            amount: float,
            expense_date: str,
            notes: Optional[str] = None,
            created_at: Optional[str] = None,
    ):
        self.id = id
        self.vehicle_id = vehicle_id
        self.category = category
        self.amount = amount
        self.expense_date = expense_date
        self.notes = notes
        self.created_at = created_at
