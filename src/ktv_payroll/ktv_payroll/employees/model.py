from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee whose attendance is tracked.

    `last_payout_date` is the payout checkpoint: None means never paid, so
    settlement accumulates from the creation date.
    """

    employee_id: int
    name: str
    created_at: datetime
    template_id: Optional[int] = None
    last_payout_date: Optional[date] = None

    @property
    def created_date(self) -> date:
        if isinstance(self.created_at, datetime):
            return self.created_at.date()
        return self.created_at
