from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee on one calendar date.

    The salary breakdown is computed at write time and stored with the row.
    """

    attendance_id: int
    employee_id: int
    work_date: date
    is_working: bool
    client_count: int
    base_salary: Decimal
    commission: Decimal
    total_salary: Decimal
    broker_commission: Decimal
    owner_profit: Decimal
