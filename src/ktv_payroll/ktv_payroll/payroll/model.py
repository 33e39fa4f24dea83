from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..employees.model import Employee

ZERO = Decimal("0")


@dataclass(frozen=True)
class SalaryBreakdown:
    """Per-day result of the salary calculator. total_salary = base_salary + commission."""

    base_salary: Decimal
    commission: Decimal
    total_salary: Decimal
    broker_commission: Decimal
    owner_profit: Decimal

    @classmethod
    def zero(cls) -> "SalaryBreakdown":
        return cls(ZERO, ZERO, ZERO, ZERO, ZERO)


@dataclass(frozen=True)
class DailyRecord:
    """One calendar day inside a settlement window."""

    work_date: date
    is_working: bool
    base_salary: Decimal
    has_clients: bool


@dataclass(frozen=True)
class Settlement:
    """Unpaid balance of one employee since the last payout checkpoint."""

    employee: Employee
    last_payout_date: Optional[date]
    unpaid_days: int
    unpaid_base_salary: Decimal
    next_payment_date: date
    daily_records: tuple[DailyRecord, ...]


@dataclass(frozen=True)
class IncomeTotals:
    total_salary: Decimal = ZERO
    broker_commission: Decimal = ZERO
    owner_profit: Decimal = ZERO
    total_clients: int = 0
    working_days: int = 0
    record_count: int = 0
    total_revenue: Decimal = ZERO
