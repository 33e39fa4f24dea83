from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, Iterator, Optional

from ..attendance.model import AttendanceRecord
from ..employees.model import Employee
from ..rules.model import RuleSet
from .calculator.base import SalaryCalculator
from .calculator.standard_calculator import StandardSalaryCalculator
from .model import ZERO, DailyRecord, Settlement

AttendanceLookup = Callable[[date], Optional[AttendanceRecord]]
RulesForDate = Callable[[date], RuleSet]


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Every calendar date from start to end inclusive; nothing when start > end."""
    for offset in range((end - start).days + 1):
        yield start + timedelta(days=offset)


def window_start(employee: Employee) -> Optional[date]:
    """First unpaid day: the day after the checkpoint, or the creation date.

    None when the checkpoint is the last representable date, so nothing can be owed.
    """
    if employee.last_payout_date is not None:
        if employee.last_payout_date >= date.max:
            return None
        return employee.last_payout_date + timedelta(days=1)
    return employee.created_date


class SettlementAccumulator:
    """Running unpaid base salary of one employee since the payout checkpoint.

    Every day of the window yields a DailyRecord. A day without an attendance
    row counts as not working with zero base salary. The checkpoint itself is
    never changed here.
    """

    def __init__(self, calculator: Optional[SalaryCalculator] = None):
        self._calculator = calculator or StandardSalaryCalculator()

    def daily_records(
        self,
        employee: Employee,
        attendance_lookup: AttendanceLookup,
        rules_for_date: RulesForDate,
        today: date,
    ) -> Iterator[DailyRecord]:
        start = window_start(employee)
        if start is None:
            return
        for day in iter_dates(start, today):
            record = attendance_lookup(day)
            if record is None:
                yield DailyRecord(work_date=day, is_working=False, base_salary=ZERO, has_clients=False)
                continue

            breakdown = self._calculator.compute(record.client_count, record.is_working, rules_for_date(day))
            yield DailyRecord(
                work_date=day,
                is_working=bool(record.is_working),
                base_salary=breakdown.base_salary,
                has_clients=bool(record.is_working) and record.client_count > 0,
            )

    def compute(
        self,
        employee: Employee,
        attendance_lookup: AttendanceLookup,
        rules_for_date: RulesForDate,
        today: date,
    ) -> Settlement:
        records = tuple(self.daily_records(employee, attendance_lookup, rules_for_date, today))

        return Settlement(
            employee=employee,
            last_payout_date=employee.last_payout_date,
            unpaid_days=sum(1 for r in records if r.is_working),
            unpaid_base_salary=sum((r.base_salary for r in records), ZERO),
            next_payment_date=today,
            daily_records=records,
        )


def compute_settlement(
    employee: Employee,
    attendance_lookup: AttendanceLookup,
    rules_for_date: RulesForDate,
    today: date,
) -> Settlement:
    return SettlementAccumulator().compute(employee, attendance_lookup, rules_for_date, today)
