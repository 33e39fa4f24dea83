from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import today_local
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..rules.resolver import RuleSetResolver
from .model import Settlement
from .settlement import SettlementAccumulator, window_start

logger = logging.getLogger(__name__)


class SettlementService:
    """Use case: unpaid balances and payout checkpoints.

    Rule sets are not versioned, so the employee's current rule set is applied
    to every day of the window. A rule change mid-window re-prices the
    earlier unpaid days too.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        resolver: RuleSetResolver,
        *,
        accumulator: Optional[SettlementAccumulator] = None,
    ):
        self._employees = employees
        self._attendance = attendance
        self._resolver = resolver
        self._accumulator = accumulator or SettlementAccumulator()

    def get_settlement(
        self,
        employee_id: int,
        *,
        today: Optional[date] = None,
        user_id: Optional[int] = None,
    ) -> Settlement:
        return self._settle(self._get_employee(employee_id), today or today_local(), user_id)

    def list_settlements(self, *, today: Optional[date] = None, user_id: Optional[int] = None) -> Sequence[Settlement]:
        """All employees, largest unpaid base salary first."""
        today = today or today_local()
        settlements = [self._settle(e, today, user_id) for e in self._employees.list_all()]
        settlements.sort(key=lambda s: s.unpaid_base_salary, reverse=True)
        return settlements

    def mark_paid(self, employee_id: int, *, payout_date: Optional[date] = None, today: Optional[date] = None) -> Employee:
        """Move the checkpoint: the next window starts the day after payout_date."""
        today = today or today_local()
        payout_date = payout_date or today
        if payout_date > today:
            raise ValidationError("Payout date cannot be in the future")

        employee = self._get_employee(employee_id)
        self._employees.set_last_payout_date(employee_id=employee.employee_id, payout_date=payout_date)
        logger.info(
            "[ktv-payroll] payout checkpoint employee_id=%s %s -> %s",
            employee.employee_id,
            employee.last_payout_date,
            payout_date,
        )
        return self._get_employee(employee_id)

    def _get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError(f"Employee {employee_id} does not exist")
        return employee

    def _settle(self, employee: Employee, today: date, user_id: Optional[int]) -> Settlement:
        rules = self._resolver.resolve(employee, user_id=user_id)

        start = window_start(employee)
        rows = []
        if start is not None and start <= today:
            rows = self._attendance.get_range(start_date=start, end_date=today, employee_id=employee.employee_id)
        by_date = {r.work_date: r for r in rows}

        return self._accumulator.compute(employee, by_date.get, lambda _day: rules, today)
