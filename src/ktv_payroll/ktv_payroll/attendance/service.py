from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.validators import require_client_count
from ..core.exceptions import NotFoundError
from ..employees.repository import EmployeeRepository
from ..payroll.calculator.base import SalaryCalculator
from ..payroll.calculator.standard_calculator import StandardSalaryCalculator
from ..rules.resolver import RuleSetResolver
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use case: record a day's attendance with its salary breakdown."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        resolver: RuleSetResolver,
        *,
        calculator: Optional[SalaryCalculator] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._resolver = resolver
        self._calculator = calculator or StandardSalaryCalculator()

    def record(
        self,
        *,
        employee_id: int,
        work_date: date,
        is_working: bool,
        client_count: int,
        user_id: Optional[int] = None,
    ) -> AttendanceRecord:
        client_count = require_client_count(client_count)
        if not is_working:
            client_count = 0

        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError(f"Employee {employee_id} does not exist")

        rules = self._resolver.resolve(employee, user_id=user_id)
        breakdown = self._calculator.compute(client_count, bool(is_working), rules)

        record = self._attendance.upsert(
            employee_id=employee.employee_id,
            work_date=work_date,
            is_working=bool(is_working),
            client_count=client_count,
            breakdown=breakdown,
            user_id=user_id,
        )
        logger.info(
            "[ktv-payroll] attendance saved employee_id=%s date=%s working=%s clients=%s total=%s",
            employee.employee_id,
            work_date,
            bool(is_working),
            client_count,
            breakdown.total_salary,
        )
        return record

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        return self._attendance.get_by_date(work_date)

    def list_range(self, *, start: date, end: date, employee_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        return self._attendance.get_range(start_date=start, end_date=end, employee_id=employee_id)

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        return self._attendance.get_range(start_date=start, end_date=end, employee_id=int(employee_id))

    def delete(self, attendance_id: int) -> None:
        if not self._attendance.delete(attendance_id=int(attendance_id)):
            raise NotFoundError(f"Attendance record {attendance_id} does not exist")
        logger.info("[ktv-payroll] attendance deleted attendance_id=%s", attendance_id)
