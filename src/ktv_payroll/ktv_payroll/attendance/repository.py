from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..payroll.model import SalaryBreakdown
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_range(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records within [start_date, end_date] (either bound optional), newest first."""

        raise NotImplementedError

    def upsert(
        self,
        *,
        employee_id: int,
        work_date: date,
        is_working: bool,
        client_count: int,
        breakdown: SalaryBreakdown,
        user_id: Optional[int] = None,
    ) -> AttendanceRecord:
        """Insert or overwrite the (employee_id, work_date) row."""

        raise NotImplementedError

    def delete(self, *, attendance_id: int) -> bool:
        raise NotImplementedError
