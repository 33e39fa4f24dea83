from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import first_day_of_month, today_local
from ..core.enums import Role
from ..employees.repository import EmployeeRepository
from ..rules.repository import RuleTemplateRepository
from ..rules.resolver import RuleSetResolver
from .aggregation import by_date, by_employee, by_template, group_totals, summarize
from .model import IncomeTotals


@dataclass(frozen=True)
class IncomeReport:
    start: Optional[date]
    end: Optional[date]
    totals: IncomeTotals


@dataclass(frozen=True)
class UserIncome:
    """All-time income view; owner_profit is None for non-admins."""

    broker_commission: Decimal
    total_salary: Decimal
    owner_profit: Optional[Decimal] = None


class PayrollReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        templates: RuleTemplateRepository,
        resolver: RuleSetResolver,
    ):
        self._attendance = attendance
        self._employees = employees
        self._templates = templates
        self._resolver = resolver

    def _client_payment(self, user_id: Optional[int]) -> Decimal:
        return self._resolver.global_rules(user_id).client_payment

    def income_stats(self, *, start: date, end: date, user_id: Optional[int] = None) -> IncomeReport:
        records = self._attendance.get_range(start_date=start, end_date=end)
        totals = summarize(records, client_payment=self._client_payment(user_id))
        return IncomeReport(start=start, end=end, totals=totals)

    def today_stats(self, *, today: Optional[date] = None, user_id: Optional[int] = None) -> IncomeReport:
        today = today or today_local()
        return self.income_stats(start=today, end=today, user_id=user_id)

    def month_stats(self, *, today: Optional[date] = None, user_id: Optional[int] = None) -> IncomeReport:
        today = today or today_local()
        return self.income_stats(start=first_day_of_month(today), end=today, user_id=user_id)

    def stats_by_template(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        user_id: Optional[int] = None,
    ) -> dict[str, IncomeTotals]:
        records = self._attendance.get_range(start_date=start, end_date=end)
        employees = self._employees.list_all()
        template_ids = sorted({e.template_id for e in employees if e.template_id is not None})
        templates = [t for t in (self._templates.get_by_id(tid) for tid in template_ids) if t]
        key = by_template(employees, templates)
        return group_totals(records, key, client_payment=self._client_payment(user_id))

    def stats_by_employee(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        user_id: Optional[int] = None,
    ) -> dict[str, IncomeTotals]:
        records = self._attendance.get_range(start_date=start, end_date=end)
        key = by_employee(self._employees.list_all())
        return group_totals(records, key, client_payment=self._client_payment(user_id))

    def stats_by_date(self, *, start: date, end: date, user_id: Optional[int] = None) -> dict[str, IncomeTotals]:
        records = self._attendance.get_range(start_date=start, end_date=end)
        return group_totals(records, by_date, client_payment=self._client_payment(user_id))

    def my_income(self, *, current_role: Role) -> UserIncome:
        totals = summarize(self._attendance.get_range())
        return UserIncome(
            broker_commission=totals.broker_commission,
            total_salary=totals.total_salary,
            owner_profit=totals.owner_profit if current_role == Role.ADMIN else None,
        )
