from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import pytest

from src.ktv_payroll.ktv_payroll.attendance.model import AttendanceRecord
from src.ktv_payroll.ktv_payroll.employees.model import Employee
from src.ktv_payroll.ktv_payroll.payroll.model import SalaryBreakdown
from src.ktv_payroll.ktv_payroll.rules.model import RuleTemplate
from src.ktv_payroll.ktv_payroll.rules.resolver import RuleSetResolver


class InMemorySettings:
    def __init__(self, defaults: Optional[dict] = None):
        self.rows: dict[tuple[str, Optional[int]], Decimal] = {}
        for key, value in (defaults or {}).items():
            self.rows[(key, None)] = Decimal(str(value))

    def get_default_values(self):
        return {k: v for (k, uid), v in self.rows.items() if uid is None}

    def get_user_values(self, user_id: int):
        return {k: v for (k, uid), v in self.rows.items() if uid == user_id}

    def upsert_value(self, *, key, value, user_id=None):
        self.rows[(key, user_id)] = value


class InMemoryTemplates:
    def __init__(self):
        self.templates: dict[int, RuleTemplate] = {}
        self._id = 0

    def add(self, name: str, *, user_id=None, is_global=False, **values) -> RuleTemplate:
        defaults = dict(
            base_salary_with_client=400,
            base_salary_no_client=150,
            first_client_bonus=250,
            additional_client_bonus=320,
            broker_first_client=60,
            broker_additional_client=80,
        )
        defaults.update(values)
        template_id = self.create(name=name, values=defaults, user_id=user_id, is_global=is_global)
        return self.templates[template_id]

    def get_by_id(self, template_id):
        return self.templates.get(int(template_id))

    def list_visible(self, *, user_id=None):
        items = [t for t in self.templates.values() if t.is_global or (user_id is not None and t.user_id == user_id)]
        items.sort(key=lambda t: (not t.is_global, -t.template_id))
        return items

    def create(self, *, name, values, description=None, user_id=None, is_global=False):
        self._id += 1
        self.templates[self._id] = RuleTemplate(
            template_id=self._id,
            name=name,
            description=description,
            user_id=user_id,
            is_global=is_global,
            created_at=datetime(2024, 1, 1, 9, 0),
            **values,
        )
        return self._id

    def update(self, *, template_id, name=None, description=None, values=None):
        current = self.templates.get(int(template_id))
        if not current:
            return False
        merged = current.salary_values()
        merged.update(values or {})
        self.templates[int(template_id)] = RuleTemplate(
            template_id=current.template_id,
            name=name if name is not None else current.name,
            description=description if description is not None else current.description,
            user_id=current.user_id,
            is_global=current.is_global,
            created_at=current.created_at,
            **merged,
        )
        return True

    def delete(self, *, template_id):
        return self.templates.pop(int(template_id), None) is not None


class InMemoryEmployees:
    def __init__(self):
        self.employees: dict[int, Employee] = {}
        self._id = 0

    def add(self, name: str, *, created: date = date(2024, 1, 1), template_id=None, last_payout_date=None) -> Employee:
        self._id += 1
        self.employees[self._id] = Employee(
            employee_id=self._id,
            name=name,
            created_at=datetime.combine(created, datetime.min.time()),
            template_id=template_id,
            last_payout_date=last_payout_date,
        )
        return self.employees[self._id]

    def _replace(self, employee_id, **changes) -> bool:
        current = self.employees.get(int(employee_id))
        if not current:
            return False
        self.employees[int(employee_id)] = replace(current, **changes)
        return True

    def get_by_id(self, employee_id):
        return self.employees.get(int(employee_id))

    def list_all(self):
        return sorted(self.employees.values(), key=lambda e: (e.name, e.employee_id))

    def create(self, *, name, template_id=None):
        return self.add(name, template_id=template_id).employee_id

    def rename(self, *, employee_id, name):
        return self._replace(employee_id, name=name)

    def set_template(self, *, employee_id, template_id):
        return self._replace(employee_id, template_id=template_id)

    def set_last_payout_date(self, *, employee_id, payout_date):
        return self._replace(employee_id, last_payout_date=payout_date)

    def delete(self, *, employee_id):
        return self.employees.pop(int(employee_id), None) is not None


class InMemoryAttendance:
    def __init__(self):
        self.rows: dict[tuple[int, date], AttendanceRecord] = {}
        self._id = 0
        self.range_calls: list[dict] = []

    def get_by_date(self, work_date):
        return sorted((r for r in self.rows.values() if r.work_date == work_date), key=lambda r: r.employee_id)

    def get_range(self, *, start_date=None, end_date=None, employee_id=None):
        self.range_calls.append({"start_date": start_date, "end_date": end_date, "employee_id": employee_id})
        items = [
            r
            for r in self.rows.values()
            if (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
            and (employee_id is None or r.employee_id == employee_id)
        ]
        items.sort(key=lambda r: (r.work_date, -r.employee_id), reverse=True)
        return items

    def upsert(self, *, employee_id, work_date, is_working, client_count, breakdown: SalaryBreakdown, user_id=None):
        existing = self.rows.get((employee_id, work_date))
        if existing:
            attendance_id = existing.attendance_id
        else:
            self._id += 1
            attendance_id = self._id
        record = AttendanceRecord(
            attendance_id=attendance_id,
            employee_id=employee_id,
            work_date=work_date,
            is_working=is_working,
            client_count=client_count,
            base_salary=breakdown.base_salary,
            commission=breakdown.commission,
            total_salary=breakdown.total_salary,
            broker_commission=breakdown.broker_commission,
            owner_profit=breakdown.owner_profit,
        )
        self.rows[(employee_id, work_date)] = record
        return record

    def delete(self, *, attendance_id):
        for key, record in list(self.rows.items()):
            if record.attendance_id == int(attendance_id):
                del self.rows[key]
                return True
        return False


@pytest.fixture
def settings_repo():
    return InMemorySettings()


@pytest.fixture
def templates_repo():
    return InMemoryTemplates()


@pytest.fixture
def employees_repo():
    return InMemoryEmployees()


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def resolver(settings_repo, templates_repo):
    return RuleSetResolver(settings_repo, templates_repo)
