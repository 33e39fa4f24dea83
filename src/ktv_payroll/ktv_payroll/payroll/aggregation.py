from __future__ import annotations

from decimal import Decimal
from typing import Callable, Iterable, Mapping, Optional

from ..attendance.model import AttendanceRecord
from ..common.numbers import to_decimal, to_int
from ..core.constants import GLOBAL_RULES_LABEL
from ..employees.model import Employee
from ..rules.model import RuleTemplate
from .model import ZERO, IncomeTotals

GroupKey = Callable[[AttendanceRecord], str]


class _Accumulator:
    __slots__ = ("total_salary", "broker_commission", "owner_profit", "total_clients", "working_days", "record_count")

    def __init__(self) -> None:
        self.total_salary = ZERO
        self.broker_commission = ZERO
        self.owner_profit = ZERO
        self.total_clients = 0
        self.working_days = 0
        self.record_count = 0

    def add(self, record: AttendanceRecord) -> None:
        # Stored values go through the lenient parse: junk counts as 0.
        self.total_salary += to_decimal(getattr(record, "total_salary", None))
        self.broker_commission += to_decimal(getattr(record, "broker_commission", None))
        self.owner_profit += to_decimal(getattr(record, "owner_profit", None))
        self.total_clients += to_int(getattr(record, "client_count", None))
        self.working_days += 1 if getattr(record, "is_working", False) else 0
        self.record_count += 1

    def freeze(self, client_payment: Optional[Decimal]) -> IncomeTotals:
        revenue = self.total_clients * client_payment if client_payment is not None else ZERO
        return IncomeTotals(
            total_salary=self.total_salary,
            broker_commission=self.broker_commission,
            owner_profit=self.owner_profit,
            total_clients=self.total_clients,
            working_days=self.working_days,
            record_count=self.record_count,
            total_revenue=revenue,
        )


def summarize(records: Iterable[AttendanceRecord], *, client_payment: Optional[Decimal] = None) -> IncomeTotals:
    """Ungrouped totals. Revenue is only filled in when client_payment is given."""
    acc = _Accumulator()
    for record in records:
        acc.add(record)
    return acc.freeze(client_payment)


def group_totals(
    records: Iterable[AttendanceRecord],
    key: GroupKey,
    *,
    client_payment: Optional[Decimal] = None,
) -> dict[str, IncomeTotals]:
    """Totals per group key, in first-seen key order."""
    groups: dict[str, _Accumulator] = {}
    for record in records:
        label = key(record)
        acc = groups.get(label)
        if acc is None:
            acc = groups[label] = _Accumulator()
        acc.add(record)
    return {label: acc.freeze(client_payment) for label, acc in groups.items()}


def by_date(record: AttendanceRecord) -> str:
    return record.work_date.strftime("%Y-%m-%d")


def by_employee(employees: Iterable[Employee]) -> GroupKey:
    names = {e.employee_id: e.name for e in employees}

    def key(record: AttendanceRecord) -> str:
        return names.get(record.employee_id, f"#{record.employee_id}")

    return key


def by_template(
    employees: Iterable[Employee],
    templates: Iterable[RuleTemplate],
    *,
    fallback: str = GLOBAL_RULES_LABEL,
) -> GroupKey:
    """Group by the name of the employee's template, else the global label."""
    template_names: Mapping[int, str] = {t.template_id: t.name for t in templates}
    employee_templates = {e.employee_id: e.template_id for e in employees}

    def key(record: AttendanceRecord) -> str:
        template_id = employee_templates.get(record.employee_id)
        if template_id is None:
            return fallback
        return template_names.get(template_id, fallback)

    return key
