from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal

from src.ktv_payroll.ktv_payroll.attendance.model import AttendanceRecord
from src.ktv_payroll.ktv_payroll.core.constants import GLOBAL_RULES_LABEL
from src.ktv_payroll.ktv_payroll.employees.model import Employee
from src.ktv_payroll.ktv_payroll.payroll.aggregation import by_date, by_employee, by_template, group_totals, summarize
from src.ktv_payroll.ktv_payroll.payroll.calculator.standard_calculator import compute_breakdown
from src.ktv_payroll.ktv_payroll.rules.model import RuleSet, RuleTemplate

RULES = RuleSet.default()


def _record(employee_id, day, *, working=True, clients=0):
    b = compute_breakdown(clients, working, RULES)
    return AttendanceRecord(
        attendance_id=employee_id * 1000 + day.day,
        employee_id=employee_id,
        work_date=day,
        is_working=working,
        client_count=clients,
        base_salary=b.base_salary,
        commission=b.commission,
        total_salary=b.total_salary,
        broker_commission=b.broker_commission,
        owner_profit=b.owner_profit,
    )


EMPLOYEES = [
    Employee(employee_id=1, name="Lily", created_at=datetime(2024, 1, 1), template_id=7),
    Employee(employee_id=2, name="Coco", created_at=datetime(2024, 1, 1)),
    Employee(employee_id=3, name="Mia", created_at=datetime(2024, 1, 1), template_id=99),
]
TEMPLATES = [
    RuleTemplate(
        template_id=7,
        name="Senior",
        base_salary_with_client=400,
        base_salary_no_client=150,
        first_client_bonus=250,
        additional_client_bonus=320,
        broker_first_client=60,
        broker_additional_client=80,
    )
]


def test_summarize_sums_every_field():
    records = [
        _record(1, date(2024, 1, 1), clients=1),
        _record(2, date(2024, 1, 1), clients=2),
        _record(2, date(2024, 1, 2), working=False),
    ]

    totals = summarize(records, client_payment=Decimal("900"))

    assert totals.total_salary == 550 + 850
    assert totals.broker_commission == 50 + 150
    assert totals.owner_profit == 180 + 560
    assert totals.total_clients == 3
    assert totals.working_days == 2
    assert totals.record_count == 3
    assert totals.total_revenue == 2700


def test_revenue_is_zero_without_client_payment():
    assert summarize([_record(1, date(2024, 1, 1), clients=2)]).total_revenue == 0


def test_non_numeric_stored_values_count_as_zero():
    good = _record(1, date(2024, 1, 1), clients=1)
    broken = replace(good, total_salary="abc", owner_profit=None, broker_commission="")

    totals = summarize([good, broken])

    assert totals.total_salary == 550
    assert totals.owner_profit == 180
    assert totals.broker_commission == 50


def test_group_order_follows_first_seen_key():
    records = [
        _record(2, date(2024, 1, 3)),
        _record(1, date(2024, 1, 1)),
        _record(2, date(2024, 1, 1)),
    ]

    groups = group_totals(records, by_employee(EMPLOYEES))

    assert list(groups) == ["Coco", "Lily"]
    assert groups["Coco"].working_days == 2


def test_group_by_date():
    records = [_record(1, date(2024, 1, 2)), _record(2, date(2024, 1, 1)), _record(1, date(2024, 1, 1))]

    groups = group_totals(records, by_date)

    assert list(groups) == ["2024-01-02", "2024-01-01"]
    assert groups["2024-01-01"].record_count == 2


def test_group_by_template_falls_back_to_global_label():
    records = [
        _record(1, date(2024, 1, 1), clients=1),
        _record(2, date(2024, 1, 1), clients=1),
        _record(3, date(2024, 1, 1), clients=1),
    ]

    groups = group_totals(records, by_template(EMPLOYEES, TEMPLATES))

    assert list(groups) == ["Senior", GLOBAL_RULES_LABEL]
    assert groups["Senior"].record_count == 1
    assert groups[GLOBAL_RULES_LABEL].record_count == 2
