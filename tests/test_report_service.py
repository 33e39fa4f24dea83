from datetime import date
from decimal import Decimal

import pytest

from src.ktv_payroll.ktv_payroll.attendance.service import AttendanceService
from src.ktv_payroll.ktv_payroll.core.constants import GLOBAL_RULES_LABEL
from src.ktv_payroll.ktv_payroll.core.enums import Role
from src.ktv_payroll.ktv_payroll.payroll.service import PayrollReportService


@pytest.fixture
def attendance(attendance_repo, employees_repo, resolver):
    return AttendanceService(attendance_repo, employees_repo, resolver)


@pytest.fixture
def service(attendance_repo, employees_repo, templates_repo, resolver):
    return PayrollReportService(attendance_repo, employees_repo, templates_repo, resolver)


@pytest.fixture
def staffed(attendance, employees_repo, templates_repo):
    senior = templates_repo.add("Senior")
    lily = employees_repo.add("Lily")
    mia = employees_repo.add("Mia", template_id=senior.template_id)
    attendance.record(employee_id=lily.employee_id, work_date=date(2024, 3, 1), is_working=True, client_count=1)
    attendance.record(employee_id=mia.employee_id, work_date=date(2024, 3, 1), is_working=True, client_count=2)
    attendance.record(employee_id=lily.employee_id, work_date=date(2024, 3, 2), is_working=True, client_count=0)
    return lily, mia


def test_income_stats_over_range(service, staffed):
    report = service.income_stats(start=date(2024, 3, 1), end=date(2024, 3, 2))
    totals = report.totals

    # Lily 550 + 100, Mia 400 + 250 + 320
    assert totals.total_salary == Decimal("1620")
    assert totals.broker_commission == Decimal("190")
    assert totals.total_clients == 3
    assert totals.working_days == 3
    assert totals.record_count == 3
    assert totals.total_revenue == Decimal("2700")


def test_revenue_follows_current_client_payment(service, staffed, settings_repo):
    settings_repo.upsert_value(key="client_payment", value=Decimal("1000"))

    totals = service.income_stats(start=date(2024, 3, 1), end=date(2024, 3, 1)).totals

    assert totals.total_revenue == Decimal("3000")


def test_today_and_month_stats(service, staffed):
    assert service.today_stats(today=date(2024, 3, 2)).totals.record_count == 1

    month = service.month_stats(today=date(2024, 3, 31))
    assert month.start == date(2024, 3, 1)
    assert month.totals.record_count == 3


def test_stats_by_template(service, staffed, templates_repo):
    groups = service.stats_by_template()

    assert set(groups) == {GLOBAL_RULES_LABEL, "Senior"}
    assert groups["Senior"].total_salary == Decimal("970")
    assert groups[GLOBAL_RULES_LABEL].record_count == 2


def test_stats_by_template_with_deleted_template(service, staffed, templates_repo):
    _, mia = staffed
    templates_repo.delete(template_id=mia.template_id)

    groups = service.stats_by_template()

    assert list(groups) == [GLOBAL_RULES_LABEL]
    assert groups[GLOBAL_RULES_LABEL].record_count == 3


def test_stats_by_employee_and_date(service, staffed):
    by_employee = service.stats_by_employee()
    assert by_employee["Lily"].working_days == 2
    assert by_employee["Mia"].total_clients == 2

    by_day = service.stats_by_date(start=date(2024, 3, 1), end=date(2024, 3, 2))
    assert list(by_day) == ["2024-03-02", "2024-03-01"]
    assert by_day["2024-03-01"].record_count == 2


def test_my_income_hides_owner_profit_from_staff(service, staffed):
    admin = service.my_income(current_role=Role.ADMIN)
    staff = service.my_income(current_role=Role.STAFF)

    assert admin.owner_profit is not None
    assert staff.owner_profit is None
    assert staff.total_salary == admin.total_salary == Decimal("1620")
