from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .payroll.service import PayrollReportService
from .payroll.settlement_service import SettlementService
from .rules.mysql_rule_repository import MySQLRuleTemplateRepository, MySQLSettingsRepository
from .rules.resolver import RuleSetResolver
from .rules.service import SettingsService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    attendance_repo: MySQLAttendanceRepository
    settings_repo: MySQLSettingsRepository
    templates_repo: MySQLRuleTemplateRepository

    resolver: RuleSetResolver
    employee_service: EmployeeService
    attendance_service: AttendanceService
    settings_service: SettingsService
    settlement_service: SettlementService
    payroll_report_service: PayrollReportService


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    settings_repo = MySQLSettingsRepository(conn)
    templates_repo = MySQLRuleTemplateRepository(conn)

    resolver = RuleSetResolver(settings_repo, templates_repo)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        settings_repo=settings_repo,
        templates_repo=templates_repo,
        resolver=resolver,
        employee_service=EmployeeService(employees_repo, templates_repo),
        attendance_service=AttendanceService(attendance_repo, employees_repo, resolver),
        settings_service=SettingsService(settings_repo, templates_repo, resolver),
        settlement_service=SettlementService(employees_repo, attendance_repo, resolver),
        payroll_report_service=PayrollReportService(attendance_repo, employees_repo, templates_repo, resolver),
    )
