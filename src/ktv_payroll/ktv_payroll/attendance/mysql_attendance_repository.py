from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..common.numbers import to_decimal, to_int
from ..database.connection import DatabaseConnection
from ..database.mysql_base import affected, db_cursor, fetchall, fetchone
from ..payroll.model import SalaryBreakdown
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = (
    "attendance_id, employee_id, work_date, is_working, client_count, "
    "base_salary, commission, total_salary, broker_commission, owner_profit"
)


def _to_record(r: dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        is_working=bool(r["is_working"]),
        client_count=to_int(r.get("client_count")),
        base_salary=to_decimal(r.get("base_salary")),
        commission=to_decimal(r.get("commission")),
        total_salary=to_decimal(r.get("total_salary")),
        broker_commission=to_decimal(r.get("broker_commission")),
        owner_profit=to_decimal(r.get("owner_profit")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE work_date=%s
                ORDER BY employee_id ASC
                """,
                (work_date,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_range(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["1=1"]
        params: list[object] = []

        if start_date is not None:
            clauses.append("work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date <= %s")
            params.append(end_date)
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE {where}
                ORDER BY work_date DESC, employee_id ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(
                    employee_id, work_date, is_working, client_count,
                    base_salary, commission, total_salary, broker_commission, owner_profit,
                    created_by_user_id, updated_by_user_id
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    is_working=VALUES(is_working),
                    client_count=VALUES(client_count),
                    base_salary=VALUES(base_salary),
                    commission=VALUES(commission),
                    total_salary=VALUES(total_salary),
                    broker_commission=VALUES(broker_commission),
                    owner_profit=VALUES(owner_profit),
                    updated_by_user_id=VALUES(updated_by_user_id)
                """,
                (
                    int(employee_id),
                    work_date,
                    int(bool(is_working)),
                    int(client_count),
                    breakdown.base_salary,
                    breakdown.commission,
                    breakdown.total_salary,
                    breakdown.broker_commission,
                    breakdown.owner_profit,
                    user_id,
                    user_id,
                ),
            )
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            return _to_record(fetchone(cur))

    def delete(self, *, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE attendance_id=%s", (int(attendance_id),))
            return affected(cur)
