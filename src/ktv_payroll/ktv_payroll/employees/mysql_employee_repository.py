from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import affected, db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = "employee_id, name, created_at, template_id, last_payout_date"


def _to_employee(r: dict[str, Any]) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        name=r["name"],
        created_at=r["created_at"],
        template_id=int(r["template_id"]) if r.get("template_id") is not None else None,
        last_payout_date=r.get("last_payout_date"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees ORDER BY name ASC, employee_id ASC")
            return [_to_employee(r) for r in fetchall(cur)]

    def create(self, *, name: str, template_id: Optional[int] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO employees(name, template_id) VALUES(%s,%s)",
                (name, template_id),
            )
            return int(cur.lastrowid)

    def rename(self, *, employee_id: int, name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET name=%s WHERE employee_id=%s", (name, int(employee_id)))
            return affected(cur)

    def set_template(self, *, employee_id: int, template_id: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET template_id=%s WHERE employee_id=%s",
                (template_id, int(employee_id)),
            )
            return affected(cur)

    def set_last_payout_date(self, *, employee_id: int, payout_date: Optional[date]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET last_payout_date=%s WHERE employee_id=%s",
                (payout_date, int(employee_id)),
            )
            return affected(cur)

    def delete(self, *, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (int(employee_id),))
            return affected(cur)
