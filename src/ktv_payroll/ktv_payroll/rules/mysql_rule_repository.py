from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..common.numbers import to_decimal
from ..core.constants import SALARY_RULE_KEYS
from ..database.connection import DatabaseConnection
from ..database.mysql_base import affected, db_cursor, fetchall, fetchone
from .model import RuleTemplate
from .repository import RuleTemplateRepository, SettingsRepository

_TEMPLATE_COLUMNS = (
    "template_id, name, description, user_id, is_global, "
    + ", ".join(SALARY_RULE_KEYS)
    + ", created_at"
)


def _to_template(r: dict[str, Any]) -> RuleTemplate:
    return RuleTemplate(
        template_id=int(r["template_id"]),
        name=r["name"],
        description=r.get("description"),
        user_id=int(r["user_id"]) if r.get("user_id") is not None else None,
        is_global=bool(r.get("is_global")),
        created_at=r.get("created_at"),
        **{key: to_decimal(r.get(key)) for key in SALARY_RULE_KEYS},
    )


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_default_values(self) -> Mapping[str, Decimal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT setting_key, setting_value FROM settings WHERE user_id IS NULL")
            return {r["setting_key"]: to_decimal(r["setting_value"]) for r in fetchall(cur)}

    def get_user_values(self, user_id: int) -> Mapping[str, Decimal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT setting_key, setting_value FROM settings WHERE user_id=%s",
                (int(user_id),),
            )
            return {r["setting_key"]: to_decimal(r["setting_value"]) for r in fetchall(cur)}

    def upsert_value(self, *, key: str, value: Decimal, user_id: Optional[int] = None) -> None:
        # The (key, user_id) index cannot enforce uniqueness for NULL user_id,
        # so update first and insert only when nothing matched.
        with db_cursor(self._conn_factory) as (_, cur):
            if user_id is None:
                cur.execute(
                    "UPDATE settings SET setting_value=%s WHERE setting_key=%s AND user_id IS NULL",
                    (value, key),
                )
            else:
                cur.execute(
                    "UPDATE settings SET setting_value=%s WHERE setting_key=%s AND user_id=%s",
                    (value, key, int(user_id)),
                )
            if affected(cur):
                return

            cur.execute(
                "INSERT INTO settings(setting_key, setting_value, user_id) VALUES(%s,%s,%s)",
                (key, value, user_id),
            )


class MySQLRuleTemplateRepository(RuleTemplateRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, template_id: int) -> Optional[RuleTemplate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_TEMPLATE_COLUMNS} FROM rule_templates WHERE template_id=%s",
                (int(template_id),),
            )
            r = fetchone(cur)
            return _to_template(r) if r else None

    def list_visible(self, *, user_id: Optional[int] = None) -> Sequence[RuleTemplate]:
        if user_id is None:
            where, params = "is_global=1", ()
        else:
            where, params = "(is_global=1 OR user_id=%s)", (int(user_id),)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_TEMPLATE_COLUMNS}
                FROM rule_templates
                WHERE {where}
                ORDER BY is_global DESC, created_at DESC, template_id DESC
                """,
                params,
            )
            return [_to_template(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        name: str,
        values: Mapping[str, Decimal],
        description: Optional[str] = None,
        user_id: Optional[int] = None,
        is_global: bool = False,
    ) -> int:
        columns = ", ".join(SALARY_RULE_KEYS)
        placeholders = ",".join(["%s"] * len(SALARY_RULE_KEYS))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO rule_templates(name, description, user_id, is_global, {columns})
                VALUES(%s,%s,%s,%s,{placeholders})
                """,
                (name, description, user_id, int(bool(is_global)), *[values[k] for k in SALARY_RULE_KEYS]),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        template_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        values: Optional[Mapping[str, Decimal]] = None,
    ) -> bool:
        sets: list[str] = []
        params: list[object] = []

        if name is not None:
            sets.append("name=%s")
            params.append(name)
        if description is not None:
            sets.append("description=%s")
            params.append(description)
        for key in SALARY_RULE_KEYS:
            if values and key in values:
                sets.append(f"{key}=%s")
                params.append(values[key])

        if not sets:
            return self.get_by_id(template_id) is not None

        params.append(int(template_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE rule_templates SET {', '.join(sets)} WHERE template_id=%s",
                tuple(params),
            )
            return affected(cur)

    def delete(self, *, template_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM rule_templates WHERE template_id=%s", (int(template_id),))
            return affected(cur)
