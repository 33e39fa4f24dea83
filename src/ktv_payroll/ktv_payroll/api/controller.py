from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_date, today_local
from ..common.validators import require_flag, require_id
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError, InconsistentStateError, NotFoundError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def to_json(value: Any) -> Any:
    """Dataclasses/dates/Decimals into JSON-friendly values (money as strings)."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {str(k): to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def register(app: Flask, container: Container) -> None:
    def _user_id() -> Optional[int]:
        user_id = session.get("user_id")
        return int(user_id) if user_id is not None else None

    def _role() -> Role:
        try:
            return Role(session.get("role") or Role.STAFF.value)
        except ValueError:
            return Role.STAFF

    def _body() -> dict:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            raise ValidationError("Expected a JSON object body")
        return payload

    def _date_arg(name: str, default: Optional[date] = None) -> Optional[date]:
        value = request.args.get(name)
        return parse_iso_date(value) if value else default

    def _template_field(payload: dict) -> Optional[int]:
        value = payload.get("template_id")
        return None if value is None else require_id(value, "template_id")

    def _int_arg(name: str) -> Optional[int]:
        value = request.args.get(name)
        if not value:
            return None
        if not value.isdigit():
            raise ValidationError(f"{name} must be a number")
        return int(value)

    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        if isinstance(e, InconsistentStateError):
            status = 409
        elif isinstance(e, NotFoundError):
            status = 404
        elif isinstance(e, AuthorizationError):
            status = 403
        else:
            status = 400
        logger.info("[ktv-payroll] %s %s -> %s: %s", request.method, request.path, status, e)
        return jsonify({"error": type(e).__name__, "message": str(e)}), status

    # Rules and templates

    @app.route("/api/rules", methods=["GET"], endpoint="api_rules")
    def api_rules():
        return jsonify(to_json(container.settings_service.get_rules(user_id=_user_id())))

    @app.route("/api/rules", methods=["PUT"], endpoint="api_rules_update")
    def api_rules_update():
        payload = _body()
        scope_user = _user_id() if payload.get("scope") == "user" else None
        rules = container.settings_service.update_values(
            payload.get("values") or {},
            current_role=_role(),
            user_id=scope_user,
        )
        return jsonify(to_json(rules))

    @app.route("/api/templates", methods=["GET"], endpoint="api_templates")
    def api_templates():
        return jsonify(to_json(list(container.settings_service.list_templates(user_id=_user_id()))))

    @app.route("/api/templates", methods=["POST"], endpoint="api_templates_create")
    def api_templates_create():
        payload = _body()
        template = container.settings_service.create_template(
            name=payload.get("name", ""),
            values=payload.get("values") or {},
            description=payload.get("description"),
            current_role=_role(),
            user_id=_user_id(),
            is_global=bool(payload.get("is_global", False)),
        )
        return jsonify(to_json(template)), 201

    @app.route("/api/templates/from-current", methods=["POST"], endpoint="api_templates_from_current")
    def api_templates_from_current():
        payload = _body()
        template = container.settings_service.create_template_from_current(
            name=payload.get("name", ""),
            description=payload.get("description"),
            current_role=_role(),
            user_id=_user_id(),
        )
        return jsonify(to_json(template)), 201

    @app.route("/api/templates/<int:template_id>", methods=["GET"], endpoint="api_template")
    def api_template(template_id: int):
        return jsonify(to_json(container.settings_service.get_template(template_id)))

    @app.route("/api/templates/<int:template_id>", methods=["PUT"], endpoint="api_template_update")
    def api_template_update(template_id: int):
        payload = _body()
        template = container.settings_service.update_template(
            template_id,
            current_role=_role(),
            user_id=_user_id(),
            name=payload.get("name"),
            description=payload.get("description"),
            values=payload.get("values"),
        )
        return jsonify(to_json(template))

    @app.route("/api/templates/<int:template_id>", methods=["DELETE"], endpoint="api_template_delete")
    def api_template_delete(template_id: int):
        container.settings_service.delete_template(template_id, current_role=_role(), user_id=_user_id())
        return "", 204

    @app.route("/api/templates/<int:template_id>/apply", methods=["POST"], endpoint="api_template_apply")
    def api_template_apply(template_id: int):
        payload = request.get_json(silent=True) or {}
        scope_user = _user_id() if payload.get("scope") == "user" else None
        rules = container.settings_service.apply_template(template_id, current_role=_role(), user_id=scope_user)
        return jsonify(to_json(rules))

    # Employees

    @app.route("/api/employees", methods=["GET"], endpoint="api_employees")
    def api_employees():
        return jsonify(to_json(list(container.employee_service.list_all())))

    @app.route("/api/employees", methods=["POST"], endpoint="api_employees_create")
    def api_employees_create():
        payload = _body()
        employee = container.employee_service.create(name=payload.get("name", ""), template_id=_template_field(payload))
        return jsonify(to_json(employee)), 201

    @app.route("/api/employees/<int:employee_id>", methods=["PUT"], endpoint="api_employee_update")
    def api_employee_update(employee_id: int):
        payload = _body()
        employee = container.employee_service.get(employee_id)
        if "name" in payload:
            employee = container.employee_service.rename(employee_id, name=payload.get("name") or "")
        if "template_id" in payload:
            employee = container.employee_service.assign_template(employee_id, template_id=_template_field(payload))
        return jsonify(to_json(employee))

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="api_employee_delete")
    def api_employee_delete(employee_id: int):
        container.employee_service.delete(employee_id)
        return "", 204

    # Attendance

    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance")
    def api_attendance():
        day = _date_arg("date")
        if day:
            records = container.attendance_service.list_for_date(day)
        else:
            today = today_local()
            records = container.attendance_service.list_range(
                start=_date_arg("start", today),
                end=_date_arg("end", today),
                employee_id=_int_arg("employee_id"),
            )
        return jsonify(to_json(list(records)))

    @app.route("/api/attendance", methods=["POST"], endpoint="api_attendance_save")
    def api_attendance_save():
        payload = _body()
        record = container.attendance_service.record(
            employee_id=require_id(payload.get("employee_id"), "employee_id"),
            work_date=parse_iso_date(payload.get("date") or ""),
            is_working=require_flag(payload.get("is_working", False), "is_working"),
            client_count=payload.get("client_count", 0),
            user_id=_user_id(),
        )
        return jsonify(to_json(record))

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="api_attendance_delete")
    def api_attendance_delete(attendance_id: int):
        container.attendance_service.delete(attendance_id)
        return "", 204

    # Settlements

    @app.route("/api/settlements", methods=["GET"], endpoint="api_settlements")
    def api_settlements():
        settlements = container.settlement_service.list_settlements(today=_date_arg("today"), user_id=_user_id())
        return jsonify(to_json(list(settlements)))

    @app.route("/api/settlements/<int:employee_id>", methods=["GET"], endpoint="api_settlement")
    def api_settlement(employee_id: int):
        settlement = container.settlement_service.get_settlement(
            employee_id, today=_date_arg("today"), user_id=_user_id()
        )
        return jsonify(to_json(settlement))

    @app.route("/api/settlements/<int:employee_id>/payout", methods=["POST"], endpoint="api_settlement_payout")
    def api_settlement_payout(employee_id: int):
        payload = request.get_json(silent=True) or {}
        payout_date = parse_iso_date(payload["payout_date"]) if payload.get("payout_date") else None
        employee = container.settlement_service.mark_paid(employee_id, payout_date=payout_date)
        return jsonify(to_json(employee))

    # Income statistics

    @app.route("/api/stats", methods=["GET"], endpoint="api_stats")
    def api_stats():
        today = today_local()
        report = container.payroll_report_service.income_stats(
            start=_date_arg("start", today),
            end=_date_arg("end", today),
            user_id=_user_id(),
        )
        return jsonify(to_json(report))

    @app.route("/api/stats/today", methods=["GET"], endpoint="api_stats_today")
    def api_stats_today():
        return jsonify(to_json(container.payroll_report_service.today_stats(user_id=_user_id())))

    @app.route("/api/stats/month", methods=["GET"], endpoint="api_stats_month")
    def api_stats_month():
        return jsonify(to_json(container.payroll_report_service.month_stats(user_id=_user_id())))

    @app.route("/api/stats/templates", methods=["GET"], endpoint="api_stats_templates")
    def api_stats_templates():
        groups = container.payroll_report_service.stats_by_template(
            start=_date_arg("start"), end=_date_arg("end"), user_id=_user_id()
        )
        return jsonify(to_json([{"label": k, "totals": v} for k, v in groups.items()]))

    @app.route("/api/stats/employees", methods=["GET"], endpoint="api_stats_employees")
    def api_stats_employees():
        groups = container.payroll_report_service.stats_by_employee(
            start=_date_arg("start"), end=_date_arg("end"), user_id=_user_id()
        )
        return jsonify(to_json([{"label": k, "totals": v} for k, v in groups.items()]))

    @app.route("/api/stats/dates", methods=["GET"], endpoint="api_stats_dates")
    def api_stats_dates():
        today = today_local()
        groups = container.payroll_report_service.stats_by_date(
            start=_date_arg("start", today), end=_date_arg("end", today), user_id=_user_id()
        )
        return jsonify(to_json([{"label": k, "totals": v} for k, v in groups.items()]))

    @app.route("/api/stats/me", methods=["GET"], endpoint="api_stats_me")
    def api_stats_me():
        return jsonify(to_json(container.payroll_report_service.my_income(current_role=_role())))
