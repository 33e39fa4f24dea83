from datetime import datetime
from decimal import Decimal

import pytest

from src.ktv_payroll.ktv_payroll.core.exceptions import InconsistentStateError, NotFoundError
from src.ktv_payroll.ktv_payroll.employees.model import Employee
from src.ktv_payroll.ktv_payroll.rules.model import GlobalRules, RuleSet, TemplateRules


def _employee(template_id=None):
    return Employee(employee_id=1, name="Lily", created_at=datetime(2024, 1, 1), template_id=template_id)


def test_defaults_when_no_settings_rows(resolver):
    assert resolver.resolve(_employee()) == RuleSet.default()


def test_user_rows_override_system_rows(resolver, settings_repo):
    settings_repo.upsert_value(key="client_payment", value=Decimal("1000"))
    settings_repo.upsert_value(key="client_payment", value=Decimal("1200"), user_id=5)
    settings_repo.upsert_value(key="venue_fee", value=Decimal("0"), user_id=5)

    assert resolver.global_rules().client_payment == 1000
    scoped = resolver.global_rules(5)
    assert scoped.client_payment == 1200
    # An explicit 0 is a real value, not "missing".
    assert scoped.venue_fee == 0
    assert scoped.base_salary_with_client == 350


def test_template_overrides_salary_side_only(resolver, settings_repo, templates_repo):
    settings_repo.upsert_value(key="client_payment", value=Decimal("1000"))
    template = templates_repo.add("Senior", base_salary_with_client=400, broker_first_client=60)

    rules = resolver.resolve(_employee(template.template_id))

    assert rules.base_salary_with_client == 400
    assert rules.base_salary_no_client == 150
    assert rules.broker_first_client == 60
    assert rules.client_payment == 1000
    assert rules.venue_fee == 120


def test_source_is_tagged(resolver):
    assert resolver.source_for(_employee(), user_id=3) == GlobalRules(user_id=3)
    assert resolver.source_for(_employee(4)) == TemplateRules(template_id=4)


def test_deleted_template_raises_inconsistent_state(resolver, templates_repo):
    template = templates_repo.add("Senior")
    employee = _employee(template.template_id)
    templates_repo.delete(template_id=template.template_id)

    with pytest.raises(InconsistentStateError):
        resolver.resolve(employee)


def test_missing_template_lookup_is_not_found(resolver):
    with pytest.raises(NotFoundError):
        resolver.get_template(42)


def test_template_edit_does_not_affect_global_employee(resolver, templates_repo):
    template = templates_repo.add("Senior")
    before = resolver.resolve(_employee())

    templates_repo.update(template_id=template.template_id, values={"base_salary_no_client": Decimal("999")})

    assert resolver.resolve(_employee()) == before
    assert resolver.resolve(_employee(template.template_id)).base_salary_no_client == 999
