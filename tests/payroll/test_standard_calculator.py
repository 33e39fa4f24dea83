from decimal import Decimal

import pytest

from src.ktv_payroll.ktv_payroll.core.exceptions import ValidationError
from src.ktv_payroll.ktv_payroll.payroll.calculator.standard_calculator import StandardSalaryCalculator, compute_breakdown
from src.ktv_payroll.ktv_payroll.rules.model import RuleSet

RULES = RuleSet.default()


def _as_tuple(b):
    return (b.base_salary, b.commission, b.total_salary, b.broker_commission, b.owner_profit)


@pytest.mark.parametrize(
    "clients, working, expected",
    [
        (0, False, (0, 0, 0, 0, 0)),
        (0, True, (100, 0, 100, 0, -100)),
        (1, True, (350, 200, 550, 50, 180)),
        (2, True, (350, 500, 850, 150, 560)),
        (3, True, (350, 800, 1150, 250, 940)),
    ],
)
def test_default_rule_scenarios(clients, working, expected):
    assert _as_tuple(compute_breakdown(clients, working, RULES)) == expected


def test_not_working_ignores_client_count():
    b = StandardSalaryCalculator().compute(5, False, RULES)
    assert _as_tuple(b) == (0, 0, 0, 0, 0)


def test_negative_client_count_is_rejected():
    with pytest.raises(ValidationError):
        compute_breakdown(-1, True, RULES)
    with pytest.raises(ValidationError):
        compute_breakdown(-1, False, RULES)


def test_non_integer_client_count_is_rejected():
    with pytest.raises(ValidationError):
        compute_breakdown(1.5, True, RULES)


def test_salary_and_broker_are_monotonic_and_total_decomposes():
    previous = None
    for clients in range(0, 8):
        b = compute_breakdown(clients, True, RULES)
        assert b.total_salary == b.base_salary + b.commission
        if previous is not None:
            assert b.total_salary >= previous.total_salary
            assert b.broker_commission >= previous.broker_commission
        previous = b


def test_uses_the_rule_set_passed_in():
    rules = RuleSet(
        client_payment=1000,
        venue_fee=100,
        base_salary_with_client=400,
        base_salary_no_client=150,
        first_client_bonus=250,
        additional_client_bonus=320,
        broker_first_client=60,
        broker_additional_client=80,
    )
    b = compute_breakdown(2, True, rules)

    assert b.base_salary == Decimal("400")
    assert b.commission == Decimal("570")
    assert b.broker_commission == Decimal("140")
    # 2000 - 200 - 970 - 140
    assert b.owner_profit == Decimal("690")


def test_rule_set_rejects_negative_values():
    with pytest.raises(ValidationError):
        RuleSet.from_mapping({"venue_fee": -1})
