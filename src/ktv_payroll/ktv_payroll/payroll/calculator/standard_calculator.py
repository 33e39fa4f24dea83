from __future__ import annotations

from ...common.validators import require_client_count
from ...rules.model import RuleSet
from ..model import ZERO, SalaryBreakdown
from .base import SalaryCalculator


class StandardSalaryCalculator(SalaryCalculator):
    """Standard rule: day base pay + first/additional client commission.

    Owner profit = revenue - venue fee - total salary - broker commission, and
    goes negative on a working day without clients.
    """

    def compute(self, client_count: int, is_working: bool, rules: RuleSet) -> SalaryBreakdown:
        client_count = require_client_count(client_count)
        if not is_working:
            return SalaryBreakdown.zero()

        base_salary = rules.base_salary_with_client if client_count > 0 else rules.base_salary_no_client

        commission = ZERO
        broker_commission = ZERO
        if client_count > 0:
            commission += rules.first_client_bonus
            broker_commission += rules.broker_first_client
        if client_count > 1:
            extra = client_count - 1
            commission += extra * rules.additional_client_bonus
            broker_commission += extra * rules.broker_additional_client

        total_salary = base_salary + commission
        revenue = client_count * rules.client_payment
        venue_fee = client_count * rules.venue_fee

        return SalaryBreakdown(
            base_salary=base_salary,
            commission=commission,
            total_salary=total_salary,
            broker_commission=broker_commission,
            owner_profit=revenue - venue_fee - total_salary - broker_commission,
        )


_standard = StandardSalaryCalculator()


def compute_breakdown(client_count: int, is_working: bool, rules: RuleSet) -> SalaryBreakdown:
    return _standard.compute(client_count, is_working, rules)
