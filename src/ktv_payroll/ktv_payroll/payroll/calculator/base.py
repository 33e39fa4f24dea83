from __future__ import annotations

from abc import ABC, abstractmethod

from ...rules.model import RuleSet
from ..model import SalaryBreakdown


class SalaryCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def compute(self, client_count: int, is_working: bool, rules: RuleSet) -> SalaryBreakdown:
        raise NotImplementedError
