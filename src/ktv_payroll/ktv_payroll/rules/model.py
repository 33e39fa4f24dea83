from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional, Union

from ..core.constants import DEFAULT_RULE_VALUES, SALARY_RULE_KEYS
from ..core.exceptions import ValidationError


def parse_amount(name: str, value) -> Decimal:
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{name} must be a number") from None
    if not amount.is_finite():
        raise ValidationError(f"{name} must be a number")
    if amount < 0:
        raise ValidationError(f"{name} cannot be negative")
    return amount


@dataclass(frozen=True)
class RuleSet:
    """Calculation constants in effect for one computation.

    Built once per resolution and passed explicitly into the calculator.
    """

    client_payment: Decimal
    venue_fee: Decimal
    base_salary_with_client: Decimal
    base_salary_no_client: Decimal
    first_client_bonus: Decimal
    additional_client_bonus: Decimal
    broker_first_client: Decimal
    broker_additional_client: Decimal

    def __post_init__(self) -> None:
        for f in fields(self):
            object.__setattr__(self, f.name, parse_amount(f.name, getattr(self, f.name)))

    @classmethod
    def default(cls) -> "RuleSet":
        return cls(**DEFAULT_RULE_VALUES)

    @classmethod
    def from_mapping(cls, values: Mapping[str, object]) -> "RuleSet":
        """Build from stored key/value pairs, using defaults for missing keys."""
        merged = dict(DEFAULT_RULE_VALUES)
        merged.update({k: v for k, v in values.items() if k in merged})
        return cls(**merged)

    def with_salary_fields(self, template: "RuleTemplate") -> "RuleSet":
        """Salary-side fields from the template; client payment and venue fee stay."""
        return replace(self, **template.salary_values())

    def as_dict(self) -> dict[str, Decimal]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class RuleTemplate:
    """Saved salary-side rule values assignable to employees."""

    template_id: int
    name: str
    base_salary_with_client: Decimal
    base_salary_no_client: Decimal
    first_client_bonus: Decimal
    additional_client_bonus: Decimal
    broker_first_client: Decimal
    broker_additional_client: Decimal
    description: Optional[str] = None
    user_id: Optional[int] = None
    is_global: bool = False
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        for key in SALARY_RULE_KEYS:
            object.__setattr__(self, key, parse_amount(key, getattr(self, key)))

    def salary_values(self) -> dict[str, Decimal]:
        return {key: getattr(self, key) for key in SALARY_RULE_KEYS}


@dataclass(frozen=True)
class GlobalRules:
    """Resolve from global settings, optionally scoped to a requesting user."""

    user_id: Optional[int] = None


@dataclass(frozen=True)
class TemplateRules:
    """Resolve from an assigned template (salary side) over global settings."""

    template_id: int
    user_id: Optional[int] = None


RuleSetSource = Union[GlobalRules, TemplateRules]
