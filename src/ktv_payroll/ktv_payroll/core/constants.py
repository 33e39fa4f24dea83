"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

# Observed defaults used when no settings row exists for a key.
DEFAULT_RULE_VALUES = {
    "client_payment": Decimal("900"),
    "venue_fee": Decimal("120"),
    "base_salary_with_client": Decimal("350"),
    "base_salary_no_client": Decimal("100"),
    "first_client_bonus": Decimal("200"),
    "additional_client_bonus": Decimal("300"),
    "broker_first_client": Decimal("50"),
    "broker_additional_client": Decimal("100"),
}

# Keys a template may override. Client payment and venue fee are always global.
SALARY_RULE_KEYS = (
    "base_salary_with_client",
    "base_salary_no_client",
    "first_client_bonus",
    "additional_client_bonus",
    "broker_first_client",
    "broker_additional_client",
)

GLOBAL_RULES_LABEL = "Global rules"
