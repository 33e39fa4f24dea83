from __future__ import annotations

import logging
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_RULE_VALUES, SALARY_RULE_KEYS
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import RuleSet, RuleTemplate, parse_amount
from .repository import RuleTemplateRepository, SettingsRepository
from .resolver import RuleSetResolver

logger = logging.getLogger(__name__)


def _clean_values(values: Mapping[str, object], allowed: Sequence[str]) -> dict[str, Decimal]:
    unknown = sorted(set(values) - set(allowed))
    if unknown:
        raise ValidationError(f"Unknown rule keys: {', '.join(unknown)}")
    return {key: parse_amount(key, value) for key, value in values.items()}


class SettingsService:
    """Use case: maintain global rule values and rule templates.

    Global values with user_id=None are the system defaults and only admins
    may change them; any user may keep their own scoped copy.
    """

    def __init__(
        self,
        settings: SettingsRepository,
        templates: RuleTemplateRepository,
        resolver: RuleSetResolver,
    ):
        self._settings = settings
        self._templates = templates
        self._resolver = resolver

    def get_rules(self, *, user_id: Optional[int] = None) -> RuleSet:
        return self._resolver.global_rules(user_id)

    def update_values(
        self,
        values: Mapping[str, object],
        *,
        current_role: Role,
        user_id: Optional[int] = None,
    ) -> RuleSet:
        if user_id is None and current_role != Role.ADMIN:
            raise AuthorizationError("Only admins may change the system default rules")

        cleaned = _clean_values(values, tuple(DEFAULT_RULE_VALUES))
        for key, value in cleaned.items():
            self._settings.upsert_value(key=key, value=value, user_id=user_id)

        logger.info("[ktv-payroll] rules updated user_id=%s keys=%s", user_id, sorted(cleaned))
        return self.get_rules(user_id=user_id)

    def list_templates(self, *, user_id: Optional[int] = None) -> Sequence[RuleTemplate]:
        return self._templates.list_visible(user_id=user_id)

    def get_template(self, template_id: int) -> RuleTemplate:
        return self._resolver.get_template(template_id)

    def create_template(
        self,
        *,
        name: str,
        values: Mapping[str, object],
        current_role: Role,
        description: Optional[str] = None,
        user_id: Optional[int] = None,
        is_global: bool = False,
    ) -> RuleTemplate:
        name = require_non_empty(name, "Template name")
        if is_global and current_role != Role.ADMIN:
            raise AuthorizationError("Only admins may create global templates")

        cleaned = _clean_values(values, SALARY_RULE_KEYS)
        missing = [key for key in SALARY_RULE_KEYS if key not in cleaned]
        if missing:
            raise ValidationError(f"Missing template values: {', '.join(missing)}")

        template_id = self._templates.create(
            name=name,
            values=cleaned,
            description=description.strip() if description else None,
            user_id=user_id,
            is_global=bool(is_global),
        )
        logger.info("[ktv-payroll] template created template_id=%s name=%s", template_id, name)
        return self.get_template(template_id)

    def update_template(
        self,
        template_id: int,
        *,
        current_role: Role,
        user_id: Optional[int] = None,
        name: Optional[str] = None,
        description: Optional[str] = None,
        values: Optional[Mapping[str, object]] = None,
    ) -> RuleTemplate:
        self._require_editable(self.get_template(template_id), current_role=current_role, user_id=user_id)

        if name is not None:
            name = require_non_empty(name, "Template name")
        cleaned = _clean_values(values, SALARY_RULE_KEYS) if values else None

        self._templates.update(template_id=int(template_id), name=name, description=description, values=cleaned)
        logger.info("[ktv-payroll] template updated template_id=%s", template_id)
        return self.get_template(template_id)

    def delete_template(self, template_id: int, *, current_role: Role, user_id: Optional[int] = None) -> None:
        """Delete a template.

        Employees still assigned to it are left as they are; resolving their
        rules then raises InconsistentStateError until they are reassigned.
        """
        self._require_editable(self.get_template(template_id), current_role=current_role, user_id=user_id)
        if not self._templates.delete(template_id=int(template_id)):
            raise NotFoundError(f"Rule template {template_id} does not exist")
        logger.info("[ktv-payroll] template deleted template_id=%s", template_id)

    def apply_template(self, template_id: int, *, current_role: Role, user_id: Optional[int] = None) -> RuleSet:
        """Copy a template's salary values onto the (user-scoped) global rules."""
        template = self.get_template(template_id)
        return self.update_values(template.salary_values(), current_role=current_role, user_id=user_id)

    def create_template_from_current(
        self,
        *,
        name: str,
        current_role: Role,
        description: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> RuleTemplate:
        current = self.get_rules(user_id=user_id).as_dict()
        return self.create_template(
            name=name,
            values={key: current[key] for key in SALARY_RULE_KEYS},
            current_role=current_role,
            description=description,
            user_id=user_id,
            is_global=False,
        )

    @staticmethod
    def _require_editable(template: RuleTemplate, *, current_role: Role, user_id: Optional[int]) -> None:
        if current_role == Role.ADMIN:
            return
        if template.is_global or template.user_id is None or template.user_id != user_id:
            raise AuthorizationError("You may only change your own templates")
