from __future__ import annotations

import logging
from typing import Optional

from ..core.exceptions import InconsistentStateError, NotFoundError
from ..employees.model import Employee
from .model import GlobalRules, RuleSet, RuleSetSource, RuleTemplate, TemplateRules
from .repository import RuleTemplateRepository, SettingsRepository

logger = logging.getLogger(__name__)


class RuleSetResolver:
    """Turns an employee (plus optional requesting user) into a concrete RuleSet.

    Global values: the user's own rows win over the system default rows, and
    keys with no row at all use the built-in defaults. A template replaces the
    salary-side values only; client payment and venue fee stay global.

    An employee pointing at a deleted template raises InconsistentStateError.
    Pay is never silently computed from global rules in that case.
    """

    def __init__(self, settings: SettingsRepository, templates: RuleTemplateRepository):
        self._settings = settings
        self._templates = templates

    def global_rules(self, user_id: Optional[int] = None) -> RuleSet:
        values = dict(self._settings.get_default_values())
        if user_id is not None:
            values.update(self._settings.get_user_values(int(user_id)))
        return RuleSet.from_mapping(values)

    def get_template(self, template_id: int) -> RuleTemplate:
        template = self._templates.get_by_id(int(template_id))
        if not template:
            raise NotFoundError(f"Rule template {template_id} does not exist")
        return template

    def source_for(self, employee: Employee, *, user_id: Optional[int] = None) -> RuleSetSource:
        if employee.template_id is not None:
            return TemplateRules(template_id=employee.template_id, user_id=user_id)
        return GlobalRules(user_id=user_id)

    def resolve_source(self, source: RuleSetSource) -> RuleSet:
        base = self.global_rules(source.user_id)
        if isinstance(source, GlobalRules):
            return base
        return base.with_salary_fields(self.get_template(source.template_id))

    def resolve(self, employee: Employee, *, user_id: Optional[int] = None) -> RuleSet:
        try:
            return self.resolve_source(self.source_for(employee, user_id=user_id))
        except NotFoundError:
            logger.warning(
                "[ktv-payroll] employee_id=%s references missing template_id=%s",
                employee.employee_id,
                employee.template_id,
            )
            raise InconsistentStateError(
                f"Employee '{employee.name}' references rule template {employee.template_id}, "
                "which no longer exists; reassign a template or clear it"
            ) from None
