from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_id, require_non_empty
from ..core.exceptions import NotFoundError
from ..rules.repository import RuleTemplateRepository
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """Use case: manage employees and their template assignment."""

    def __init__(self, employees: EmployeeRepository, templates: RuleTemplateRepository):
        self._employees = employees
        self._templates = templates

    def get(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError(f"Employee {employee_id} does not exist")
        return employee

    def list_all(self) -> Sequence[Employee]:
        return self._employees.list_all()

    def create(self, *, name: str, template_id: Optional[int] = None) -> Employee:
        name = require_non_empty(name, "Employee name")
        if template_id is not None:
            self._require_template(template_id)

        employee_id = self._employees.create(name=name, template_id=template_id)
        logger.info("[ktv-payroll] employee created employee_id=%s template_id=%s", employee_id, template_id)
        return self.get(employee_id)

    def rename(self, employee_id: int, *, name: str) -> Employee:
        name = require_non_empty(name, "Employee name")
        self.get(employee_id)
        self._employees.rename(employee_id=int(employee_id), name=name)
        return self.get(employee_id)

    def assign_template(self, employee_id: int, *, template_id: Optional[int]) -> Employee:
        """Assign a template, or clear it with None to fall back to global rules."""
        self.get(employee_id)
        if template_id is not None:
            self._require_template(template_id)

        self._employees.set_template(employee_id=int(employee_id), template_id=template_id)
        logger.info("[ktv-payroll] employee_id=%s template set to %s", employee_id, template_id)
        return self.get(employee_id)

    def delete(self, employee_id: int) -> None:
        if not self._employees.delete(employee_id=int(employee_id)):
            raise NotFoundError(f"Employee {employee_id} does not exist")
        logger.info("[ktv-payroll] employee deleted employee_id=%s", employee_id)

    def _require_template(self, template_id: int) -> None:
        if not self._templates.get_by_id(require_id(template_id, "template_id")):
            raise NotFoundError(f"Rule template {template_id} does not exist")
