from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        """All employees ordered by name."""

        raise NotImplementedError

    def create(self, *, name: str, template_id: Optional[int] = None) -> int:
        raise NotImplementedError

    def rename(self, *, employee_id: int, name: str) -> bool:
        raise NotImplementedError

    def set_template(self, *, employee_id: int, template_id: Optional[int]) -> bool:
        raise NotImplementedError

    def set_last_payout_date(self, *, employee_id: int, payout_date: Optional[date]) -> bool:
        raise NotImplementedError

    def delete(self, *, employee_id: int) -> bool:
        """Delete the employee; attendance rows cascade."""

        raise NotImplementedError
