from __future__ import annotations

from decimal import Decimal
from typing import Mapping, Optional, Protocol, Sequence

from .model import RuleTemplate


class SettingsRepository(Protocol):
    """Key/value store of global rule values.

    Rows with user_id NULL are the system defaults; rows with a user_id are
    that user's own copy of the global values.
    """

    def get_default_values(self) -> Mapping[str, Decimal]:
        raise NotImplementedError

    def get_user_values(self, user_id: int) -> Mapping[str, Decimal]:
        raise NotImplementedError

    def upsert_value(self, *, key: str, value: Decimal, user_id: Optional[int] = None) -> None:
        raise NotImplementedError


class RuleTemplateRepository(Protocol):
    def get_by_id(self, template_id: int) -> Optional[RuleTemplate]:
        raise NotImplementedError

    def list_visible(self, *, user_id: Optional[int] = None) -> Sequence[RuleTemplate]:
        """Global templates plus the user's own ones (global first, newest first)."""

        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        values: Mapping[str, Decimal],
        description: Optional[str] = None,
        user_id: Optional[int] = None,
        is_global: bool = False,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        template_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        values: Optional[Mapping[str, Decimal]] = None,
    ) -> bool:
        raise NotImplementedError

    def delete(self, *, template_id: int) -> bool:
        raise NotImplementedError
