# storefront/data/models/mixins.py
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime

from storefront.domain.lifecycle import Lifecycle, LifecycleState


class SoftDeleteMixin:
    """Rows are never removed; `deleted_at` moves them to the DELETED lifecycle."""

    deleted_at = Column(DateTime(timezone=True), nullable=True)

    @property
    def lifecycle(self) -> LifecycleState:
        return LifecycleState.from_deleted_at(self.deleted_at)

    @property
    def is_deleted(self) -> bool:
        return self.lifecycle.status is Lifecycle.DELETED

    def mark_deleted(self, at: datetime | None = None) -> None:
        if self.deleted_at is None:
            self.deleted_at = at or datetime.now(timezone.utc)

    @classmethod
    def not_deleted(cls):
        return cls.deleted_at.is_(None)
