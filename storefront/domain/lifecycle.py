# storefront/domain/lifecycle.py
from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Lifecycle(str, Enum):
    ACTIVE = "ACTIVE"
    DELETED = "DELETED"


@dataclass(frozen=True)
class LifecycleState:
    status: Lifecycle
    deleted_at: datetime | None = None

    @classmethod
    def from_deleted_at(cls, deleted_at: datetime | None) -> "LifecycleState":
        if deleted_at is None:
            return cls(Lifecycle.ACTIVE)
        return cls(Lifecycle.DELETED, deleted_at)
