# storefront/repos/cart_repo.py
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.cart import StoredStateModel
from storefront.domain.exceptions import ConcurrentUpdateError


_UNSET = object()


class CartStorage:
    """Storage adapter for persisted client state, addressed by key."""

    def get(self, key: str) -> Dict[str, Any] | None:
        raise NotImplementedError

    def set(self, key: str, value: Dict[str, Any], expected_version: Any = _UNSET) -> None:
        raise NotImplementedError

    def version_of(self, key: str) -> int | None:
        """Version seen by the last read of `key`, None when it did not exist."""
        return None

    def remove(self, key: str) -> None:
        raise NotImplementedError

    def forget(self) -> None:
        """Drop anything remembered from earlier reads."""


class SqlCartStorage(CartStorage):
    """
    Keeps each document in `stored_states`. Writes use optimistic locking on
    the version read by this instance: UPDATE ... WHERE key = :k AND version = :v.
    Nothing is committed here, the calling service owns the transaction.
    """

    def __init__(self, db: Session):
        self.db = db
        #key -> version seen on read, None when the row did not exist
        self._versions: Dict[str, int | None] = {}

    def get(self, key: str) -> Dict[str, Any] | None:
        row = self.db.execute(
            select(StoredStateModel.payload, StoredStateModel.version).where(StoredStateModel.key == key)
        ).first()

        if row is None:
            self._versions[key] = None
            return None

        self._versions[key] = row.version
        return row.payload

    def version_of(self, key: str) -> int | None:
        if key not in self._versions:
            self.get(key)
        return self._versions[key]

    def set(self, key: str, value: Dict[str, Any], expected_version: Any = _UNSET) -> None:
        """
        Write `value` against the version this instance last read, or against
        `expected_version` when given (None means the key must not exist yet).
        """
        now = datetime.now(timezone.utc)

        version = self.version_of(key) if expected_version is _UNSET else expected_version

        if version is None:
            self.db.add(StoredStateModel(key=key, payload=value, version=1, updated_at=now))
            try:
                self.db.flush()
            except IntegrityError:
                #another request created the same key first
                self.db.rollback()
                self._versions.clear()
                raise ConcurrentUpdateError(key)
            self._versions[key] = 1
            return

        rowcount = self.db.execute(
            update(StoredStateModel)
            .where(StoredStateModel.key == key, StoredStateModel.version == version)
            .values(payload=value, version=version + 1, updated_at=now)
            .execution_options(synchronize_session=False)
        ).rowcount

        if rowcount == 0:
            raise ConcurrentUpdateError(key)
        self._versions[key] = version + 1

    def remove(self, key: str) -> None:
        self.db.execute(
            delete(StoredStateModel)
            .where(StoredStateModel.key == key)
            .execution_options(synchronize_session=False)
        )
        self._versions[key] = None

    def forget(self) -> None:
        self._versions.clear()

    def purge_older_than(self, cutoff: datetime) -> int:
        result = self.db.execute(
            delete(StoredStateModel)
            .where(StoredStateModel.updated_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
