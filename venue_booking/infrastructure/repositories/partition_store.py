# venue_booking/infrastructure/repositories/partition_store.py

import copy
import json
from abc import ABC, abstractmethod
from contextlib import contextmanager
from enum import Enum
from typing import Iterator

from sqlalchemy import select
from sqlalchemy.orm import Session

from venue_booking.infrastructure.db.models import PartitionState


class Partition(str, Enum):
    BOOKINGS = "bookings"
    USER_VENUES = "userVenues"
    SERVICE_PACKAGES = "servicePackages"
    FAVORITES = "favorites"
    REVIEWS = "reviews"


class PartitionStore(ABC):
    """
    Named partitions, each an ordered list of JSON-like records.
    Implementations must hand out copies so callers never alias
    stored state.
    """

    @abstractmethod
    def get(self, partition: Partition) -> list[dict]:
        """Return the records of a partition (empty list if never written)."""
        ...

    @abstractmethod
    def set(self, partition: Partition, records: list[dict]) -> None:
        """Replace the records of a partition."""
        ...

    def append(self, partition: Partition, record: dict) -> None:
        records = self.get(partition)
        records.append(record)
        self.set(partition, records)

    @abstractmethod
    @contextmanager
    def transaction(self) -> Iterator[None]:
        """
        Read-validate-write boundary. Any exception raised inside
        leaves every partition as it was before entering.
        """
        ...


class InMemoryPartitionStore(PartitionStore):
    """Process-local store, one per session."""

    def __init__(self, initial: dict[Partition, list[dict]] | None = None):
        self._data: dict[Partition, list[dict]] = {}
        for partition, records in (initial or {}).items():
            self.set(partition, records)

    def get(self, partition: Partition) -> list[dict]:
        return copy.deepcopy(self._data.get(partition, []))

    def set(self, partition: Partition, records: list[dict]) -> None:
        self._data[partition] = copy.deepcopy(list(records))

    @contextmanager
    def transaction(self) -> Iterator[None]:
        snapshot = copy.deepcopy(self._data)
        try:
            yield
        except Exception:
            self._data = snapshot
            raise


class SqlPartitionStore(PartitionStore):
    """
    Partitions persisted as JSON text, one row each.
    Commit is left to the owner of the session.
    """

    def __init__(self, db: Session):
        self.db = db
        self._in_transaction = False

    def _load_row(self, partition: Partition) -> PartitionState | None:
        stmt = select(PartitionState).where(PartitionState.name == partition.value)

        if self._in_transaction:
            # SELECT ... FOR UPDATE, ignored by SQLite
            stmt = stmt.with_for_update()

        return self.db.execute(stmt).scalar_one_or_none()

    def get(self, partition: Partition) -> list[dict]:
        row = self._load_row(partition)
        if not row:
            return []
        return json.loads(row.payload)

    def set(self, partition: Partition, records: list[dict]) -> None:
        payload = json.dumps(list(records))
        row = self._load_row(partition)

        if row:
            row.payload = payload
        else:
            self.db.add(PartitionState(name=partition.value, payload=payload))

        self.db.flush()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._in_transaction:
            yield
            return

        # a savepoint keeps earlier uncommitted writes when this block fails
        self._in_transaction = True
        try:
            with self.db.begin_nested():
                yield
        finally:
            self._in_transaction = False
