# Overview: Generic in-memory collection repository that re-persists the whole collection on every mutation.

"""
Entity repository contract (shared by products, sales, expenses, customers)

- add(data): allocate the next id, fill derived fields, append, persist.
- update(record): full-record substitution by id, persist.
- delete(id): remove by id, persist.
- Insertion order is preserved; no sorting at this level.
- Collections load once from the KeyValueStore; load failures give [].

The in-memory list only changes after the store write succeeds, so a
failed write leaves the repository exactly as it was.
"""
from __future__ import annotations

import copy
from typing import Callable, Generic, TypeVar

from ..validation import NotFoundError
from .identifier_service import Allocation
from .storage_service import KeyValueStore, dump_collection, load_collection
from shopdesk.time_utils import today_iso


T = TypeVar("T")


class CollectionRepository(Generic[T]):
    prefix: str = ""
    storage_key: str = ""
    entity_name: str = "Record"

    def __init__(self, store: KeyValueStore, ids, *, today: Callable[[], str] = today_iso):
        self._store = store
        self._ids = ids
        self._today = today
        self._items: list[T] = []
        self.reload()

    # ------------------------------------------------------------------
    # Construction hooks
    # ------------------------------------------------------------------

    @staticmethod
    def from_dict(data: dict) -> T:
        raise NotImplementedError

    def build(self, record_id: str, data: dict) -> T:
        """Create a record from client data plus the allocated id."""
        return self.from_dict({**data, "id": record_id})

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def reload(self) -> None:
        self._items = load_collection(self._store, self.storage_key, self.from_dict)

    def list(self) -> list[T]:
        return copy.deepcopy(self._items)

    def ids(self) -> list[str]:
        return [item.id for item in self._items]

    def count(self) -> int:
        return len(self._items)

    def get(self, record_id: str) -> T | None:
        for item in self._items:
            if item.id == record_id:
                return copy.deepcopy(item)
        return None

    def require(self, record_id: str) -> T:
        record = self.get(record_id)
        if record is None:
            raise NotFoundError(f"{self.entity_name} {record_id} not found")
        return record

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def today(self) -> str:
        return self._today()

    def stage_add(self, data: dict) -> tuple[T, list[T], Allocation]:
        """Build the next record and the collection that would contain it, without persisting."""
        allocation = self._ids.allocate(self.prefix, self.ids())
        record = self.build(allocation.id, data)
        return record, [*self._items, record], allocation

    def writes_for(self, items: list[T]) -> dict[str, str]:
        return {self.storage_key: dump_collection(items)}

    def commit(self, items: list[T]) -> None:
        """Swap in a collection whose write has already succeeded."""
        self._items = list(items)

    def confirm(self, allocation: Allocation) -> None:
        self._ids.confirm(allocation)

    def _persist(self, items: list[T], extra: dict[str, str] | None = None) -> None:
        writes = self.writes_for(items)
        if extra:
            writes.update(extra)
        self._store.write_many(writes)
        self.commit(items)

    def add(self, data: dict) -> T:
        record, items, allocation = self.stage_add(data)
        self._persist(items, allocation.writes)
        self.confirm(allocation)
        return copy.deepcopy(record)

    def update(self, record: T) -> T:
        if not any(item.id == record.id for item in self._items):
            raise NotFoundError(f"{self.entity_name} {record.id} not found")
        stored = copy.deepcopy(record)
        items = [stored if item.id == record.id else item for item in self._items]
        self._persist(items)
        return copy.deepcopy(stored)

    def delete(self, record_id: str) -> None:
        items = [item for item in self._items if item.id != record_id]
        if len(items) == len(self._items):
            raise NotFoundError(f"{self.entity_name} {record_id} not found")
        self._persist(items)

    def clear(self) -> None:
        self._persist([])
