# Overview: Key-value persistence port for whole shop collections plus its SQL and in-memory adapters.

"""
Persistent Store Adapter

Every collection is stored as one JSON array text blob under a fixed key
(products, sales, expenses, customers). The shop core only talks to the
KeyValueStore port, so tests and scripts can swap in InMemoryKeyValueStore.

LOAD POLICY: a missing key, unparsable text, a non-list payload, or an
element that cannot be built all yield an empty collection. Loading never
raises to the caller.
"""
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Callable, Iterable, Mapping, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import StoredCollection
from shopdesk.time_utils import utcnow


logger = logging.getLogger(__name__)

T = TypeVar("T")

PRODUCTS_KEY = "products"
SALES_KEY = "sales"
EXPENSES_KEY = "expenses"
CUSTOMERS_KEY = "customers"
COUNTERS_KEY = "counters"

COLLECTION_KEYS = (PRODUCTS_KEY, SALES_KEY, EXPENSES_KEY, CUSTOMERS_KEY)


class StorageError(Exception):
    """Raised when a write to the backing store fails."""


class KeyValueStore(ABC):
    """Port for text blobs keyed by collection name."""

    @abstractmethod
    def read(self, key: str) -> str | None:
        ...

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        ...

    def write_many(self, values: Mapping[str, str]) -> None:
        """Write several keys; adapters that can make this atomic do so."""
        for key, value in values.items():
            self.write(key, value)

    @abstractmethod
    def delete(self, key: str) -> None:
        ...

    @abstractmethod
    def keys(self) -> list[str]:
        ...


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: Mapping[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        self._data[key] = value

    def write_many(self, values: Mapping[str, str]) -> None:
        # dict.update is all-or-nothing for str values
        self._data.update(values)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class SqlKeyValueStore(KeyValueStore):
    """
    Stores blobs in the stored_collections table.

    Requires an application context. write_many commits every row in one
    database transaction and rolls back on failure.
    """

    def read(self, key: str) -> str | None:
        row = db.session.get(StoredCollection, key)
        return row.value if row is not None else None

    def _stage(self, key: str, value: str) -> None:
        row = db.session.get(StoredCollection, key)
        if row is None:
            db.session.add(StoredCollection(key=key, value=value, updated_at=utcnow()))
        else:
            row.value = value
            row.updated_at = utcnow()

    def write(self, key: str, value: str) -> None:
        self.write_many({key: value})

    def write_many(self, values: Mapping[str, str]) -> None:
        try:
            for key, value in values.items():
                self._stage(key, value)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise StorageError(f"Failed to persist {', '.join(values)}") from exc

    def delete(self, key: str) -> None:
        try:
            db.session.query(StoredCollection).filter_by(key=key).delete()
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise StorageError(f"Failed to delete {key}") from exc

    def keys(self) -> list[str]:
        return [row.key for row in db.session.query(StoredCollection.key).order_by(StoredCollection.key.asc())]


def dump_collection(items: Iterable) -> str:
    return json.dumps([item.to_dict() for item in items], separators=(",", ":"))


def load_collection(store: KeyValueStore, key: str, factory: Callable[[dict], T]) -> list[T]:
    """
    Load and build a collection, failing open to [] on any problem.
    """
    raw = store.read(key)
    if raw is None:
        return []

    try:
        payload = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Stored collection %r is not valid JSON; starting empty", key)
        return []

    if not isinstance(payload, list):
        logger.warning("Stored collection %r is not a list; starting empty", key)
        return []

    try:
        return [factory(item) for item in payload]
    except (KeyError, TypeError, ValueError, AttributeError):
        logger.warning("Stored collection %r has malformed records; starting empty", key)
        return []


def load_mapping(store: KeyValueStore, key: str) -> dict:
    """Load a JSON object blob (used for id counters); {} on any problem."""
    raw = store.read(key)
    if raw is None:
        return {}
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Stored mapping %r is not valid JSON; starting empty", key)
        return {}
    return payload if isinstance(payload, dict) else {}


def dump_mapping(values: Mapping) -> str:
    return json.dumps(dict(values), separators=(",", ":"), sort_keys=True)
