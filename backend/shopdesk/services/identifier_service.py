# Overview: Sequential record id allocation (P001, S001, E001, C001) and payment ids.

"""
Identifier Service

Two strategies, selected by ID_STRATEGY:

- max_suffix (default): next id = prefix + zero-padded(1 + max numeric
  suffix among current records). Deleting the highest record lets the
  next add reuse its id. Kept as the documented behaviour.
- counter: a monotonic counter per prefix, persisted under the "counters"
  key in the same write as the collection. Ids are never reused.

Ids whose suffix is not all digits are ignored when computing the max.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable

from .storage_service import COUNTERS_KEY, KeyValueStore, dump_mapping, load_mapping
from shopdesk.time_utils import epoch_millis


ID_PAD = 3

STRATEGY_MAX_SUFFIX = "max_suffix"
STRATEGY_COUNTER = "counter"
STRATEGIES = (STRATEGY_MAX_SUFFIX, STRATEGY_COUNTER)


def parse_suffix(record_id: str, prefix: str) -> int | None:
    """Numeric part after a fixed-length prefix, or None if it is not numeric."""
    if not record_id.startswith(prefix):
        return None
    digits = record_id[len(prefix):]
    if not digits.isdigit():
        return None
    return int(digits)


def max_suffix(record_ids: Iterable[str], prefix: str) -> int:
    numbers = [n for n in (parse_suffix(rid, prefix) for rid in record_ids) if n is not None]
    return max(numbers, default=0)


def format_id(prefix: str, number: int) -> str:
    return f"{prefix}{number:0{ID_PAD}d}"


@dataclass
class Allocation:
    """An id plus the store writes that must accompany the record that uses it."""
    id: str
    writes: dict[str, str] = field(default_factory=dict)
    counters: dict[str, int] | None = None


class MaxSuffixAllocator:
    strategy = STRATEGY_MAX_SUFFIX

    def allocate(self, prefix: str, existing_ids: Iterable[str]) -> Allocation:
        return Allocation(id=format_id(prefix, max_suffix(existing_ids, prefix) + 1))

    def confirm(self, allocation: Allocation) -> None:
        pass

    def reload(self) -> None:
        pass


class CounterAllocator:
    strategy = STRATEGY_COUNTER

    def __init__(self, store: KeyValueStore):
        self._store = store
        self._counters: dict[str, int] = {}
        self.reload()

    def reload(self) -> None:
        counters = {}
        for prefix, value in load_mapping(self._store, COUNTERS_KEY).items():
            if isinstance(value, int) and not isinstance(value, bool):
                counters[str(prefix)] = value
        self._counters = counters

    def allocate(self, prefix: str, existing_ids: Iterable[str]) -> Allocation:
        number = max(self._counters.get(prefix, 0), max_suffix(existing_ids, prefix)) + 1
        counters = {**self._counters, prefix: number}
        return Allocation(
            id=format_id(prefix, number),
            writes={COUNTERS_KEY: dump_mapping(counters)},
            counters=counters,
        )

    def confirm(self, allocation: Allocation) -> None:
        if allocation.counters is not None:
            self._counters = allocation.counters


def make_allocator(strategy: str, store: KeyValueStore):
    if strategy == STRATEGY_MAX_SUFFIX:
        return MaxSuffixAllocator()
    if strategy == STRATEGY_COUNTER:
        return CounterAllocator(store)
    raise ValueError(f"Unknown id strategy: {strategy!r} (expected one of {', '.join(STRATEGIES)})")


def payment_id(clock: Callable[[], int] = epoch_millis) -> str:
    return f"PAY-{clock()}"
