"""Session-scoped tabular store.

The store owns one ``TableSnapshot`` at a time. Every change goes through
``replace`` so headers and records are always swapped together; the record
helpers read the current snapshot, build a new record list and hand it to
``replace``. Snapshots already handed out are never mutated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import RLock
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from hr_core.roles import identity_column
from hr_core.sample_data import Record, sample_records

logger = logging.getLogger(__name__)

Listener = Callable[["TableSnapshot"], None]


def headers_from_records(records: Sequence[Mapping[str, object]]) -> List[str]:
    if not records:
        return []
    return list(records[0].keys())


@dataclass(frozen=True)
class TableSnapshot:
    headers: Tuple[str, ...] = ()
    records: Tuple[Record, ...] = ()
    version: int = field(default=0, compare=False)

    @property
    def is_empty(self) -> bool:
        return not self.headers or not self.records

    @property
    def identity_column(self) -> Optional[str]:
        return identity_column(self.headers)

    def to_frame(self) -> pd.DataFrame:
        if not self.headers:
            return pd.DataFrame()
        rows = [[r.get(h, "") for h in self.headers] for r in self.records]
        return pd.DataFrame(rows, columns=list(self.headers))


def _same_identity(record: Mapping[str, object], key: Optional[str], value: object) -> bool:
    if key is None or key not in record:
        return False
    return str(record[key]) == str(value)


@dataclass(eq=False)
class TabularStore:
    initial_records: Optional[List[Record]] = None
    _lock: RLock = field(default_factory=RLock, init=False, repr=False)
    _listeners: List[Listener] = field(default_factory=list, init=False, repr=False)
    _snapshot: TableSnapshot = field(default_factory=TableSnapshot, init=False, repr=False)

    def __post_init__(self):
        records = self.initial_records if self.initial_records is not None else sample_records()
        self._defaults = [dict(r) for r in records]
        self._snapshot = TableSnapshot(
            headers=tuple(headers_from_records(self._defaults)),
            records=tuple(dict(r) for r in self._defaults),
            version=0,
        )

    # ---------------- Snapshot access ----------------
    def get_snapshot(self) -> TableSnapshot:
        with self._lock:
            return self._snapshot

    @property
    def headers(self) -> Tuple[str, ...]:
        return self.get_snapshot().headers

    @property
    def records(self) -> Tuple[Record, ...]:
        return self.get_snapshot().records

    def replace(self, records: Iterable[Mapping[str, object]], headers: Optional[Sequence[str]] = None) -> TableSnapshot:
        rows = [dict(r) for r in records]
        with self._lock:
            new_headers = list(headers) if headers is not None else headers_from_records(rows)
            snapshot = TableSnapshot(
                headers=tuple(new_headers),
                records=tuple(rows),
                version=self._snapshot.version + 1,
            )
            self._snapshot = snapshot
            listeners = list(self._listeners)
        logger.debug("Installed snapshot v%s (%s rows, %s columns)", snapshot.version, len(rows), len(new_headers))
        for listener in listeners:
            listener(snapshot)
        return snapshot

    def reset(self) -> TableSnapshot:
        logger.info("Resetting employee data to the bundled sample")
        return self.replace(self._defaults)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # ---------------- Record helpers ----------------
    def find_by_identity(self, value: object) -> Optional[Record]:
        snap = self.get_snapshot()
        key = snap.identity_column
        for record in snap.records:
            if _same_identity(record, key, value):
                return dict(record)
        return None

    def add_record(self, record: Mapping[str, object]) -> TableSnapshot:
        with self._lock:
            snap = self._snapshot
            return self.replace([dict(record), *snap.records], snap.headers or None)

    def update_by_identity(self, record: Mapping[str, object]) -> bool:
        with self._lock:
            snap = self._snapshot
            key = snap.identity_column
            value = record.get(key) if key else None
            if value is None:
                return False
            rows: List[Dict[str, object]] = []
            matched = False
            for existing in snap.records:
                if not matched and _same_identity(existing, key, value):
                    rows.append(dict(record))
                    matched = True
                else:
                    rows.append(existing)
            if matched:
                self.replace(rows, snap.headers)
            return matched

    def upsert_by_identity(self, record: Mapping[str, object]) -> TableSnapshot:
        with self._lock:
            if not self.update_by_identity(record):
                self.add_record(record)
            return self._snapshot

    def remove_by_identity(self, value: object) -> Optional[Record]:
        with self._lock:
            snap = self._snapshot
            key = snap.identity_column
            removed = [r for r in snap.records if _same_identity(r, key, value)]
            if not removed:
                return None
            kept = [r for r in snap.records if not _same_identity(r, key, value)]
            self.replace(kept, snap.headers)
            return dict(removed[0])
