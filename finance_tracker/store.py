"""Record store: the read/write contract and a bundled SQLite implementation.

The calculations never touch storage.  :func:`finance_tracker.snapshot.load_month_snapshot`
queries a :class:`RecordStore` once per month and hands the records over.

Writes report failure as ``None`` (create) or ``False`` (update/delete).
The cause is logged but not returned, nothing is retried, and callers
should treat a failed write as "record unchanged".  A failed query raises
:class:`RecordStoreError` since there is no meaningful list to return.

Every read and write is scoped to one ``user_id``; a record owned by
another user behaves as if it did not exist.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import fields, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Protocol, Union

from . import config
from .models import (
    EntityKind,
    Record,
    RecordValidationError,
    record_from_row,
    record_to_row,
    validate_record,
)
from .periods import DateRange

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;
PRAGMA synchronous=NORMAL;

CREATE TABLE IF NOT EXISTS income (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    date TEXT NOT NULL,
    source TEXT,
    amount REAL NOT NULL,
    account TEXT,
    notes TEXT,
    created_at TEXT
);

CREATE TABLE IF NOT EXISTS expenses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    date TEXT NOT NULL,
    category TEXT NOT NULL,
    sub_category TEXT,
    amount REAL NOT NULL,
    payment_method TEXT,
    note TEXT,
    created_at TEXT
);

CREATE TABLE IF NOT EXISTS emi_loans (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    loan_type TEXT,
    total_amount REAL NOT NULL,
    interest_rate_pct REAL,
    emi_amount REAL NOT NULL,
    start_date TEXT,
    end_date TEXT,
    remaining_months INTEGER,
    outstanding_principal REAL,
    created_at TEXT
);

CREATE TABLE IF NOT EXISTS mutual_funds (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    fund_name TEXT,
    fund_type TEXT,
    sip_amount REAL DEFAULT 0,
    sip_day_of_month INTEGER,
    lumpsum_amount REAL DEFAULT 0,
    invested_amount REAL NOT NULL,
    current_value REAL NOT NULL,
    updated_at TEXT,
    created_at TEXT
);

CREATE TABLE IF NOT EXISTS goals (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    goal_name TEXT,
    target_amount REAL NOT NULL,
    target_date TEXT,
    monthly_contribution REAL DEFAULT 0,
    current_saved REAL DEFAULT 0,
    created_at TEXT
);

CREATE INDEX IF NOT EXISTS ix_income_user_date ON income (user_id, date);
CREATE INDEX IF NOT EXISTS ix_expenses_user_date ON expenses (user_id, date);
"""

# Columns a caller may never set through update()
_PROTECTED_COLUMNS = {'id', 'user_id', 'created_at'}


class RecordStoreError(RuntimeError):
    """Raised when records cannot be read from the store."""


class RecordStore(Protocol):
    def query(
        self,
        kind: EntityKind,
        user_id: str,
        date_range: Optional[DateRange] = None,
    ) -> List[Record]:
        ...

    def create(self, kind: EntityKind, record: Record) -> Optional[Record]:
        ...

    def update(self, kind: EntityKind, user_id: str, record_id: int, changes: Mapping[str, Any]) -> bool:
        ...

    def delete(self, kind: EntityKind, user_id: str, record_id: int) -> bool:
        ...


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SQLiteRecordStore:
    """:class:`RecordStore` backed by a local SQLite file."""

    def __init__(self, db_path: Optional[Union[str, Path]] = None):
        self.db_path = Path(db_path) if db_path else config.DB_PATH

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def init_db(self) -> None:
        with self.connect() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()
        logger.info("Record store initialized at %s", self.db_path)

    def query(
        self,
        kind: EntityKind,
        user_id: str,
        date_range: Optional[DateRange] = None,
    ) -> List[Record]:
        """Fetch a user's records of ``kind``, newest first.

        ``date_range`` only applies to income and expenses; loans, funds
        and goals are not tied to a month.
        """
        kind = EntityKind(kind)
        where = ["user_id = ?"]
        params: List[Any] = [user_id]
        if kind.period_scoped:
            if date_range is not None:
                where.append("date >= ? AND date <= ?")
                params.extend([date_range.start.isoformat(), date_range.end.isoformat()])
            order = "date DESC, id DESC"
        else:
            order = "created_at DESC, id DESC"

        sql = f"SELECT * FROM {kind.value} WHERE {' AND '.join(where)} ORDER BY {order}"
        try:
            with self.connect() as conn:
                rows = conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            logger.error("Failed to query %s for user %s: %s", kind.value, user_id, e)
            raise RecordStoreError(f"Failed to query {kind.value}") from e
        logger.debug("Retrieved %d rows from %s", len(rows), kind.value)
        return [record_from_row(kind, dict(row)) for row in rows]

    def create(self, kind: EntityKind, record: Record) -> Optional[Record]:
        """Insert ``record`` and return it with its new id, or ``None``."""
        kind = EntityKind(kind)
        if not isinstance(record, kind.record_type):
            logger.error("Cannot store %s in %s", type(record).__name__, kind.value)
            return None
        try:
            validate_record(record)
        except RecordValidationError as e:
            logger.warning("Rejected new %s record: %s", kind.value, e)
            return None

        stamped = replace(record, created_at=record.created_at or _now_iso())
        if kind is EntityKind.FUND:
            stamped = replace(stamped, updated_at=_now_iso())
        row = record_to_row(stamped)
        row.pop('id', None)
        columns = list(row.keys())
        sql = (
            f"INSERT INTO {kind.value} ({', '.join(columns)}) "
            f"VALUES ({', '.join('?' for _ in columns)})"
        )
        try:
            with self.connect() as conn:
                cursor = conn.execute(sql, [row[c] for c in columns])
                conn.commit()
                new_id = cursor.lastrowid
        except sqlite3.Error as e:
            logger.error("Failed to add %s record: %s", kind.value, e)
            return None
        logger.info("Added %s record %s for user %s", kind.value, new_id, record.user_id)
        return replace(stamped, id=new_id)

    def get(self, kind: EntityKind, user_id: str, record_id: int) -> Optional[Record]:
        """One of ``user_id``'s records, or ``None`` if it does not exist."""
        kind = EntityKind(kind)
        try:
            with self.connect() as conn:
                row = conn.execute(
                    f"SELECT * FROM {kind.value} WHERE id = ? AND user_id = ?",
                    (record_id, user_id),
                ).fetchone()
        except sqlite3.Error as e:
            logger.error("Failed to read %s %s: %s", kind.value, record_id, e)
            return None
        return record_from_row(kind, dict(row)) if row else None

    def update(
        self,
        kind: EntityKind,
        user_id: str,
        record_id: int,
        changes: Mapping[str, Any],
    ) -> bool:
        """Apply ``changes`` to one of ``user_id``'s loans, funds or goals.

        Income and expense entries are append/delete-only, so updating
        them always fails.  The merged record must still pass validation.
        """
        kind = EntityKind(kind)
        if not kind.updatable:
            logger.warning("%s records cannot be updated, only added or deleted", kind.value)
            return False

        allowed = {f.name for f in fields(kind.record_type)} - _PROTECTED_COLUMNS
        unknown = set(changes) - allowed
        if unknown or not changes:
            logger.error("Invalid update for %s %s: %s", kind.value, record_id, sorted(unknown) or "no changes")
            return False

        current = self.get(kind, user_id, record_id)
        if current is None:
            logger.warning("%s %s not found for user %s", kind.value, record_id, user_id)
            return False

        try:
            merged = record_from_row(kind, {**record_to_row(current), **changes})
        except (TypeError, ValueError) as e:
            logger.warning("Rejected update of %s %s: %s", kind.value, record_id, e)
            return False
        if kind is EntityKind.FUND:
            merged = replace(merged, updated_at=_now_iso())
        try:
            validate_record(merged)
        except RecordValidationError as e:
            logger.warning("Rejected update of %s %s: %s", kind.value, record_id, e)
            return False

        row = record_to_row(merged)
        columns = [c for c in row if c not in _PROTECTED_COLUMNS]
        sql = (
            f"UPDATE {kind.value} SET {', '.join(f'{c} = ?' for c in columns)} "
            "WHERE id = ? AND user_id = ?"
        )
        try:
            with self.connect() as conn:
                cursor = conn.execute(sql, [row[c] for c in columns] + [record_id, user_id])
                conn.commit()
                updated = cursor.rowcount > 0
        except sqlite3.Error as e:
            logger.error("Failed to update %s %s: %s", kind.value, record_id, e)
            return False
        if updated:
            logger.info("Updated %s %s", kind.value, record_id)
        return updated

    def delete(self, kind: EntityKind, user_id: str, record_id: int) -> bool:
        kind = EntityKind(kind)
        try:
            with self.connect() as conn:
                cursor = conn.execute(
                    f"DELETE FROM {kind.value} WHERE id = ? AND user_id = ?",
                    (record_id, user_id),
                )
                conn.commit()
                deleted = cursor.rowcount > 0
        except sqlite3.Error as e:
            logger.error("Failed to delete %s %s: %s", kind.value, record_id, e)
            return False
        if deleted:
            logger.info("Deleted %s %s", kind.value, record_id)
        else:
            logger.warning("%s %s not found for user %s", kind.value, record_id, user_id)
        return deleted


def init_db(db_path: Optional[Union[str, Path]] = None) -> SQLiteRecordStore:
    """Create the schema (idempotently) and return a store for it."""
    if db_path is None:
        config.ensure_data_directories()
    store = SQLiteRecordStore(db_path)
    store.init_db()
    return store


def row_counts(store: SQLiteRecordStore, user_id: str) -> Dict[str, int]:
    """Number of stored records per kind for one user."""
    counts: Dict[str, int] = {}
    with store.connect() as conn:
        for kind in EntityKind:
            row = conn.execute(f"SELECT COUNT(*) FROM {kind.value} WHERE user_id = ?", (user_id,)).fetchone()
            counts[kind.value] = int(row[0])
    return counts
