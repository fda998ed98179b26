"""
SQLite‑backed record store and simple migration system.

``DocumentStore`` persists two record kinds, users and announcements,
and queries them by field equality.  Records travel as plain dicts keyed
by snake_case field names; the store assigns each new record an opaque
id and fills in per‑kind defaults.  Every operation opens its own
connection, so one store instance can be shared by concurrent requests.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.  Any
``sqlite3`` failure is re‑raised as ``StoreError``.
"""

import logging
import os
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .config import settings
from .errors import StoreError

logger = logging.getLogger(__name__)

USER = "user"
ANNOUNCEMENT = "announcement"


def utc_timestamp() -> str:
    """Current UTC time as a fixed‑width ISO string, so text order is time order."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


@dataclass(frozen=True)
class Collection:
    """Table layout and creation defaults for one record kind."""

    table: str
    fields: Tuple[str, ...]
    defaults: Dict[str, Callable[[], Any]] = field(default_factory=dict)


COLLECTIONS: Dict[str, Collection] = {
    USER: Collection(
        table="users",
        fields=("name", "email", "password", "subscription_status", "stripe_customer_id", "role"),
        defaults={
            "subscription_status": lambda: "inactive",
            "role": lambda: "user",
        },
    ),
    ANNOUNCEMENT: Collection(
        table="announcements",
        fields=("title", "message", "created_at"),
        defaults={"created_at": utc_timestamp},
    ),
}

MIGRATIONS: List[Tuple[int, str]] = [
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            name TEXT,
            email TEXT,
            password TEXT,
            subscription_status TEXT NOT NULL DEFAULT 'inactive',
            stripe_customer_id TEXT,
            role TEXT NOT NULL DEFAULT 'user'
        );

        CREATE TABLE IF NOT EXISTS announcements (
            id TEXT PRIMARY KEY,
            title TEXT,
            message TEXT,
            created_at TEXT NOT NULL
        );
        """,
    ),
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_users_email ON users(email);
        CREATE INDEX IF NOT EXISTS idx_announcements_created_at ON announcements(created_at);
        """,
    ),
]


def resolve_database_path(db_url: str) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths are returned as is; relative paths are resolved
    against the project root.  Each operation opens a new connection, so
    ``:memory:`` databases are not supported.
    """
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


class DocumentStore:
    """Insert and query user and announcement records."""

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = resolve_database_path(path or settings.database_url)
        self._migrated = False
        self._migrate_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Connection handling
    # ------------------------------------------------------------------

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor, commit on success and always close the connection."""
        if not self._migrated:
            self.init_db()
        try:
            conn = self._connect()
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc
        try:
            yield conn.cursor()
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StoreError(str(exc)) from exc
        finally:
            conn.close()

    def init_db(self) -> None:
        """Create the database file if needed and apply pending migrations.

        Serialised per instance; the version row is written with
        ``INSERT OR IGNORE`` so another process applying the same
        migration does not fail this one.
        """
        with self._migrate_lock:
            self._apply_migrations()

    def _apply_migrations(self) -> None:
        try:
            conn = self._connect()
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc
        try:
            cursor = conn.cursor()
            cursor.execute(
                "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY, applied_at TEXT NOT NULL)"
            )
            row = cursor.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
            current = row["version"] or 0
            for version, script in MIGRATIONS:
                if version <= current:
                    continue
                cursor.executescript(script)
                cursor.execute(
                    "INSERT OR IGNORE INTO migrations (version, applied_at) VALUES (?, ?)",
                    (version, utc_timestamp()),
                )
                conn.commit()
                logger.info("Applied database migration %s", version)
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc
        finally:
            conn.close()
        self._migrated = True

    def ping(self) -> None:
        """Open the database and make sure the schema is current."""
        self.init_db()
        with self._cursor() as cursor:
            cursor.execute("SELECT 1")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @staticmethod
    def _collection(kind: str) -> Collection:
        try:
            return COLLECTIONS[kind]
        except KeyError:
            raise StoreError(f"Unknown record kind: {kind}") from None

    @staticmethod
    def _check_fields(collection: Collection, names) -> None:
        for name in names:
            if name != "id" and name not in collection.fields:
                raise StoreError(f"Unknown field for {collection.table}: {name}")

    def _where(self, collection: Collection, predicate: Dict[str, Any]) -> Tuple[str, list]:
        self._check_fields(collection, predicate)
        if not predicate:
            return "", []
        clauses = []
        params: list = []
        for name, value in predicate.items():
            # ``=`` never matches NULL in SQL; equality on a missing value
            # has to match records where the field is missing too.
            if value is None:
                clauses.append(f"{name} IS NULL")
            else:
                clauses.append(f"{name} = ?")
                params.append(value)
        return " WHERE " + " AND ".join(clauses), params

    def insert(self, kind: str, record: Dict[str, Any]) -> str:
        """Store a new record and return its generated id."""
        collection = self._collection(kind)
        self._check_fields(collection, record)
        values = {name: record.get(name) for name in collection.fields}
        for name, default in collection.defaults.items():
            if values.get(name) is None:
                values[name] = default()
        record_id = uuid.uuid4().hex
        columns = ("id",) + collection.fields
        placeholders = ", ".join("?" for _ in columns)
        with self._cursor() as cursor:
            cursor.execute(
                f"INSERT INTO {collection.table} ({', '.join(columns)}) VALUES ({placeholders})",
                (record_id, *(values[name] for name in collection.fields)),
            )
        return record_id

    def find_one(self, kind: str, **predicate: Any) -> Optional[Dict[str, Any]]:
        """Return the first record matching every field in ``predicate``."""
        collection = self._collection(kind)
        where, params = self._where(collection, predicate)
        with self._cursor() as cursor:
            row = cursor.execute(
                f"SELECT * FROM {collection.table}{where} ORDER BY rowid LIMIT 1",
                params,
            ).fetchone()
        return dict(row) if row else None

    def find_by_id(self, kind: str, record_id: Optional[str]) -> Optional[Dict[str, Any]]:
        if record_id is None:
            return None
        return self.find_one(kind, id=str(record_id))

    def find_all(
        self,
        kind: str,
        sort: Optional[Tuple[str, str]] = None,
        **predicate: Any,
    ) -> List[Dict[str, Any]]:
        """Return every matching record.

        ``sort`` is a ``(field, direction)`` pair with direction ``"asc"``
        or ``"desc"``.  Without it records come back in insertion order.
        """
        collection = self._collection(kind)
        where, params = self._where(collection, predicate)
        order = " ORDER BY rowid"
        if sort is not None:
            sort_field, direction = sort
            self._check_fields(collection, [sort_field])
            direction = direction.upper()
            if direction not in ("ASC", "DESC"):
                raise StoreError(f"Invalid sort direction: {sort[1]}")
            order = f" ORDER BY {sort_field} {direction}, rowid {direction}"
        with self._cursor() as cursor:
            rows = cursor.execute(f"SELECT * FROM {collection.table}{where}{order}", params).fetchall()
        return [dict(row) for row in rows]

    def save(self, kind: str, record: Dict[str, Any]) -> None:
        """Overwrite the stored record that has ``record["id"]``."""
        collection = self._collection(kind)
        self._check_fields(collection, record)
        if not record.get("id"):
            raise StoreError("Cannot save a record without an id")
        assignments = ", ".join(f"{name} = ?" for name in collection.fields)
        with self._cursor() as cursor:
            cursor.execute(
                f"UPDATE {collection.table} SET {assignments} WHERE id = ?",
                (*(record.get(name) for name in collection.fields), record["id"]),
            )
            if cursor.rowcount == 0:
                raise StoreError(f"No {kind} record with id {record['id']}")
