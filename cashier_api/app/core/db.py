"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), a write transaction scope (``unit_of_work``) and
applying migrations on application start (``init_db``).  The
``datasets`` table is the document store: each row is a named JSON
blob owned by an organisation.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .config import settings


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the project root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # cashier_api/
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  Foreign key enforcement is enabled per connection.
    """
    conn = sqlite3.connect(get_database_path(), timeout=settings.database_timeout)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit."""
    conn = get_connection()
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


@contextmanager
def unit_of_work() -> Iterator[sqlite3.Connection]:
    """Open a write transaction spanning every statement in the block.

    ``BEGIN IMMEDIATE`` takes the database write lock up front, so two
    read‑modify‑write cycles can never interleave: the second caller
    waits (up to ``settings.database_timeout``) until the first one has
    committed and then reads the committed blob.  All changes made in
    the block are committed together, or rolled back together if the
    block raises.
    """
    conn = get_connection()
    # Manage the transaction explicitly instead of relying on the
    # module's implicit BEGIN before DML statements.
    conn.isolation_level = None
    try:
        conn.execute("BEGIN IMMEDIATE")
        yield conn
        conn.execute("COMMIT")
    except Exception:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        raise
    finally:
        conn.close()


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations.  If you add
    a new migration, append it with an incremented version number.
    """
    migrations: list[tuple[int, str]] = [
        # Migration 1: organisations, users and the dataset store
        (
            1,
            """
            CREATE TABLE IF NOT EXISTS organisations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                document_id TEXT NOT NULL UNIQUE,
                name TEXT NOT NULL UNIQUE,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );

            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                email TEXT NOT NULL UNIQUE,
                full_name TEXT,
                password TEXT,
                organisation_id INTEGER,
                disabled INTEGER DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY(organisation_id) REFERENCES organisations(id)
            );

            -- One row per (organisation, purpose).  The UNIQUE name makes
            -- lazy creation idempotent under concurrent first access.
            CREATE TABLE IF NOT EXISTS datasets (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                document_id TEXT NOT NULL UNIQUE,
                name TEXT NOT NULL UNIQUE,
                organisation_id INTEGER NOT NULL,
                data TEXT NOT NULL DEFAULT '{}',
                version INTEGER NOT NULL DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY(organisation_id) REFERENCES organisations(id)
            );
            """,
        ),
        # Migration 2: lookup indices
        (
            2,
            """
            CREATE INDEX IF NOT EXISTS idx_users_organisation_id ON users(organisation_id);
            CREATE INDEX IF NOT EXISTS idx_datasets_organisation_id ON datasets(organisation_id);
            """,
        ),
    ]

    with get_cursor() as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in migrations:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
