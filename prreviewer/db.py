"""SQLite-backed storage and transaction handling."""

from __future__ import annotations

import os
import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterator

from .errors import ServiceError

_SCHEMA = """
CREATE TABLE IF NOT EXISTS teams (
    team_name  TEXT PRIMARY KEY,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS users (
    user_id    TEXT PRIMARY KEY,
    username   TEXT NOT NULL,
    team_name  TEXT NOT NULL REFERENCES teams (team_name),
    is_active  INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS pull_requests (
    pull_request_id   TEXT PRIMARY KEY,
    pull_request_name TEXT NOT NULL,
    author_id         TEXT NOT NULL REFERENCES users (user_id),
    status            TEXT NOT NULL CHECK (status IN ('OPEN', 'MERGED')),
    created_at        TEXT NOT NULL,
    merged_at         TEXT
);

CREATE TABLE IF NOT EXISTS pr_reviewers (
    pull_request_id TEXT NOT NULL REFERENCES pull_requests (pull_request_id) ON DELETE CASCADE,
    user_id         TEXT NOT NULL REFERENCES users (user_id),
    assigned_at     TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now')),
    PRIMARY KEY (pull_request_id, user_id)
);

CREATE INDEX IF NOT EXISTS idx_users_team_name ON users (team_name);
CREATE INDEX IF NOT EXISTS idx_pull_requests_author_id ON pull_requests (author_id);
CREATE INDEX IF NOT EXISTS idx_pr_reviewers_user_id ON pr_reviewers (user_id);
"""


class Database:
    """A single SQLite connection shared by the repositories."""

    def __init__(self, path: str | os.PathLike[str] = ":memory:") -> None:
        self.path = path
        self._conn = sqlite3.connect(path, isolation_level=None, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._lock = threading.RLock()
        self._closed = False

    def connection(self) -> sqlite3.Connection:
        """The connection to run statements on, inside or outside a transaction."""
        if self._closed:
            raise ServiceError("database is closed")
        return self._conn

    def init_schema(self) -> None:
        """Create the tables and indexes if they do not exist yet."""
        with self._lock:
            self.connection().executescript(_SCHEMA)

    def close(self) -> None:
        if not self._closed:
            self._conn.close()
            self._closed = True

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class TransactionManager:
    """Runs blocks of work atomically; nested blocks join the outer one."""

    def __init__(self, db: Database) -> None:
        self._db = db

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Commit when the block ends normally, roll back when it raises."""
        with self._db._lock:
            conn = self._db.connection()
            if conn.in_transaction:
                yield conn
                return
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")