"""Storage of users."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone

from .db import Database
from .entities import User
from .errors import NotFoundError

_COLUMNS = "user_id, username, team_name, is_active, created_at, updated_at"


def _to_entity(row: sqlite3.Row) -> User:
    return User(
        user_id=row["user_id"],
        username=row["username"],
        team_name=row["team_name"],
        is_active=bool(row["is_active"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


class UserRepository:
    """Reads and writes users, taking part in any open transaction."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def create(self, user: User) -> None:
        self._db.connection().execute(
            f"INSERT INTO users ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
            (
                user.user_id,
                user.username,
                user.team_name,
                int(user.is_active),
                user.created_at.isoformat(),
                user.updated_at.isoformat(),
            ),
        )

    def find_by_id(self, user_id: str) -> User:
        row = self._db.connection().execute(
            f"SELECT {_COLUMNS} FROM users WHERE user_id = ?", (user_id,)
        ).fetchone()
        if row is None:
            raise NotFoundError(f"user not found: {user_id}")
        return _to_entity(row)

    def find_by_team_name(self, team_name: str) -> list[User]:
        rows = self._db.connection().execute(
            f"SELECT {_COLUMNS} FROM users WHERE team_name = ? ORDER BY username",
            (team_name,),
        )
        return [_to_entity(row) for row in rows]

    def find_active_by_team_name(self, team_name: str) -> list[User]:
        rows = self._db.connection().execute(
            f"SELECT {_COLUMNS} FROM users WHERE team_name = ? AND is_active = 1 ORDER BY username",
            (team_name,),
        )
        return [_to_entity(row) for row in rows]

    def update(self, user: User) -> None:
        cursor = self._db.connection().execute(
            "UPDATE users SET username = ?, team_name = ?, is_active = ?, updated_at = ?"
            " WHERE user_id = ?",
            (
                user.username,
                user.team_name,
                int(user.is_active),
                user.updated_at.isoformat(),
                user.user_id,
            ),
        )
        if cursor.rowcount == 0:
            raise NotFoundError(f"user not found: {user.user_id}")

    def batch_deactivate_by_team_name(self, team_name: str) -> int:
        """Deactivate every active member of a team; returns how many changed."""
        cursor = self._db.connection().execute(
            "UPDATE users SET is_active = 0, updated_at = ? WHERE team_name = ? AND is_active = 1",
            (datetime.now(timezone.utc).isoformat(), team_name),
        )
        return cursor.rowcount

    def delete(self, user_id: str) -> None:
        cursor = self._db.connection().execute("DELETE FROM users WHERE user_id = ?", (user_id,))
        if cursor.rowcount == 0:
            raise NotFoundError(f"user not found: {user_id}")

    def exists(self, user_id: str) -> bool:
        row = self._db.connection().execute(
            "SELECT EXISTS(SELECT 1 FROM users WHERE user_id = ?)", (user_id,)
        ).fetchone()
        return bool(row[0])