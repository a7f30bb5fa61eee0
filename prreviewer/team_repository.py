"""Storage of teams."""

from __future__ import annotations

import sqlite3
from datetime import datetime

from .db import Database
from .entities import Team
from .errors import NotFoundError


def _to_entity(row: sqlite3.Row) -> Team:
    return Team(
        name=row["team_name"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


class TeamRepository:
    """Reads and writes teams, taking part in any open transaction."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def create(self, team: Team) -> None:
        self._db.connection().execute(
            "INSERT INTO teams (team_name, created_at, updated_at) VALUES (?, ?, ?)",
            (team.name, team.created_at.isoformat(), team.updated_at.isoformat()),
        )

    def find_by_name(self, name: str) -> Team:
        row = self._db.connection().execute(
            "SELECT team_name, created_at, updated_at FROM teams WHERE team_name = ?",
            (name,),
        ).fetchone()
        if row is None:
            raise NotFoundError(f"team not found: {name}")
        return _to_entity(row)

    def update(self, team: Team) -> None:
        cursor = self._db.connection().execute(
            "UPDATE teams SET updated_at = ? WHERE team_name = ?",
            (team.updated_at.isoformat(), team.name),
        )
        if cursor.rowcount == 0:
            raise NotFoundError(f"team not found: {team.name}")

    def delete(self, name: str) -> None:
        cursor = self._db.connection().execute("DELETE FROM teams WHERE team_name = ?", (name,))
        if cursor.rowcount == 0:
            raise NotFoundError(f"team not found: {name}")

    def exists(self, name: str) -> bool:
        row = self._db.connection().execute(
            "SELECT EXISTS(SELECT 1 FROM teams WHERE team_name = ?)", (name,)
        ).fetchone()
        return bool(row[0])