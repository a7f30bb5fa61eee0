"""Storage of pull requests and their reviewer assignments."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import Iterable

from .db import Database
from .entities import PRStatus, PullRequest
from .errors import NotFoundError

_COLUMNS = "pull_request_id, pull_request_name, author_id, status, created_at, merged_at"


def _parse_time(value: str | None) -> datetime | None:
    return None if value is None else datetime.fromisoformat(value)


def _to_entity(row: sqlite3.Row, reviewers: list[str]) -> PullRequest:
    created_at = _parse_time(row["created_at"])
    assert created_at is not None
    return PullRequest(
        pr_id=row["pull_request_id"],
        name=row["pull_request_name"],
        author_id=row["author_id"],
        status=PRStatus(row["status"]),
        assigned_reviewers=reviewers,
        created_at=created_at,
        merged_at=_parse_time(row["merged_at"]),
    )


def _placeholders(count: int) -> str:
    return ", ".join("?" * count)


class PullRequestRepository:
    """Reads and writes pull requests, taking part in any open transaction."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def create(self, pr: PullRequest) -> None:
        self._db.connection().execute(
            f"INSERT INTO pull_requests ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
            (
                pr.pr_id,
                pr.name,
                pr.author_id,
                pr.status.value,
                pr.created_at.isoformat(),
                pr.merged_at.isoformat() if pr.merged_at is not None else None,
            ),
        )
        self._insert_reviewers(pr.pr_id, pr.assigned_reviewers)

    def find_by_id(self, pr_id: str) -> PullRequest:
        row = self._db.connection().execute(
            f"SELECT {_COLUMNS} FROM pull_requests WHERE pull_request_id = ?", (pr_id,)
        ).fetchone()
        if row is None:
            raise NotFoundError(f"pull request not found: {pr_id}")
        return _to_entity(row, self._find_reviewers(pr_id))

    def find_by_id_for_update(self, pr_id: str) -> PullRequest:
        """Load a pull request for modification; call inside a transaction."""
        return self.find_by_id(pr_id)

    def find_by_reviewer_id(self, reviewer_id: str) -> list[PullRequest]:
        rows = self._db.connection().execute(
            "SELECT DISTINCT pr.pull_request_id, pr.pull_request_name, pr.author_id,"
            " pr.status, pr.created_at, pr.merged_at"
            " FROM pull_requests pr"
            " INNER JOIN pr_reviewers prr ON pr.pull_request_id = prr.pull_request_id"
            " WHERE prr.user_id = ?"
            " ORDER BY pr.created_at DESC",
            (reviewer_id,),
        ).fetchall()
        return self._entities(rows)

    def find_by_author_id(self, author_id: str) -> list[PullRequest]:
        rows = self._db.connection().execute(
            f"SELECT {_COLUMNS} FROM pull_requests WHERE author_id = ? ORDER BY created_at DESC",
            (author_id,),
        ).fetchall()
        return self._entities(rows)

    def update(self, pr: PullRequest) -> None:
        conn = self._db.connection()
        cursor = conn.execute(
            "UPDATE pull_requests SET pull_request_name = ?, author_id = ?, status = ?,"
            " merged_at = ? WHERE pull_request_id = ?",
            (
                pr.name,
                pr.author_id,
                pr.status.value,
                pr.merged_at.isoformat() if pr.merged_at is not None else None,
                pr.pr_id,
            ),
        )
        if cursor.rowcount == 0:
            raise NotFoundError(f"pull request not found: {pr.pr_id}")
        conn.execute("DELETE FROM pr_reviewers WHERE pull_request_id = ?", (pr.pr_id,))
        self._insert_reviewers(pr.pr_id, pr.assigned_reviewers)

    def replace_reviewer(self, pr_id: str, old_reviewer_id: str, new_reviewer_id: str) -> None:
        """Swap one reviewer for another, keeping the assignment's position."""
        cursor = self._db.connection().execute(
            "UPDATE pr_reviewers SET user_id = ? WHERE pull_request_id = ? AND user_id = ?",
            (new_reviewer_id, pr_id, old_reviewer_id),
        )
        if cursor.rowcount == 0:
            raise NotFoundError(
                "reviewer not found or already replaced: "
                f"pr_id={pr_id}, old_reviewer_id={old_reviewer_id}"
            )

    def delete(self, pr_id: str) -> None:
        cursor = self._db.connection().execute(
            "DELETE FROM pull_requests WHERE pull_request_id = ?", (pr_id,)
        )
        if cursor.rowcount == 0:
            raise NotFoundError(f"pull request not found: {pr_id}")

    def merge_pr(self, pr_id: str) -> None:
        """Atomically move an open pull request to MERGED.

        Raises NotFoundError when no open pull request has this id, which
        includes one that is already merged.
        """
        cursor = self._db.connection().execute(
            "UPDATE pull_requests SET status = ?, merged_at = ?"
            " WHERE pull_request_id = ? AND status = ?",
            (
                PRStatus.MERGED.value,
                datetime.now(timezone.utc).isoformat(),
                pr_id,
                PRStatus.OPEN.value,
            ),
        )
        if cursor.rowcount == 0:
            raise NotFoundError(f"open pull request not found: {pr_id}")

    def exists(self, pr_id: str) -> bool:
        row = self._db.connection().execute(
            "SELECT EXISTS(SELECT 1 FROM pull_requests WHERE pull_request_id = ?)", (pr_id,)
        ).fetchone()
        return bool(row[0])

    def count_active_reviews_by_user_ids(self, user_ids: Iterable[str]) -> dict[str, int]:
        """Number of OPEN pull requests each user reviews; absent users count 0."""
        ids = list(user_ids)
        if not ids:
            return {}
        rows = self._db.connection().execute(
            "SELECT prr.user_id, COUNT(DISTINCT prr.pull_request_id)"
            " FROM pr_reviewers prr"
            " INNER JOIN pull_requests p ON prr.pull_request_id = p.pull_request_id"
            f" WHERE prr.user_id IN ({_placeholders(len(ids))}) AND p.status = ?"
            " GROUP BY prr.user_id",
            (*ids, PRStatus.OPEN.value),
        )
        result = dict.fromkeys(ids, 0)
        result.update((user_id, count) for user_id, count in rows)
        return result

    def get_stats(self) -> tuple[int, int, int]:
        """Total, open and merged pull request counts."""
        row = self._db.connection().execute(
            "SELECT COUNT(*),"
            " COUNT(CASE WHEN status = ? THEN 1 END),"
            " COUNT(CASE WHEN status = ? THEN 1 END)"
            " FROM pull_requests",
            (PRStatus.OPEN.value, PRStatus.MERGED.value),
        ).fetchone()
        return row[0], row[1], row[2]

    def count_reviews_by_user_ids(self, user_ids: Iterable[str]) -> dict[str, int]:
        """Number of pull requests of any status each user reviews."""
        ids = list(user_ids)
        if not ids:
            return {}
        rows = self._db.connection().execute(
            "SELECT user_id, COUNT(DISTINCT pull_request_id) FROM pr_reviewers"
            f" WHERE user_id IN ({_placeholders(len(ids))}) GROUP BY user_id",
            ids,
        )
        result = dict.fromkeys(ids, 0)
        result.update((user_id, count) for user_id, count in rows)
        return result

    def _entities(self, rows: list[sqlite3.Row]) -> list[PullRequest]:
        return [_to_entity(row, self._find_reviewers(row["pull_request_id"])) for row in rows]

    def _find_reviewers(self, pr_id: str) -> list[str]:
        rows = self._db.connection().execute(
            "SELECT user_id FROM pr_reviewers WHERE pull_request_id = ?"
            " ORDER BY assigned_at, rowid",
            (pr_id,),
        )
        return [row["user_id"] for row in rows]

    def _insert_reviewers(self, pr_id: str, reviewers: Iterable[str]) -> None:
        pairs = [(pr_id, reviewer) for reviewer in reviewers]
        if pairs:
            self._db.connection().executemany(
                "INSERT INTO pr_reviewers (pull_request_id, user_id) VALUES (?, ?)", pairs
            )