import sqlite3
from datetime import datetime, timezone

import pytest

from prreviewer.db import Database, TransactionManager
from prreviewer.entities import Team, User
from prreviewer.errors import NotFoundError
from prreviewer.team_repository import TeamRepository
from prreviewer.user_repository import UserRepository

CREATED = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.fixture
def db():
    database = Database()
    database.init_schema()
    yield database
    database.close()


@pytest.fixture
def repo(db):
    return TeamRepository(db)


def test_create_and_find_round_trip(repo):
    team = Team("team-1", created_at=CREATED, updated_at=CREATED)
    repo.create(team)
    assert repo.find_by_name("team-1") == team


def test_find_missing_raises_not_found(repo):
    with pytest.raises(NotFoundError):
        repo.find_by_name("nonexistent")


def test_create_duplicate_raises(repo):
    repo.create(Team("team-1"))
    with pytest.raises(sqlite3.IntegrityError):
        repo.create(Team("team-1"))


def test_exists(repo):
    assert repo.exists("team-1") is False
    repo.create(Team("team-1"))
    assert repo.exists("team-1") is True


def test_update_changes_updated_at_only(repo):
    repo.create(Team("team-1", created_at=CREATED, updated_at=CREATED))
    later = datetime(2025, 6, 7, 8, 9, 10, tzinfo=timezone.utc)
    repo.update(Team("team-1", created_at=later, updated_at=later))
    stored = repo.find_by_name("team-1")
    assert stored.updated_at == later
    assert stored.created_at == CREATED


def test_update_missing_raises_not_found(repo):
    with pytest.raises(NotFoundError):
        repo.update(Team("ghost"))


def test_delete(repo):
    repo.create(Team("team-1"))
    repo.delete("team-1")
    assert repo.exists("team-1") is False


def test_delete_missing_raises_not_found(repo):
    with pytest.raises(NotFoundError):
        repo.delete("ghost")


def test_delete_team_with_members_is_refused(db, repo):
    repo.create(Team("team-1"))
    UserRepository(db).create(User("user-1", "User 1", "team-1"))
    with pytest.raises(sqlite3.IntegrityError):
        repo.delete("team-1")
    assert repo.exists("team-1") is True


def test_create_in_committed_transaction_is_kept(db, repo):
    tx = TransactionManager(db)
    with tx.transaction():
        repo.create(Team("team-1"))
        UserRepository(db).create(User("user-1", "User 1", "team-1"))
    assert repo.exists("team-1") is True
    assert UserRepository(db).exists("user-1") is True


def test_create_in_rolled_back_transaction_is_discarded(db, repo):
    tx = TransactionManager(db)
    with pytest.raises(sqlite3.IntegrityError):
        with tx.transaction():
            repo.create(Team("team-1"))
            repo.create(Team("team-1"))
    assert repo.exists("team-1") is False