"""Domain entities: users, teams and pull requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

MAX_REVIEWERS_COUNT = 2


def _now() -> datetime:
    return datetime.now(timezone.utc)


class PRStatus(str, Enum):
    """Lifecycle state of a pull request."""

    OPEN = "OPEN"
    MERGED = "MERGED"


@dataclass
class User:
    """A team member who can author and review pull requests."""

    user_id: str
    username: str
    team_name: str
    is_active: bool = True
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValueError("user id is required")
        if not self.team_name:
            raise ValueError("team name is required")

    def activate(self) -> None:
        self.is_active = True
        self.updated_at = _now()

    def deactivate(self) -> None:
        self.is_active = False
        self.updated_at = _now()

    def change_team(self, team_name: str) -> None:
        if not team_name:
            raise ValueError("team name is required")
        self.team_name = team_name
        self.updated_at = _now()


@dataclass
class Team:
    """A named group of users."""

    name: str
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("team name is required")


@dataclass
class PullRequest:
    """A pull request with its assigned reviewers."""

    pr_id: str
    name: str
    author_id: str
    status: PRStatus = PRStatus.OPEN
    assigned_reviewers: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_now)
    merged_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.pr_id:
            raise ValueError("pull request id is required")
        if not self.name:
            raise ValueError("pull request name is required")
        if not self.author_id:
            raise ValueError("author id is required")
        self.status = PRStatus(self.status)
        self.assigned_reviewers = list(self.assigned_reviewers)

    @property
    def is_merged(self) -> bool:
        return self.status is PRStatus.MERGED

    def add_reviewer(self, reviewer_id: str) -> None:
        if self.is_merged:
            raise ValueError("cannot change reviewers of a merged pull request")
        if not reviewer_id:
            raise ValueError("reviewer id is required")
        if reviewer_id == self.author_id:
            raise ValueError("author cannot review own pull request")
        if reviewer_id in self.assigned_reviewers:
            raise ValueError(f"reviewer {reviewer_id} is already assigned")
        if len(self.assigned_reviewers) >= MAX_REVIEWERS_COUNT:
            raise ValueError(f"at most {MAX_REVIEWERS_COUNT} reviewers can be assigned")
        self.assigned_reviewers.append(reviewer_id)

    def replace_reviewer(self, old_reviewer_id: str, new_reviewer_id: str) -> None:
        if self.is_merged:
            raise ValueError("cannot change reviewers of a merged pull request")
        if old_reviewer_id not in self.assigned_reviewers:
            raise ValueError(f"reviewer {old_reviewer_id} is not assigned")
        if not new_reviewer_id:
            raise ValueError("reviewer id is required")
        if new_reviewer_id == self.author_id:
            raise ValueError("author cannot review own pull request")
        if new_reviewer_id in self.assigned_reviewers:
            raise ValueError(f"reviewer {new_reviewer_id} is already assigned")
        position = self.assigned_reviewers.index(old_reviewer_id)
        self.assigned_reviewers[position] = new_reviewer_id

    def merge(self) -> None:
        """Mark the pull request merged; merging twice changes nothing."""
        if self.is_merged:
            return
        self.status = PRStatus.MERGED
        self.merged_at = _now()