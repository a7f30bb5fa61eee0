"""Request and response objects exchanged with the use cases."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta
from typing import Any, Iterable

from .entities import PullRequest, Team, User


def _format_time(moment: datetime) -> str:
    text = moment.isoformat()
    if moment.utcoffset() == timedelta(0) and text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


@dataclass
class CreatePRRequest:
    pull_request_id: str
    pull_request_name: str
    author_id: str


@dataclass
class ReassignReviewerRequest:
    pull_request_id: str
    old_user_id: str


@dataclass
class MergePRRequest:
    pull_request_id: str


@dataclass
class PullRequestDTO:
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: str
    assigned_reviewers: list[str]
    created_at: datetime
    merged_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready mapping; mergedAt is left out while unmerged."""
        data: dict[str, Any] = {
            "pull_request_id": self.pull_request_id,
            "pull_request_name": self.pull_request_name,
            "author_id": self.author_id,
            "status": self.status,
            "assigned_reviewers": list(self.assigned_reviewers),
            "createdAt": _format_time(self.created_at),
        }
        if self.merged_at is not None:
            data["mergedAt"] = _format_time(self.merged_at)
        return data


@dataclass
class PullRequestShortDTO:
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: str


@dataclass
class PRStatsDTO:
    total: int
    open: int
    merged: int


@dataclass
class UserStatsDTO:
    user_id: str
    total_reviews: int
    active_reviews: int


@dataclass
class StatisticsDTO:
    pr_stats: PRStatsDTO
    user_stats: list[UserStatsDTO] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready mapping; user_stats is left out when empty."""
        data: dict[str, Any] = {"pr_stats": asdict(self.pr_stats)}
        if self.user_stats:
            data["user_stats"] = [asdict(stat) for stat in self.user_stats]
        return data


@dataclass
class TeamMemberDTO:
    user_id: str
    username: str
    is_active: bool


@dataclass
class TeamDTO:
    team_name: str
    members: list[TeamMemberDTO]


@dataclass
class TeamMemberRequest:
    user_id: str
    username: str
    is_active: bool


@dataclass
class CreateTeamRequest:
    team_name: str
    members: list[TeamMemberRequest] = field(default_factory=list)


@dataclass
class DeactivateTeamMembersRequest:
    team_name: str


@dataclass
class UserDTO:
    user_id: str
    username: str
    team_name: str
    is_active: bool


@dataclass
class SetUserActiveRequest:
    user_id: str
    is_active: bool


def to_pull_request_dto(pr: PullRequest) -> PullRequestDTO:
    return PullRequestDTO(
        pull_request_id=pr.pr_id,
        pull_request_name=pr.name,
        author_id=pr.author_id,
        status=pr.status.value,
        assigned_reviewers=list(pr.assigned_reviewers),
        created_at=pr.created_at,
        merged_at=pr.merged_at,
    )


def to_pull_request_short_dto(pr: PullRequest) -> PullRequestShortDTO:
    return PullRequestShortDTO(
        pull_request_id=pr.pr_id,
        pull_request_name=pr.name,
        author_id=pr.author_id,
        status=pr.status.value,
    )


def to_pull_request_short_dtos(prs: Iterable[PullRequest]) -> list[PullRequestShortDTO]:
    return [to_pull_request_short_dto(pr) for pr in prs]


def to_user_dto(user: User) -> UserDTO:
    return UserDTO(
        user_id=user.user_id,
        username=user.username,
        team_name=user.team_name,
        is_active=user.is_active,
    )


def to_team_member_dto(user: User) -> TeamMemberDTO:
    return TeamMemberDTO(user_id=user.user_id, username=user.username, is_active=user.is_active)


def to_team_dto(team: Team, members: Iterable[User]) -> TeamDTO:
    return TeamDTO(team_name=team.name, members=[to_team_member_dto(user) for user in members])