"""Creating teams, reading them and deactivating their members."""

from __future__ import annotations

from .db import TransactionManager
from .dto import CreateTeamRequest, TeamDTO, TeamMemberRequest, to_team_dto
from .entities import Team, User
from .errors import NotFoundError, TeamAlreadyExistsError, TeamNotFoundError
from .logger import Logger
from .team_repository import TeamRepository
from .user_repository import UserRepository


class TeamUseCase:
    """Team operations; member changes happen in one transaction."""

    def __init__(
        self,
        tx_manager: TransactionManager,
        team_repo: TeamRepository,
        user_repo: UserRepository,
        logger: Logger,
    ) -> None:
        self._tx_manager = tx_manager
        self._team_repo = team_repo
        self._user_repo = user_repo
        self._logger = logger

    def create_team(self, req: CreateTeamRequest) -> TeamDTO:
        """Create a team and create or move its members into it."""
        self._logger.info(
            "Creating team", "team_name", req.team_name, "members_count", len(req.members)
        )

        if self._team_repo.exists(req.team_name):
            raise TeamAlreadyExistsError()

        try:
            with self._tx_manager.transaction():
                team = Team(name=req.team_name)
                self._team_repo.create(team)
                users = [self._upsert_member(req.team_name, member) for member in req.members]
        except Exception as exc:
            self._logger.error("Failed to create team", "error", str(exc), "team_name", req.team_name)
            raise

        self._logger.info(
            "Team created successfully", "team_name", req.team_name, "members_count", len(users)
        )
        return to_team_dto(team, users)

    def get_team(self, team_name: str) -> TeamDTO:
        """The team with all of its members, ordered by username."""
        self._logger.info("Getting team", "team_name", team_name)

        team = self._find_team(team_name)
        users = self._user_repo.find_by_team_name(team_name)

        self._logger.info(
            "Team retrieved successfully", "team_name", team_name, "members_count", len(users)
        )
        return to_team_dto(team, users)

    def deactivate_team_members(self, team_name: str) -> TeamDTO:
        """Deactivate every member of a team at once."""
        self._logger.info("Deactivating team members", "team_name", team_name)

        team = self._find_team(team_name)
        users = self._user_repo.find_by_team_name(team_name)
        if not users:
            self._logger.info("No users to deactivate", "team_name", team_name)
            return to_team_dto(team, users)

        try:
            with self._tx_manager.transaction():
                self._user_repo.batch_deactivate_by_team_name(team_name)
        except Exception as exc:
            self._logger.error(
                "Failed to deactivate team members", "error", str(exc), "team_name", team_name
            )
            raise

        users = self._user_repo.find_by_team_name(team_name)
        self._logger.info(
            "Team members deactivated successfully",
            "team_name", team_name,
            "members_count", len(users),
        )
        return to_team_dto(team, users)

    def _find_team(self, team_name: str) -> Team:
        try:
            return self._team_repo.find_by_name(team_name)
        except NotFoundError:
            raise TeamNotFoundError() from None

    def _upsert_member(self, team_name: str, member: TeamMemberRequest) -> User:
        try:
            existing: User | None = self._user_repo.find_by_id(member.user_id)
        except NotFoundError:
            existing = None

        if existing is not None:
            existing.change_team(team_name)
            if member.is_active and not existing.is_active:
                existing.activate()
            elif not member.is_active and existing.is_active:
                existing.deactivate()
            self._user_repo.update(existing)
            return existing

        user = User(user_id=member.user_id, username=member.username, team_name=team_name)
        if not member.is_active:
            user.deactivate()
        self._user_repo.create(user)
        return user