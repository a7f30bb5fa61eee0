"""Pull request and reviewer assignment statistics."""

from __future__ import annotations

from .dto import PRStatsDTO, StatisticsDTO, UserStatsDTO
from .logger import Logger
from .pull_request_repository import PullRequestRepository
from .user_repository import UserRepository


class StatisticsUseCase:
    """Reports pull request counts and per-user review counts."""

    def __init__(
        self, pr_repo: PullRequestRepository, user_repo: UserRepository, logger: Logger
    ) -> None:
        self._pr_repo = pr_repo
        self._user_repo = user_repo
        self._logger = logger

    def get_statistics(self, team_name: str = "") -> StatisticsDTO:
        """Pull request totals, plus per-member review counts when a team is named."""
        self._logger.info("Getting statistics", "team_name", team_name)

        total, open_count, merged = self._pr_repo.get_stats()
        result = StatisticsDTO(pr_stats=PRStatsDTO(total=total, open=open_count, merged=merged))

        if team_name:
            users = self._user_repo.find_by_team_name(team_name)
            if not users:
                self._logger.info("Team has no users", "team_name", team_name)
                return result

            user_ids = [user.user_id for user in users]
            total_reviews = self._pr_repo.count_reviews_by_user_ids(user_ids)
            active_reviews = self._pr_repo.count_active_reviews_by_user_ids(user_ids)
            result.user_stats = [
                UserStatsDTO(
                    user_id=user_id,
                    total_reviews=total_reviews.get(user_id, 0),
                    active_reviews=active_reviews.get(user_id, 0),
                )
                for user_id in user_ids
            ]

        self._logger.info(
            "Statistics retrieved successfully",
            "pr_total", total,
            "pr_open", open_count,
            "pr_merged", merged,
        )
        return result