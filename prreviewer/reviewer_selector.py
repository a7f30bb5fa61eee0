"""Choosing reviewers by current review load."""

from __future__ import annotations

from typing import Iterable, Mapping

from .entities import MAX_REVIEWERS_COUNT
from .errors import NoActiveCandidatesError
from .pull_request_repository import PullRequestRepository
from .user_repository import UserRepository


def _select_least_loaded(
    candidate_ids: list[str], review_counts: Mapping[str, int], max_count: int
) -> list[str]:
    """Up to max_count candidates with the fewest open reviews, ties by id."""
    if len(candidate_ids) <= max_count:
        return list(candidate_ids)
    ranked = sorted(candidate_ids, key=lambda user_id: (review_counts.get(user_id, 0), user_id))
    return ranked[:max_count]


class ReviewerSelector:
    """Picks active team members with the lightest load of open reviews."""

    def __init__(self, user_repo: UserRepository, pr_repo: PullRequestRepository) -> None:
        self._user_repo = user_repo
        self._pr_repo = pr_repo

    def select_reviewers(self, team_name: str, author_id: str) -> list[str]:
        """Up to MAX_REVIEWERS_COUNT active members of the team, never the author."""
        candidate_ids = [
            user.user_id
            for user in self._user_repo.find_active_by_team_name(team_name)
            if user.user_id != author_id
        ]
        if not candidate_ids:
            return []
        review_counts = self._pr_repo.count_active_reviews_by_user_ids(candidate_ids)
        return _select_least_loaded(candidate_ids, review_counts, MAX_REVIEWERS_COUNT)

    def select_replacement(
        self, old_reviewer_id: str, author_id: str, assigned_reviewers: Iterable[str]
    ) -> str:
        """An active member of the old reviewer's team to take over the review.

        The author, the old reviewer and the other assigned reviewers are never
        chosen. Raises NoActiveCandidatesError when nobody is left.
        """
        old_reviewer = self._user_repo.find_by_id(old_reviewer_id)
        users = self._user_repo.find_active_by_team_name(old_reviewer.team_name)

        excluded = {author_id, old_reviewer_id, *assigned_reviewers}
        candidate_ids = [user.user_id for user in users if user.user_id not in excluded]
        if not candidate_ids:
            raise NoActiveCandidatesError()

        review_counts = self._pr_repo.count_active_reviews_by_user_ids(candidate_ids)
        selected = _select_least_loaded(candidate_ids, review_counts, 1)
        if not selected:
            raise NoActiveCandidatesError()
        return selected[0]