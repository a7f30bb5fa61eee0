"""Changing user activity and listing the reviews a user is assigned to."""

from __future__ import annotations

from .dto import PullRequestShortDTO, SetUserActiveRequest, UserDTO, to_pull_request_short_dtos, to_user_dto
from .errors import NotFoundError, UserNotFoundError
from .logger import Logger
from .pull_request_repository import PullRequestRepository
from .user_repository import UserRepository


class UserUseCase:
    """User operations."""

    def __init__(
        self, user_repo: UserRepository, pr_repo: PullRequestRepository, logger: Logger
    ) -> None:
        self._user_repo = user_repo
        self._pr_repo = pr_repo
        self._logger = logger

    def set_user_active(self, req: SetUserActiveRequest) -> UserDTO:
        """Set whether a user takes part in reviews."""
        self._logger.info(
            "Setting user active status", "user_id", req.user_id, "is_active", req.is_active
        )

        try:
            user = self._user_repo.find_by_id(req.user_id)
        except NotFoundError:
            raise UserNotFoundError() from None

        if req.is_active and not user.is_active:
            user.activate()
        elif not req.is_active and user.is_active:
            user.deactivate()

        try:
            self._user_repo.update(user)
        except Exception as exc:
            self._logger.error("Failed to update user", "error", str(exc), "user_id", req.user_id)
            raise

        self._logger.info(
            "User active status updated", "user_id", req.user_id, "is_active", req.is_active
        )
        return to_user_dto(user)

    def get_user_reviews(self, user_id: str) -> list[PullRequestShortDTO]:
        """Pull requests the user is assigned to review, newest first."""
        self._logger.info("Getting user reviews", "user_id", user_id)

        if not self._user_repo.exists(user_id):
            raise UserNotFoundError()

        prs = self._pr_repo.find_by_reviewer_id(user_id)
        self._logger.info("User reviews retrieved", "user_id", user_id, "prs_count", len(prs))
        return to_pull_request_short_dtos(prs)