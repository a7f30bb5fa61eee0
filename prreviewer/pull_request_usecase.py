"""Creating, merging and re-reviewing pull requests."""

from __future__ import annotations

from .db import TransactionManager
from .dto import CreatePRRequest, PullRequestDTO, ReassignReviewerRequest, to_pull_request_dto
from .entities import PullRequest
from .errors import (
    NotFoundError,
    PRAlreadyExistsError,
    PRAlreadyMergedError,
    PRNotFoundError,
    ReviewerNotAssignedError,
    ServiceError,
    UserNotFoundError,
)
from .logger import Logger
from .pull_request_repository import PullRequestRepository
from .reviewer_selector import ReviewerSelector
from .user_repository import UserRepository


class PullRequestUseCase:
    """Pull request operations that keep reviewer assignments consistent."""

    def __init__(
        self,
        tx_manager: TransactionManager,
        pr_repo: PullRequestRepository,
        user_repo: UserRepository,
        reviewer_selector: ReviewerSelector,
        logger: Logger,
    ) -> None:
        self._tx_manager = tx_manager
        self._pr_repo = pr_repo
        self._user_repo = user_repo
        self._reviewer_selector = reviewer_selector
        self._logger = logger

    def create_pr(self, req: CreatePRRequest) -> PullRequestDTO:
        """Create a pull request and assign reviewers from the author's team."""
        self._logger.info("Creating PR", "pr_id", req.pull_request_id, "author_id", req.author_id)

        if self._pr_repo.exists(req.pull_request_id):
            raise PRAlreadyExistsError()

        try:
            author = self._user_repo.find_by_id(req.author_id)
        except NotFoundError:
            raise UserNotFoundError() from None

        try:
            with self._tx_manager.transaction():
                pr = PullRequest(
                    pr_id=req.pull_request_id,
                    name=req.pull_request_name,
                    author_id=req.author_id,
                )
                for reviewer_id in self._reviewer_selector.select_reviewers(
                    author.team_name, req.author_id
                ):
                    pr.add_reviewer(reviewer_id)
                self._pr_repo.create(pr)
        except Exception as exc:
            self._logger.error(
                "Failed to create PR", "error", str(exc), "pr_id", req.pull_request_id
            )
            raise

        self._logger.info(
            "PR created successfully",
            "pr_id", req.pull_request_id,
            "reviewers_count", len(pr.assigned_reviewers),
            "reviewers", pr.assigned_reviewers,
        )
        return to_pull_request_dto(pr)

    def merge_pr(self, pr_id: str) -> PullRequestDTO:
        """Mark a pull request MERGED; merging a merged one returns it unchanged."""
        self._logger.info("Merging PR", "pr_id", pr_id)

        try:
            self._pr_repo.merge_pr(pr_id)
        except NotFoundError:
            try:
                pr = self._pr_repo.find_by_id(pr_id)
            except NotFoundError:
                raise PRNotFoundError() from None
            if pr.is_merged:
                self._logger.info("PR already merged (idempotent operation)", "pr_id", pr_id)
                return to_pull_request_dto(pr)
            self._logger.error("Unexpected state: PR exists but merge failed", "pr_id", pr_id)
            raise ServiceError("failed to merge PR: unexpected state") from None

        pr = self._pr_repo.find_by_id(pr_id)
        self._logger.info("PR merged successfully", "pr_id", pr_id)
        return to_pull_request_dto(pr)

    def reassign_reviewer(self, req: ReassignReviewerRequest) -> tuple[PullRequestDTO, str]:
        """Replace one reviewer by the least loaded active member of their team.

        Returns the updated pull request and the id of the new reviewer.
        """
        self._logger.info(
            "Reassigning reviewer", "pr_id", req.pull_request_id, "old_user_id", req.old_user_id
        )

        try:
            with self._tx_manager.transaction():
                try:
                    pr = self._pr_repo.find_by_id_for_update(req.pull_request_id)
                except NotFoundError:
                    raise PRNotFoundError() from None

                if pr.is_merged:
                    raise PRAlreadyMergedError()
                if req.old_user_id not in pr.assigned_reviewers:
                    raise ReviewerNotAssignedError()

                new_reviewer_id = self._reviewer_selector.select_replacement(
                    req.old_user_id, pr.author_id, pr.assigned_reviewers
                )
                pr.replace_reviewer(req.old_user_id, new_reviewer_id)
                self._pr_repo.replace_reviewer(pr.pr_id, req.old_user_id, new_reviewer_id)
        except Exception as exc:
            self._logger.error(
                "Failed to reassign reviewer",
                "error", str(exc),
                "pr_id", req.pull_request_id,
                "old_reviewer_id", req.old_user_id,
            )
            raise

        self._logger.info(
            "Reviewer reassigned successfully",
            "pr_id", req.pull_request_id,
            "old_reviewer_id", req.old_user_id,
            "new_reviewer_id", new_reviewer_id,
        )
        return to_pull_request_dto(pr), new_reviewer_id