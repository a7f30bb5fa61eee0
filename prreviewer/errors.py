"""Errors raised by the reviewer service and its repositories."""


class ServiceError(Exception):
    """Base class for every error the service raises on purpose."""

    default_message = "service error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class NotFoundError(ServiceError):
    """A repository lookup matched no record."""

    default_message = "not found"


class TeamAlreadyExistsError(ServiceError):
    default_message = "team already exists"


class TeamNotFoundError(ServiceError):
    default_message = "team not found"


class UserNotFoundError(ServiceError):
    default_message = "user not found"


class PRAlreadyExistsError(ServiceError):
    default_message = "pull request already exists"


class PRNotFoundError(ServiceError):
    default_message = "pull request not found"


class PRAlreadyMergedError(ServiceError):
    default_message = "pull request already merged"


class ReviewerNotAssignedError(ServiceError):
    default_message = "reviewer is not assigned to this PR"


class NoActiveCandidatesError(ServiceError):
    default_message = "no active replacement candidate in team"