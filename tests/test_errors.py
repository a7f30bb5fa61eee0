import pytest

from prreviewer.errors import (
    NoActiveCandidatesError,
    NotFoundError,
    PRAlreadyExistsError,
    PRAlreadyMergedError,
    PRNotFoundError,
    ReviewerNotAssignedError,
    ServiceError,
    TeamAlreadyExistsError,
    TeamNotFoundError,
    UserNotFoundError,
)


@pytest.mark.parametrize(
    "error_cls, message",
    [
        (TeamAlreadyExistsError, "team already exists"),
        (TeamNotFoundError, "team not found"),
        (UserNotFoundError, "user not found"),
        (PRAlreadyExistsError, "pull request already exists"),
        (PRNotFoundError, "pull request not found"),
        (PRAlreadyMergedError, "pull request already merged"),
        (ReviewerNotAssignedError, "reviewer is not assigned to this PR"),
        (NoActiveCandidatesError, "no active replacement candidate in team"),
    ],
)
def test_default_messages(error_cls, message):
    assert str(error_cls()) == message


@pytest.mark.parametrize(
    "error_cls",
    [
        NotFoundError,
        TeamAlreadyExistsError,
        TeamNotFoundError,
        UserNotFoundError,
        PRAlreadyExistsError,
        PRNotFoundError,
        PRAlreadyMergedError,
        ReviewerNotAssignedError,
        NoActiveCandidatesError,
    ],
)
def test_all_errors_are_service_errors(error_cls):
    err = error_cls("boom")
    assert isinstance(err, ServiceError)
    assert isinstance(err, Exception)
    assert str(err) == "boom"


@pytest.mark.parametrize(
    "error_cls, message",
    [
        (TeamNotFoundError, "team not found"),
        (PRNotFoundError, "pull request not found"),
        (UserNotFoundError, "user not found"),
    ],
)
def test_domain_not_found_errors_are_not_repository_not_found(error_cls, message):
    err = error_cls()
    assert not isinstance(err, NotFoundError)
    assert str(err) == message


def test_custom_message_overrides_default():
    err = NotFoundError("user u-1 missing")
    assert str(err) == "user u-1 missing"