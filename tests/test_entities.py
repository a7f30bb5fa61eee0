import pytest

from prreviewer.entities import (
    MAX_REVIEWERS_COUNT,
    PRStatus,
    PullRequest,
    Team,
    User,
)


def make_pr(reviewers=()):
    return PullRequest("pr-1", "Test PR", "author-1", assigned_reviewers=list(reviewers))


def test_status_values():
    assert PRStatus.OPEN.value == "OPEN"
    assert PRStatus("MERGED") is PRStatus.MERGED


def test_user_activation_toggles():
    user = User("user-1", "User 1", "team-1", is_active=False)
    before = user.updated_at
    user.activate()
    assert user.is_active is True
    assert user.updated_at >= before
    user.deactivate()
    assert user.is_active is False


def test_user_change_team():
    user = User("user-1", "User 1", "old-team")
    user.change_team("team-1")
    assert user.team_name == "team-1"


def test_user_change_team_rejects_empty():
    user = User("user-1", "User 1", "team-1")
    with pytest.raises(ValueError):
        user.change_team("")
    assert user.team_name == "team-1"


def test_user_requires_id():
    with pytest.raises(ValueError):
        User("", "User", "team-1")


def test_team_requires_name():
    with pytest.raises(ValueError):
        Team("")
    assert Team("team-1").name == "team-1"


def test_new_pr_is_open_without_reviewers():
    pr = make_pr()
    assert pr.status is PRStatus.OPEN
    assert pr.assigned_reviewers == []
    assert pr.merged_at is None
    assert pr.is_merged is False


def test_add_reviewers_up_to_limit():
    pr = make_pr()
    ids = [f"reviewer-{n}" for n in range(MAX_REVIEWERS_COUNT)]
    for reviewer_id in ids:
        pr.add_reviewer(reviewer_id)
    assert pr.assigned_reviewers == ids
    with pytest.raises(ValueError):
        pr.add_reviewer("reviewer-extra")
    assert len(pr.assigned_reviewers) == MAX_REVIEWERS_COUNT


def test_add_reviewer_rejects_duplicate_and_author():
    pr = make_pr(["reviewer-1"])
    with pytest.raises(ValueError):
        pr.add_reviewer("reviewer-1")
    with pytest.raises(ValueError):
        pr.add_reviewer("author-1")
    assert pr.assigned_reviewers == ["reviewer-1"]


def test_replace_reviewer_keeps_position():
    pr = make_pr(["reviewer-1", "reviewer-2"])
    pr.replace_reviewer("reviewer-1", "reviewer-3")
    assert pr.assigned_reviewers == ["reviewer-3", "reviewer-2"]


def test_replace_unassigned_reviewer_fails():
    pr = make_pr(["reviewer-2"])
    with pytest.raises(ValueError):
        pr.replace_reviewer("reviewer-1", "reviewer-3")
    assert pr.assigned_reviewers == ["reviewer-2"]


def test_merge_is_idempotent():
    pr = make_pr(["reviewer-1"])
    pr.merge()
    assert pr.status is PRStatus.MERGED
    first = pr.merged_at
    assert first is not None and first >= pr.created_at
    pr.merge()
    assert pr.merged_at == first


def test_merged_pr_rejects_reviewer_changes():
    pr = make_pr(["reviewer-1"])
    pr.merge()
    with pytest.raises(ValueError):
        pr.replace_reviewer("reviewer-1", "reviewer-2")
    with pytest.raises(ValueError):
        pr.add_reviewer("reviewer-2")


def test_status_string_is_coerced():
    pr = PullRequest("pr-1", "Test PR", "author-1", status="MERGED")
    assert pr.status is PRStatus.MERGED
    assert pr.is_merged