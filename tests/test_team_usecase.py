import io

import pytest

from prreviewer.db import Database, TransactionManager
from prreviewer.dto import CreateTeamRequest, TeamMemberDTO, TeamMemberRequest
from prreviewer.entities import Team, User
from prreviewer.errors import TeamAlreadyExistsError, TeamNotFoundError
from prreviewer.logger import create_logger
from prreviewer.team_repository import TeamRepository
from prreviewer.user_repository import UserRepository
from prreviewer.team_usecase import TeamUseCase


@pytest.fixture
def db():
    database = Database()
    database.init_schema()
    yield database
    database.close()


@pytest.fixture
def repos(db):
    return TeamRepository(db), UserRepository(db)


@pytest.fixture
def usecase(db, repos):
    team_repo, user_repo = repos
    return TeamUseCase(
        TransactionManager(db), team_repo, user_repo, create_logger(stream=io.StringIO())
    )


def test_create_team_with_new_users(usecase, repos):
    req = CreateTeamRequest(
        team_name="team-1",
        members=[
            TeamMemberRequest(user_id="user-1", username="User 1", is_active=True),
            TeamMemberRequest(user_id="user-2", username="User 2", is_active=True),
        ],
    )
    result = usecase.create_team(req)
    assert result.team_name == "team-1"
    assert result.members == [
        TeamMemberDTO(user_id="user-1", username="User 1", is_active=True),
        TeamMemberDTO(user_id="user-2", username="User 2", is_active=True),
    ]
    _, user_repo = repos
    assert [u.user_id for u in user_repo.find_by_team_name("team-1")] == ["user-1", "user-2"]


def test_create_team_with_existing_user_moves_it(usecase, repos):
    team_repo, user_repo = repos
    team_repo.create(Team(name="old-team"))
    user_repo.create(User(user_id="user-1", username="User 1", team_name="old-team"))

    req = CreateTeamRequest(
        team_name="team-1",
        members=[TeamMemberRequest(user_id="user-1", username="User 1", is_active=True)],
    )
    result = usecase.create_team(req)

    assert result.team_name == "team-1"
    assert user_repo.find_by_id("user-1").team_name == "team-1"
    assert user_repo.find_by_team_name("old-team") == []


def test_create_team_applies_inactive_flag(usecase, repos):
    team_repo, user_repo = repos
    team_repo.create(Team(name="old-team"))
    user_repo.create(User(user_id="user-1", username="User 1", team_name="old-team"))

    req = CreateTeamRequest(
        team_name="team-1",
        members=[
            TeamMemberRequest(user_id="user-1", username="User 1", is_active=False),
            TeamMemberRequest(user_id="user-2", username="User 2", is_active=False),
        ],
    )
    result = usecase.create_team(req)
    assert [m.is_active for m in result.members] == [False, False]
    assert user_repo.find_by_id("user-1").is_active is False
    assert user_repo.find_by_id("user-2").is_active is False


def test_create_team_already_exists(usecase):
    usecase.create_team(CreateTeamRequest(team_name="team-1", members=[]))
    with pytest.raises(TeamAlreadyExistsError):
        usecase.create_team(CreateTeamRequest(team_name="team-1", members=[]))


def test_create_team_rolls_back_on_invalid_member(usecase, repos):
    team_repo, user_repo = repos
    req = CreateTeamRequest(
        team_name="team-1",
        members=[
            TeamMemberRequest(user_id="user-1", username="User 1", is_active=True),
            TeamMemberRequest(user_id="", username="Nobody", is_active=True),
        ],
    )
    with pytest.raises(ValueError):
        usecase.create_team(req)
    assert team_repo.exists("team-1") is False
    assert user_repo.exists("user-1") is False


def test_get_team(usecase, repos):
    team_repo, user_repo = repos
    team_repo.create(Team(name="team-1"))
    user_repo.create(User(user_id="user-1", username="User 1", team_name="team-1"))

    result = usecase.get_team("team-1")
    assert result.team_name == "team-1"
    assert result.members == [TeamMemberDTO(user_id="user-1", username="User 1", is_active=True)]


def test_get_team_not_found(usecase):
    with pytest.raises(TeamNotFoundError):
        usecase.get_team("team-1")


def test_deactivate_team_members(usecase, repos):
    team_repo, user_repo = repos
    team_repo.create(Team(name="team-1"))
    user_repo.create(User(user_id="user-1", username="User 1", team_name="team-1"))
    user_repo.create(
        User(user_id="user-2", username="User 2", team_name="team-1", is_active=False)
    )

    result = usecase.deactivate_team_members("team-1")
    assert result.team_name == "team-1"
    assert [m.is_active for m in result.members] == [False, False]
    assert user_repo.find_active_by_team_name("team-1") == []


def test_deactivate_team_members_does_not_touch_other_teams(usecase, repos):
    team_repo, user_repo = repos
    team_repo.create(Team(name="team-1"))
    team_repo.create(Team(name="team-2"))
    user_repo.create(User(user_id="user-1", username="User 1", team_name="team-1"))
    user_repo.create(User(user_id="user-9", username="User 9", team_name="team-2"))

    usecase.deactivate_team_members("team-1")
    assert user_repo.find_by_id("user-9").is_active is True


def test_deactivate_team_without_members(usecase, repos):
    team_repo, _ = repos
    team_repo.create(Team(name="team-1"))
    result = usecase.deactivate_team_members("team-1")
    assert result.team_name == "team-1"
    assert result.members == []


def test_deactivate_team_not_found(usecase):
    with pytest.raises(TeamNotFoundError):
        usecase.deactivate_team_members("team-1")