# prreviewer

A library for a pull request review service. It keeps teams and their
members, opens pull requests and assigns reviewers to them
automatically, reassigns reviewers, merges pull requests and reports
review statistics. Data is stored in SQLite.

## What it does

- **Teams and users.** A team is created together with its members. If a
  member already exists, the user moves to the new team and gets the
  activity flag given in the request. Otherwise the user is created. A
  user can be switched active or inactive. All members of a team can be
  deactivated in one step.
- **Reviewer assignment.** When a pull request is created, up to two
  active members of the author's team are assigned as reviewers. The
  author is never one of them. When there are more candidates than
  places, the ones with the fewest open reviews are picked, and ties are
  broken by user id.
- **Reassignment.** A reviewer on an open pull request can be replaced by
  an active member of *that reviewer's* team. The author, the reviewer
  being replaced and the reviewers already assigned are not eligible.
  The eligible member with the fewest open reviews is chosen.
- **Merging.** Merging is idempotent: merging a pull request that is
  already merged returns it unchanged. Once merged, a pull request can
  no longer have its reviewers reassigned.
- **Statistics.** Counts of total, open and merged pull requests. When a
  team name is given, each member's total and active (open) review
  counts are reported as well.

## Layout

| Module | Contents |
| --- | --- |
| `prreviewer.errors` | `ServiceError`, `NotFoundError` and the domain errors |
| `prreviewer.entities` | `User`, `Team`, `PullRequest`, `PRStatus`, `MAX_REVIEWERS_COUNT` |
| `prreviewer.dto` | request and response dataclasses and the `to_*` converters |
| `prreviewer.config` | `Config` with `ServerConfig`, `DatabaseConfig`, `LoggerConfig`; `parse_config`, `load_config` |
| `prreviewer.logger` | `Logger`, `create_logger`, `request_context` and related helpers |
| `prreviewer.db` | `Database` (SQLite) and `TransactionManager` |
| `prreviewer.user_repository`, `team_repository`, `pull_request_repository` | storage |
| `prreviewer.reviewer_selector` | `ReviewerSelector` |
| `prreviewer.team_usecase`, `user_usecase`, `pull_request_usecase`, `statistics_usecase` | the operations |

## Putting it together

```python
from prreviewer.db import Database, TransactionManager
from prreviewer.dto import CreatePRRequest, CreateTeamRequest, TeamMemberRequest
from prreviewer.logger import create_logger
from prreviewer.pull_request_repository import PullRequestRepository
from prreviewer.pull_request_usecase import PullRequestUseCase
from prreviewer.reviewer_selector import ReviewerSelector
from prreviewer.team_repository import TeamRepository
from prreviewer.team_usecase import TeamUseCase
from prreviewer.user_repository import UserRepository

db = Database()            # in memory; pass a file path to keep the data
db.init_schema()
tx = TransactionManager(db)

users = UserRepository(db)
teams = TeamRepository(db)
prs = PullRequestRepository(db)
log = create_logger("info", "json")

team_service = TeamUseCase(tx, teams, users, log)
pr_service = PullRequestUseCase(tx, prs, users, ReviewerSelector(users, prs), log)

team_service.create_team(CreateTeamRequest("backend", [
    TeamMemberRequest("u1", "alice", True),
    TeamMemberRequest("u2", "bob", True),
    TeamMemberRequest("u3", "carol", True),
]))

pr = pr_service.create_pr(CreatePRRequest("pr-1", "Add search", "u1"))
print(pr.assigned_reviewers)          # two of u2, u3

merged = pr_service.merge_pr("pr-1")
print(merged.to_dict()["status"])     # MERGED
```

`reassign_reviewer(ReassignReviewerRequest(pr_id, old_user_id))` returns
a tuple of the updated `PullRequestDTO` and the new reviewer's id.
`UserUseCase` offers `set_user_active` and `get_user_reviews`, which lists
a user's reviews newest first. `StatisticsUseCase.get_statistics(team_name)`
returns a `StatisticsDTO`.

`TransactionManager.transaction()` is a context manager. It commits when
the block ends normally and rolls back when the block raises. A nested
block joins the outer transaction.

## Errors

The use cases report failures as subclasses of
`prreviewer.errors.ServiceError`:

| Error | When |
| --- | --- |
| `TeamAlreadyExistsError` | creating a team whose name is taken |
| `TeamNotFoundError` | reading or deactivating an unknown team |
| `UserNotFoundError` | an unknown user or pull request author |
| `PRAlreadyExistsError` | creating a pull request whose id is taken |
| `PRNotFoundError` | merging or reassigning an unknown pull request |
| `PRAlreadyMergedError` | reassigning a reviewer on a merged pull request |
| `ReviewerNotAssignedError` | the user to replace is not a reviewer of the pull request |
| `NoActiveCandidatesError` | no eligible replacement reviewer exists |
| `NotFoundError` | a repository lookup, update or delete matched no record |

The entities raise `ValueError` on invalid data, for example an empty
id, an author assigned as reviewer, or more than two reviewers.

```python
from prreviewer.errors import PRAlreadyMergedError, ServiceError

try:
    pr, new_reviewer = pr_service.reassign_reviewer(request)
except PRAlreadyMergedError:
    ...
except ServiceError as exc:
    print(f"request failed: {exc}")
```

## Configuration

Configuration is YAML with three sections:

```yaml
server:
  host: localhost
  port: "8080"
  read_timeout: 15
  write_timeout: 15
  idle_timeout: 60
  max_header_bytes: 1048576
  max_body_size: 10485760
  shutdown_timeout: 10

database:
  host: localhost
  port: 5432
  user: reviewer
  password: password
  dbname: pr_reviewer
  sslmode: disable
  max_open_conns: 25
  max_idle_conns: 5
  conn_max_lifetime: 5
  ping_timeout: 5

logger:
  level: info
  format: json
```

`parse_config(text)` turns such a document into a `Config` without
validating it. `load_config(environ, configs_dir)` does three things:

1. It reads `<configs_dir>/<CONFIG_FILE>.yaml`. `CONFIG_FILE` defaults
   to `development` and `configs_dir` defaults to `configs`.
2. It applies overrides from the environment: `SERVER_*`, `DB_*`,
   `LOG_LEVEL` and `LOG_FORMAT`. Integer overrides that do not parse are
   ignored.
3. It calls `Config.validate()`.

During validation, numeric settings left at zero get their defaults.
Then every limit is checked:

- the server port and the database host, user and name are required;
- timeouts must be at least 1;
- sizes must be at least 1024 bytes;
- the database port must lie between 1 and 65535;
- idle connections may not exceed open connections;
- the log level must be `debug`, `info`, `warn` or `error`;
- the log format must be `json` or `text`.

Any violation, like an unreadable or malformed file, raises
`ConfigError`.

```python
from prreviewer.config import ConfigError, load_config

try:
    config = load_config({"CONFIG_FILE": "production"}, "configs")
except ConfigError as exc:
    print(exc)
```

## Logging

`create_logger(level, format, stream)` builds a `Logger`. It writes one
JSON object or one `key=value` line per record, to the given stream or
to standard output. Records below the level are dropped. At `debug`
level each record also carries its source location. Fields are passed as
alternating keys and values:

```python
import sys
from prreviewer.logger import create_logger, request_context

log = create_logger("info", "text", sys.stdout)
log.info("Creating PR", "pr_id", "pr-1", "author_id", "u1")

with request_context("req-42", "u1"):
    log.with_context().info("handled")  # carries request_id and user_id
```

`with_fields(*args)` returns a logger that adds fixed fields to every
record.

## What it does not do

The package is a library only. It has no HTTP server, no endpoints and
no command-line program. Storage is SQLite through `Database`, and
`Database` takes only a file path. The `database` section of `Config`
(host, port, user, connection pool settings) is parsed and validated,
but nothing in the package connects with it. Likewise the `server`
section is not used by any server.

## Running the tests

The test suite uses pytest, which is available through the `test` extra.