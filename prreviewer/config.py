"""Application configuration: YAML file plus environment overrides."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

DEFAULT_CONFIG_FILE = "development"
CONFIGS_DIR = "configs"

DEFAULT_SERVER_READ_TIMEOUT = 15
DEFAULT_SERVER_WRITE_TIMEOUT = 15
DEFAULT_SERVER_IDLE_TIMEOUT = 60
DEFAULT_SERVER_SHUTDOWN_TIMEOUT = 10
DEFAULT_SERVER_MAX_HEADER_BYTES = 1 << 20
DEFAULT_SERVER_MAX_BODY_SIZE = 10 * 1024 * 1024

MIN_SERVER_TIMEOUT = 1
MIN_SERVER_SIZE = 1024

MIN_DATABASE_PORT = 1
MAX_DATABASE_PORT = 65535
DEFAULT_DATABASE_MAX_OPEN_CONNS = 25
DEFAULT_DATABASE_MAX_IDLE_CONNS = 5
DEFAULT_DATABASE_CONN_MAX_LIFETIME = 5
DEFAULT_DATABASE_PING_TIMEOUT = 5
MIN_DATABASE_TIMEOUT = 1

VALID_LOG_LEVELS = frozenset({"debug", "info", "warn", "error"})
VALID_LOG_FORMATS = frozenset({"json", "text"})

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


class ConfigError(Exception):
    """The configuration could not be read, parsed or validated."""


@dataclass
class ServerConfig:
    port: str = ""
    host: str = ""
    read_timeout: int = 0
    write_timeout: int = 0
    idle_timeout: int = 0
    max_header_bytes: int = 0
    max_body_size: int = 0
    shutdown_timeout: int = 0


@dataclass
class DatabaseConfig:
    host: str = ""
    port: int = 0
    user: str = ""
    password: str = ""
    dbname: str = ""
    sslmode: str = ""
    max_open_conns: int = 0
    max_idle_conns: int = 0
    conn_max_lifetime: int = 0
    ping_timeout: int = 0


@dataclass
class LoggerConfig:
    level: str = ""
    format: str = ""


@dataclass
class Config:
    server: ServerConfig = field(default_factory=ServerConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    logger: LoggerConfig = field(default_factory=LoggerConfig)

    def validate(self) -> None:
        """Fill zero values with defaults and check every setting."""
        self._validate_server()
        self._validate_database()
        self._validate_logger()

    def _validate_server(self) -> None:
        s = self.server
        if not s.port:
            raise ConfigError("server port is required")

        s.read_timeout = s.read_timeout or DEFAULT_SERVER_READ_TIMEOUT
        s.write_timeout = s.write_timeout or DEFAULT_SERVER_WRITE_TIMEOUT
        s.idle_timeout = s.idle_timeout or DEFAULT_SERVER_IDLE_TIMEOUT
        s.max_header_bytes = s.max_header_bytes or DEFAULT_SERVER_MAX_HEADER_BYTES
        s.max_body_size = s.max_body_size or DEFAULT_SERVER_MAX_BODY_SIZE
        s.shutdown_timeout = s.shutdown_timeout or DEFAULT_SERVER_SHUTDOWN_TIMEOUT

        for name in ("read_timeout", "write_timeout", "idle_timeout"):
            if getattr(s, name) < MIN_SERVER_TIMEOUT:
                raise ConfigError(f"server {name} must be at least {MIN_SERVER_TIMEOUT} second")
        for name in ("max_header_bytes", "max_body_size"):
            if getattr(s, name) < MIN_SERVER_SIZE:
                raise ConfigError(f"server {name} must be at least {MIN_SERVER_SIZE} bytes")
        if s.shutdown_timeout < MIN_SERVER_TIMEOUT:
            raise ConfigError(
                f"server shutdown_timeout must be at least {MIN_SERVER_TIMEOUT} second"
            )

    def _validate_database(self) -> None:
        d = self.database
        if not d.host:
            raise ConfigError("database host is required")
        if not MIN_DATABASE_PORT <= d.port <= MAX_DATABASE_PORT:
            raise ConfigError(
                f"database port must be between {MIN_DATABASE_PORT} and {MAX_DATABASE_PORT}"
            )
        if not d.user:
            raise ConfigError("database user is required")
        if not d.dbname:
            raise ConfigError("database name is required")

        d.max_open_conns = d.max_open_conns or DEFAULT_DATABASE_MAX_OPEN_CONNS
        d.max_idle_conns = d.max_idle_conns or DEFAULT_DATABASE_MAX_IDLE_CONNS
        d.conn_max_lifetime = d.conn_max_lifetime or DEFAULT_DATABASE_CONN_MAX_LIFETIME
        d.ping_timeout = d.ping_timeout or DEFAULT_DATABASE_PING_TIMEOUT

        if d.max_open_conns < MIN_DATABASE_TIMEOUT:
            raise ConfigError(f"database max_open_conns must be at least {MIN_DATABASE_TIMEOUT}")
        if d.max_idle_conns < MIN_DATABASE_TIMEOUT:
            raise ConfigError(f"database max_idle_conns must be at least {MIN_DATABASE_TIMEOUT}")
        if d.max_idle_conns > d.max_open_conns:
            raise ConfigError("database max_idle_conns cannot be greater than max_open_conns")
        if d.conn_max_lifetime < MIN_DATABASE_TIMEOUT:
            raise ConfigError(
                f"database conn_max_lifetime must be at least {MIN_DATABASE_TIMEOUT} minute"
            )
        if d.ping_timeout < MIN_DATABASE_TIMEOUT:
            raise ConfigError(
                f"database ping_timeout must be at least {MIN_DATABASE_TIMEOUT} second"
            )

    def _validate_logger(self) -> None:
        if self.logger.level not in VALID_LOG_LEVELS:
            raise ConfigError(
                f"invalid log level: {self.logger.level} (must be debug, info, warn, or error)"
            )
        if self.logger.format not in VALID_LOG_FORMATS:
            raise ConfigError(
                f"invalid log format: {self.logger.format} (must be json or text)"
            )


def _scalar_to_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _decode_section(cls: type, data: Any, section: str) -> Any:
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ConfigError(f"failed to parse config: section {section} must be a mapping")
    values = {}
    for spec in fields(cls):
        value = data.get(spec.name)
        if value is None:
            continue
        if spec.type == "int":
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(
                    f"failed to parse config: {section}.{spec.name} must be an integer"
                )
            values[spec.name] = value
        else:
            if isinstance(value, (dict, list)):
                raise ConfigError(
                    f"failed to parse config: {section}.{spec.name} must be a scalar"
                )
            values[spec.name] = _scalar_to_str(value)
    return cls(**values)


def parse_config(text: str) -> Config:
    """Build a Config from YAML text without validating it."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"failed to parse config: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("failed to parse config: top level must be a mapping")
    return Config(
        server=_decode_section(ServerConfig, data.get("server"), "server"),
        database=_decode_section(DatabaseConfig, data.get("database"), "database"),
        logger=_decode_section(LoggerConfig, data.get("logger"), "logger"),
    )


_OVERRIDES = (
    ("SERVER_HOST", "server", "host", False),
    ("SERVER_PORT", "server", "port", False),
    ("SERVER_READ_TIMEOUT", "server", "read_timeout", True),
    ("SERVER_WRITE_TIMEOUT", "server", "write_timeout", True),
    ("SERVER_IDLE_TIMEOUT", "server", "idle_timeout", True),
    ("SERVER_MAX_HEADER_BYTES", "server", "max_header_bytes", True),
    ("SERVER_MAX_BODY_SIZE", "server", "max_body_size", True),
    ("SERVER_SHUTDOWN_TIMEOUT", "server", "shutdown_timeout", True),
    ("DB_HOST", "database", "host", False),
    ("DB_PORT", "database", "port", True),
    ("DB_USER", "database", "user", False),
    ("DB_PASSWORD", "database", "password", False),
    ("DB_NAME", "database", "dbname", False),
    ("DB_SSLMODE", "database", "sslmode", False),
    ("DB_MAX_OPEN_CONNS", "database", "max_open_conns", True),
    ("DB_MAX_IDLE_CONNS", "database", "max_idle_conns", True),
    ("DB_CONN_MAX_LIFETIME", "database", "conn_max_lifetime", True),
    ("DB_PING_TIMEOUT", "database", "ping_timeout", True),
    ("LOG_LEVEL", "logger", "level", False),
    ("LOG_FORMAT", "logger", "format", False),
)


def _apply_overrides(cfg: Config, environ: Mapping[str, str]) -> None:
    for variable, section, attr, is_int in _OVERRIDES:
        raw = environ.get(variable, "")
        if not raw:
            continue
        target = getattr(cfg, section)
        if is_int:
            if _INT_PATTERN.fullmatch(raw):
                setattr(target, attr, int(raw))
        else:
            setattr(target, attr, raw)


def load_config(
    environ: Mapping[str, str] | None = None,
    configs_dir: str | os.PathLike[str] | None = None,
) -> Config:
    """Read <configs_dir>/<CONFIG_FILE>.yaml, apply overrides and validate."""
    env = os.environ if environ is None else environ
    config_file = env.get("CONFIG_FILE") or DEFAULT_CONFIG_FILE
    directory = Path(CONFIGS_DIR if configs_dir is None else configs_dir)
    path = directory / f"{config_file}.yaml"

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"failed to read config file {path}: {exc}") from exc

    cfg = parse_config(text)
    _apply_overrides(cfg, env)

    try:
        cfg.validate()
    except ConfigError as exc:
        raise ConfigError(f"config validation failed: {exc}") from exc
    return cfg