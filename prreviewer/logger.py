"""Structured key/value logger with request-scoped context fields."""

from __future__ import annotations

import inspect
import json
import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime
from typing import Any, Iterator, TextIO

_request_id: ContextVar[str] = ContextVar("request_id", default="")
_user_id: ContextVar[str] = ContextVar("user_id", default="")

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}
_LEVEL_NAMES = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
}
_BAD_KEY = "!BADKEY"


@contextmanager
def request_context(request_id: str | None = None, user_id: str | None = None) -> Iterator[None]:
    """Bind request and user identifiers for the enclosed block."""
    tokens = []
    if request_id is not None:
        tokens.append((_request_id, _request_id.set(request_id)))
    if user_id is not None:
        tokens.append((_user_id, _user_id.set(user_id)))
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


def get_request_id() -> str:
    return _request_id.get()


def get_user_id() -> str:
    return _user_id.get()


def extract_fields() -> list[Any]:
    """Key/value pairs for the identifiers bound in the current context."""
    fields: list[Any] = []
    if request_id := get_request_id():
        fields.extend(("request_id", request_id))
    if user_id := get_user_id():
        fields.extend(("user_id", user_id))
    return fields


def parse_level(level: str) -> int:
    """Map a level name to a logging level; unknown names mean info."""
    return _LEVELS.get(level, logging.INFO)


def _pairs(args: tuple[Any, ...] | list[Any]) -> list[tuple[str, Any]]:
    pairs: list[tuple[str, Any]] = []
    items = iter(args)
    for item in items:
        if isinstance(item, str):
            try:
                pairs.append((item, next(items)))
            except StopIteration:
                pairs.append((_BAD_KEY, item))
        else:
            pairs.append((_BAD_KEY, item))
    return pairs


def _text_token(value: Any) -> str:
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif value is None:
        text = "<nil>"
    elif isinstance(value, (list, tuple)):
        text = "[" + " ".join(str(item) for item in value) + "]"
    else:
        text = str(value)
    needs_quotes = text == "" or any(
        ch.isspace() or ch in '="\\' or not ch.isprintable() for ch in text
    )
    return json.dumps(text, ensure_ascii=False) if needs_quotes else text


class Logger:
    """Writes one JSON object or one key=value line per record."""

    def __init__(
        self,
        level: int = logging.INFO,
        fmt: str = "json",
        stream: TextIO | None = None,
        fields: tuple[Any, ...] | list[Any] = (),
    ) -> None:
        self.level = level
        self.format = fmt if fmt in ("json", "text") else "json"
        self.add_source = level == logging.DEBUG
        self._stream = stream
        self._fields: tuple[tuple[str, Any], ...] = tuple(_pairs(fields))

    def debug(self, msg: str, *args: Any) -> None:
        self._log(logging.DEBUG, msg, args)

    def info(self, msg: str, *args: Any) -> None:
        self._log(logging.INFO, msg, args)

    def warn(self, msg: str, *args: Any) -> None:
        self._log(logging.WARNING, msg, args)

    def error(self, msg: str, *args: Any) -> None:
        self._log(logging.ERROR, msg, args)

    def with_fields(self, *args: Any) -> Logger:
        """A new logger that adds the given key/value pairs to every record."""
        child = Logger(self.level, self.format, self._stream)
        child._fields = self._fields + tuple(_pairs(args))
        return child

    def with_context(self) -> Logger:
        """This logger, extended by the identifiers bound to the current request."""
        fields = extract_fields()
        if not fields:
            return self
        return self.with_fields(*fields)

    def _log(self, level: int, msg: str, args: tuple[Any, ...]) -> None:
        if level < self.level:
            return
        source = None
        if self.add_source:
            frame = inspect.currentframe()
            caller = frame.f_back.f_back if frame and frame.f_back else None
            if caller is not None:
                source = {
                    "function": caller.f_code.co_name,
                    "file": os.path.abspath(caller.f_code.co_filename),
                    "line": caller.f_lineno,
                }
        attrs = list(self._fields) + _pairs(args)
        moment = datetime.now().astimezone().isoformat(timespec="milliseconds")
        level_name = _LEVEL_NAMES.get(level, str(level))

        if self.format == "json":
            record: dict[str, Any] = {"time": moment, "level": level_name}
            if source is not None:
                record["source"] = source
            record["msg"] = msg
            record.update(attrs)
            line = json.dumps(record, default=str, ensure_ascii=False)
        else:
            parts = [f"time={moment}", f"level={level_name}"]
            if source is not None:
                parts.append(f"source={_text_token(source['file'] + ':' + str(source['line']))}")
            parts.append(f"msg={_text_token(msg)}")
            parts.extend(f"{_text_token(key)}={_text_token(value)}" for key, value in attrs)
            line = " ".join(parts)

        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(line + "\n")
        stream.flush()


def create_logger(level: str = "info", format: str = "json", stream: TextIO | None = None) -> Logger:
    """Logger for a level name and a 'json' or 'text' format."""
    return Logger(parse_level(level), format, stream)