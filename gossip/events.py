"""Structured test-level log output and the events read back from it."""

from __future__ import annotations

import base64
import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import IO, Any, Iterable, Iterator

from gossip.common import LEVEL_TEST, ConnectionId, GossipType
from gossip.testlog import ExactLevelFilter

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}
_FRACTION = re.compile(r"^(.*?T\d{2}:\d{2}:\d{2})(\.\d+)?(.*)$")


@dataclass
class Event:
    """One test-level log entry of a peer."""

    time: datetime | None = None
    level: int = 0
    msg: str = ""
    id: ConnectionId = ""
    msg_id: int = 0
    msg_type: GossipType = 0
    cnt: int = 0
    time_bucket: datetime | None = None


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    return str(value)


class _JsonFormatter(logging.Formatter):
    def __init__(self, conn_id: ConnectionId) -> None:
        super().__init__()
        self._conn_id = conn_id

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelno,
            "msg": record.getMessage(),
            "id": self._conn_id,
        }
        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and key not in entry:
                entry[key] = value
        return json.dumps(entry, default=_json_default)


def log_init(stream: IO[str], conn_id: ConnectionId) -> logging.Logger:
    """Create a logger writing JSON lines of test-level records to ``stream``.

    Every line carries the peer's ``conn_id`` under "id"; records of any
    other level are dropped.
    """
    logger = logging.Logger(f"gossip.test.{conn_id}", LEVEL_TEST)
    handler = logging.StreamHandler(stream)
    handler.setLevel(LEVEL_TEST)
    handler.addFilter(ExactLevelFilter(LEVEL_TEST))
    handler.setFormatter(_JsonFormatter(conn_id))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def _parse_time(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError(f"time must be a string, got {value!r}")
    text = value
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    match = _FRACTION.match(text)
    if match and match.group(2):
        fraction = match.group(2)[1:7].ljust(6, "0")
        text = f"{match.group(1)}.{fraction}{match.group(3)}"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return None if parsed == _ZERO_TIME else parsed


def _int(value: Any, name: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    return value


def _event(entry: dict[str, Any]) -> Event:
    fields = {str(key).lower(): value for key, value in entry.items()}
    msg = fields.get("msg", "")
    conn_id = fields.get("id", "")
    if not isinstance(msg, str) or not isinstance(conn_id, str):
        raise ValueError("msg and id must be strings")
    return Event(
        time=_parse_time(fields.get("time")),
        level=_int(fields.get("level"), "level"),
        msg=msg,
        id=conn_id,
        msg_id=_int(fields.get("msgid"), "msg_id"),
        msg_type=_int(fields.get("msgtype"), "msg_type"),
        cnt=_int(fields.get("cnt"), "cnt"),
        time_bucket=_parse_time(fields.get("timebucket")),
    )


def filter_log(stream: Iterable[str | bytes]) -> Iterator[Event]:
    """Yield the test-level events from a stream of JSON log lines.

    Raises :class:`ValueError` on a line that is not a valid log entry.
    """
    for line in stream:
        if isinstance(line, bytes):
            line = line.decode("utf-8")
        line = line.strip()
        if not line:
            continue
        entry = json.loads(line)
        if not isinstance(entry, dict):
            raise ValueError("a log entry must be a JSON object")
        event = _event(entry)
        if event.level != LEVEL_TEST:
            continue
        yield event