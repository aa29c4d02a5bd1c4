import io
import json
import logging
from datetime import datetime, timezone

import pytest

from gossip.common import LEVEL_TEST
from gossip.events import Event, filter_log, log_init


def emit(logger, level, msg, **fields):
    record = logger.makeRecord(logger.name, level, __file__, 0, msg, (), None, extra=fields)
    logger.handle(record)


def test_round_trip_of_test_level_record():
    stream = io.StringIO()
    logger = log_init(stream, "127.0.0.1")
    bucket = datetime(2024, 5, 6, 7, 8, 9, 123456, tzinfo=timezone.utc)
    emit(logger, LEVEL_TEST, "hz packet sent", timeBucket=bucket, cnt=7, msgType=1337, msgId=99)

    events = list(filter_log(io.StringIO(stream.getvalue())))
    assert len(events) == 1
    event = events[0]
    assert event.msg == "hz packet sent"
    assert event.id == "127.0.0.1"
    assert event.level == LEVEL_TEST
    assert event.cnt == 7
    assert event.msg_type == 1337
    assert event.msg_id == 99
    assert event.time_bucket == bucket
    assert event.time.tzinfo is not None


def test_other_levels_are_not_written():
    stream = io.StringIO()
    logger = log_init(stream, "127.0.0.1")
    emit(logger, logging.INFO, "ignored")
    emit(logger, logging.ERROR, "ignored too")
    assert stream.getvalue() == ""


def test_written_line_is_json_with_id():
    stream = io.StringIO()
    logger = log_init(stream, "127.0.0.2")
    emit(logger, LEVEL_TEST, "received")
    entry = json.loads(stream.getvalue())
    assert entry["id"] == "127.0.0.2"
    assert entry["level"] == LEVEL_TEST
    assert entry["msg"] == "received"


def test_filter_log_skips_other_levels():
    lines = [
        json.dumps({"level": 0, "msg": "info", "id": "a"}),
        "",
        json.dumps({"level": LEVEL_TEST, "msg": "announce", "id": "b"}),
    ]
    events = list(filter_log(lines))
    assert events == [Event(level=LEVEL_TEST, msg="announce", id="b")]


def test_filter_log_accepts_bytes_and_any_key_case():
    lines = [
        json.dumps(
            {"Level": LEVEL_TEST, "Msg": "received", "MsgId": 5, "msgtype": 1337}
        ).encode()
    ]
    (event,) = filter_log(lines)
    assert event.msg_id == 5
    assert event.msg_type == 1337


def test_filter_log_parses_nanosecond_times():
    line = json.dumps(
        {"time": "2024-01-02T03:04:05.123456789Z", "level": LEVEL_TEST, "msg": "x"}
    )
    (event,) = filter_log([line])
    assert event.time == datetime(2024, 1, 2, 3, 4, 5, 123456, tzinfo=timezone.utc)


def test_filter_log_rejects_invalid_json():
    with pytest.raises(ValueError):
        list(filter_log(["{broken"]))


def test_filter_log_rejects_wrong_field_type():
    with pytest.raises(ValueError):
        list(filter_log([json.dumps({"level": "high", "msg": "x"})]))