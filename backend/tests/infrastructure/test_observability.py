"""Structured Logging — JSONFormatter surfaces game context fields."""

import json
import logging
from uuid import uuid4

from harbor_quest.infrastructure.observability import JSONFormatter


def _record(**extra):
    record = logging.LogRecord(
        "harbor_quest.test", logging.INFO, __file__, 1, "Round resolved", None, None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_base_fields_present():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "INFO"
    assert log["logger"] == "harbor_quest.test"
    assert log["message"] == "Round resolved"
    assert "timestamp" in log


def test_game_context_fields_surfaced():
    session_id = uuid4()
    log = json.loads(JSONFormatter().format(
        _record(session_id=session_id, score=850, hints_used=2),
    ))
    assert log["session_id"] == str(session_id)
    assert log["score"] == 850
    assert log["hints_used"] == 2
    assert "round_id" not in log
