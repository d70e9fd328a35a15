# pylint: disable=missing-module-docstring,missing-function-docstring

import json
from typing import Any

import pytest

from observability import logger
from observability.metrics import timed


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    lines: list[str] = []

    # Patch the explicit output sink used by logger
    monkeypatch.setattr(logger, "_print", lines.append)
    # Restore whatever threshold a test configures
    monkeypatch.setattr(logger, "_threshold", logger._threshold)  # pylint: disable=protected-access
    return lines


def test_log_event_emits_valid_jsonl(captured):
    """
    Contract:
    - log_event emits exactly one JSONL line
    - payload is serialized as-is
    - output sink is patchable
    """
    payload: dict[str, Any] = {
        "event_type": "TEST",
        "value": 123,
    }

    logger.log_event(payload)

    # Exactly one line emitted
    assert len(captured) == 1

    # Must be valid JSON, payload preserved exactly
    assert json.loads(captured[0]) == payload


def test_unserializable_payload_falls_back(captured):
    logger.log_event({"ts_ms": 9, "event_type": "TEST", "value": object()})

    (line,) = captured
    decoded = json.loads(line)
    assert decoded["event_type"] == "LOGGER_SERIALIZATION_ERROR"
    assert decoded["ts_ms"] == 9


def test_events_below_configured_level_are_dropped(captured):
    logger.configure("warning")

    logger.log_event({"event_type": "QUIET"})
    logger.log_event({"event_type": "DEBUGGY", "level": "DEBUG"})
    logger.log_event({"event_type": "LOUD", "level": "ERROR"})

    assert [json.loads(line)["event_type"] for line in captured] == ["LOUD"]


def test_timed_emits_once_even_when_block_raises(captured):
    with pytest.raises(RuntimeError):
        with timed("request_handling", user_id="u1", request_id="r1") as extra:
            extra["decision"] = "play"
            raise RuntimeError("boom")

    (line,) = captured
    metric = json.loads(line)
    assert metric["event_type"] == "METRIC_TIMER"
    assert metric["metric"] == "request_handling"
    assert metric["user_id"] == "u1"
    assert metric["request_id"] == "r1"
    assert metric["details"] == {"decision": "play"}
    assert metric["value_ms"] >= 0
