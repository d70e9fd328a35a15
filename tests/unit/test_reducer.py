# pylint: disable=missing-module-docstring,missing-function-docstring

import pytest

from playback import prompts
from playback.commands import LogEvent, PlayAudio, ShowCard, Speak, StopAudio
from playback.errors import UnroutableEvent
from playback.events import (
    CancelOrStop,
    Confirm,
    Deny,
    EventType,
    Help,
    LaunchSession,
    Next,
    Pause,
    PlaybackStarted,
    PlayByNameOrNumber,
    Previous,
    SessionEnded,
    ShuffleOn,
    SystemExceptionEncountered,
    UnrecognizedRequest,
    UnsupportedDevice,
)
from playback.order import identity
from playback.reducer import reduce
from playback.state_dataclass import PlaybackInfo, PlaybackSetting, PlaylistState


def _state(index=0, in_session=False, had_prior_session=False, loop=False):
    return PlaylistState(
        setting=PlaybackSetting(loop=loop),
        info=PlaybackInfo(
            order=identity(10),
            index=index,
            token=str(index),
            in_session=in_session,
            had_prior_session=had_prior_session,
        ),
    )


def _speech(commands):
    return [c.text for c in commands if isinstance(c, Speak)]


def test_reducer_emits_logevent_with_required_fields(catalog):
    event = Next(event_type=EventType.NEXT, ts_ms=123)

    _, commands = reduce(_state(index=2, in_session=True), event, catalog=catalog)

    log_events = [c for c in commands if isinstance(c, LogEvent)]
    assert log_events, "Reducer must emit at least one LogEvent"

    payload = log_events[0].event
    for key in (
        "ts_ms",
        "event_type",
        "decision",
        "index",
        "token",
        "in_session",
        "loop",
        "shuffle",
        "details",
    ):
        assert key in payload

    assert payload["ts_ms"] == 123
    assert payload["event_type"] == "NEXT"


def test_log_events_come_last(catalog):
    event = ShuffleOn(event_type=EventType.SHUFFLE_ON, ts_ms=1)

    _, commands = reduce(_state(in_session=True), event, catalog=catalog)

    kinds = [isinstance(c, LogEvent) for c in commands]
    assert kinds == sorted(kinds)
    assert kinds.count(True) >= 2


def test_catalog_of_ten_next_at_last_index_stops(catalog):
    state = _state(index=9, in_session=True)

    new_state, commands = reduce(
        state, Next(event_type=EventType.NEXT, ts_ms=1), catalog=catalog
    )

    assert new_state.info.index == 9
    assert any(isinstance(c, StopAudio) for c in commands)
    assert not any(isinstance(c, PlayAudio) for c in commands)


def test_first_launch_welcomes_with_card(catalog):
    new_state, commands = reduce(
        _state(), LaunchSession(event_type=EventType.LAUNCH_SESSION, ts_ms=1), catalog=catalog
    )

    assert new_state == _state()
    assert _speech(commands) == [prompts.WELCOME]
    assert any(isinstance(c, ShowCard) for c in commands)


def test_launch_after_interrupted_session_offers_resume(catalog):
    state = _state(index=4, had_prior_session=True)

    _, commands = reduce(
        state, LaunchSession(event_type=EventType.LAUNCH_SESSION, ts_ms=1), catalog=catalog
    )

    (speech,) = [c for c in commands if isinstance(c, Speak)]
    assert speech.text == prompts.resume_question("Track 5")
    assert speech.reprompt == prompts.RESUME_REPROMPT


def test_confirm_resumes_outside_session(catalog):
    state = _state(index=4, had_prior_session=True)

    _, commands = reduce(state, Confirm(event_type=EventType.CONFIRM, ts_ms=1), catalog=catalog)

    assert [c.token for c in commands if isinstance(c, PlayAudio)] == ["4"]


def test_deny_restarts_from_first_position(catalog):
    state = _state(index=4, had_prior_session=True)

    new_state, commands = reduce(state, Deny(event_type=EventType.DENY, ts_ms=1), catalog=catalog)

    assert new_state.info.index == 0
    assert new_state.info.had_prior_session is False
    assert [c.token for c in commands if isinstance(c, PlayAudio)] == ["0"]


@pytest.mark.parametrize("event_cls,event_type", [
    (Next, EventType.NEXT),
    (Previous, EventType.PREVIOUS),
    (Pause, EventType.PAUSE),
    (ShuffleOn, EventType.SHUFFLE_ON),
])
def test_session_commands_are_unroutable_outside_session(catalog, event_cls, event_type):
    with pytest.raises(UnroutableEvent):
        reduce(_state(), event_cls(event_type=event_type, ts_ms=1), catalog=catalog)


@pytest.mark.parametrize("event_cls,event_type", [
    (Confirm, EventType.CONFIRM),
    (Deny, EventType.DENY),
])
def test_yes_no_are_unroutable_inside_session(catalog, event_cls, event_type):
    with pytest.raises(UnroutableEvent):
        reduce(
            _state(in_session=True),
            event_cls(event_type=event_type, ts_ms=1),
            catalog=catalog,
        )


def test_cancel_outside_session_says_goodbye(catalog):
    new_state, commands = reduce(
        _state(), CancelOrStop(event_type=EventType.CANCEL_OR_STOP, ts_ms=1), catalog=catalog
    )

    assert new_state == _state()
    assert _speech(commands) == [prompts.GOODBYE]


def test_cancel_inside_session_stops_audio(catalog):
    state = _state(index=3, in_session=True)

    new_state, commands = reduce(
        state, CancelOrStop(event_type=EventType.CANCEL_OR_STOP, ts_ms=1), catalog=catalog
    )

    assert new_state == state
    assert any(isinstance(c, StopAudio) for c in commands)


def test_play_request_is_available_outside_session(catalog):
    event = PlayByNameOrNumber(
        event_type=EventType.PLAY_BY_NAME_OR_NUMBER, ts_ms=1, slot_value="track 8"
    )

    new_state, commands = reduce(_state(), event, catalog=catalog)

    assert new_state.info.index == 7
    assert [c.token for c in commands if isinstance(c, PlayAudio)] == ["7"]


def test_help_is_always_available(catalog):
    _, commands = reduce(_state(), Help(event_type=EventType.HELP, ts_ms=1), catalog=catalog)

    assert _speech(commands) == [prompts.HELP]


def test_unsupported_device_ends_conversation(catalog):
    _, commands = reduce(
        _state(),
        UnsupportedDevice(event_type=EventType.UNSUPPORTED_DEVICE, ts_ms=1),
        catalog=catalog,
    )

    (speech,) = [c for c in commands if isinstance(c, Speak)]
    assert speech.text == prompts.NO_AUDIO_PLAYER
    assert speech.end_session is True


def test_platform_notifications_only_log(catalog):
    state = _state(index=2)

    for event in (
        SessionEnded(event_type=EventType.SESSION_ENDED, ts_ms=1, reason="USER_INITIATED"),
        SystemExceptionEncountered(
            event_type=EventType.SYSTEM_EXCEPTION, ts_ms=1, reason="bad directive"
        ),
    ):
        new_state, commands = reduce(state, event, catalog=catalog)

        assert new_state == state
        assert all(isinstance(c, LogEvent) for c in commands)
        assert commands[0].event["details"]["reason"] == event.reason


def test_unrecognized_request_is_unroutable(catalog):
    event = UnrecognizedRequest(
        event_type=EventType.UNRECOGNIZED_REQUEST, ts_ms=1, request_type="Foo.Bar"
    )

    with pytest.raises(UnroutableEvent) as exc:
        reduce(_state(), event, catalog=catalog)

    assert exc.value.event_type == "UNRECOGNIZED_REQUEST"


def test_player_events_are_reconciled(catalog):
    event = PlaybackStarted(event_type=EventType.PLAYBACK_STARTED, ts_ms=1, token="6")

    new_state, _ = reduce(_state(), event, catalog=catalog)

    assert new_state.info.in_session is True
    assert new_state.info.index == 6
