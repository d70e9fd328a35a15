# pylint: disable=missing-module-docstring,missing-function-docstring

import pytest

from playback.commands import LogEvent, PlayAudio, ShowCard, Speak, StopAudio
from playback.enums.play_behavior import PlayBehavior
from playback.events import (
    CancelOrStop,
    EventType,
    LaunchSession,
    Next,
    PlaybackFailed,
    PlaybackNearlyFinished,
    PlayByNameOrNumber,
    SessionEnded,
    UnrecognizedRequest,
    UnsupportedDevice,
)
from protocol.envelope import (
    MalformedEnvelope,
    MissingUserId,
    decode_request,
    encode_response,
)


def _envelope(request, *, audio_player=True, user_id="amzn1.ask.account.TEST"):
    interfaces = {"AudioPlayer": {}} if audio_player else {}
    return {
        "session": {"user": {"userId": user_id}},
        "context": {
            "System": {
                "user": {"userId": user_id},
                "device": {"supportedInterfaces": interfaces},
            }
        },
        "request": {"requestId": "req-1", **request},
    }


def _intent(name, slots=None):
    intent = {"name": name}
    if slots is not None:
        intent["slots"] = slots
    return {"type": "IntentRequest", "intent": intent}


def test_launch_request():
    meta, event = decode_request(_envelope({"type": "LaunchRequest"}), ts_ms=5)

    assert isinstance(event, LaunchSession)
    assert event.ts_ms == 5
    assert meta.user_id == "amzn1.ask.account.TEST"
    assert meta.request_id == "req-1"
    assert meta.request_type == "LaunchRequest"


def test_play_intent_carries_slot_value():
    envelope = _envelope(
        _intent("PlaySongByName", {"NameOrNumber": {"name": "NameOrNumber", "value": "12"}})
    )

    meta, event = decode_request(envelope, ts_ms=1)

    assert isinstance(event, PlayByNameOrNumber)
    assert event.slot_value == "12"
    assert event.spoken is True
    assert meta.intent_name == "PlaySongByName"


def test_play_intent_without_slot_value():
    _, event = decode_request(_envelope(_intent("PlaySongByName", {})), ts_ms=1)

    assert isinstance(event, PlayByNameOrNumber)
    assert event.slot_value is None


@pytest.mark.parametrize("name", ["AMAZON.StopIntent", "AMAZON.CancelIntent"])
def test_stop_and_cancel_share_an_event(name):
    _, event = decode_request(_envelope(_intent(name)), ts_ms=1)

    assert isinstance(event, CancelOrStop)


def test_hardware_buttons_are_not_spoken():
    _, event = decode_request(
        _envelope({"type": "PlaybackController.NextCommandIssued"}), ts_ms=1
    )

    assert isinstance(event, Next)
    assert event.spoken is False


def test_player_event_carries_token_and_offset():
    _, event = decode_request(
        _envelope({
            "type": "AudioPlayer.PlaybackNearlyFinished",
            "token": "7",
            "offsetInMilliseconds": 181_000,
        }),
        ts_ms=1,
    )

    assert isinstance(event, PlaybackNearlyFinished)
    assert event.event_type is EventType.PLAYBACK_NEARLY_FINISHED
    assert event.token == "7"
    assert event.offset_ms == 181_000


def test_playback_failed_carries_error():
    _, event = decode_request(
        _envelope({
            "type": "AudioPlayer.PlaybackFailed",
            "token": "2",
            "error": {"type": "MEDIA_ERROR_SERVICE_UNAVAILABLE", "message": "503"},
        }),
        ts_ms=1,
    )

    assert isinstance(event, PlaybackFailed)
    assert event.error == {"type": "MEDIA_ERROR_SERVICE_UNAVAILABLE", "message": "503"}


def test_device_without_audio_player():
    _, event = decode_request(
        _envelope({"type": "LaunchRequest"}, audio_player=False), ts_ms=1
    )

    assert isinstance(event, UnsupportedDevice)


def test_session_ended_is_decoded_on_any_device():
    _, event = decode_request(
        _envelope({"type": "SessionEndedRequest", "reason": "USER_INITIATED"}, audio_player=False),
        ts_ms=1,
    )

    assert isinstance(event, SessionEnded)
    assert event.reason == "USER_INITIATED"


def test_unknown_intent_and_request_type():
    _, event = decode_request(_envelope(_intent("AMAZON.FallbackIntent")), ts_ms=1)
    assert isinstance(event, UnrecognizedRequest)
    assert event.request_type == "IntentRequest:AMAZON.FallbackIntent"

    _, event = decode_request(_envelope({"type": "Display.ElementSelected"}), ts_ms=1)
    assert isinstance(event, UnrecognizedRequest)


def test_user_id_falls_back_to_session():
    envelope = _envelope({"type": "LaunchRequest"})
    del envelope["context"]["System"]["user"]

    meta, _ = decode_request(envelope, ts_ms=1)

    assert meta.user_id == "amzn1.ask.account.TEST"


def test_missing_user_id_is_rejected():
    with pytest.raises(MissingUserId):
        decode_request(_envelope({"type": "LaunchRequest"}, user_id=""), ts_ms=1)


@pytest.mark.parametrize("envelope", [
    [],
    {},
    {"request": "LaunchRequest"},
    {"request": {"requestId": "x"}},
])
def test_malformed_envelopes(envelope):
    with pytest.raises(MalformedEnvelope):
        decode_request(envelope, ts_ms=1)


def test_invalid_offset_is_malformed():
    with pytest.raises(MalformedEnvelope):
        decode_request(
            _envelope({
                "type": "AudioPlayer.PlaybackStopped",
                "token": "1",
                "offsetInMilliseconds": "soon",
            }),
            ts_ms=1,
        )


# -------------------------
# Encoding
# -------------------------

def test_speech_with_reprompt_keeps_session_open():
    body = encode_response([Speak(text="Hello", reprompt="Say a number")])

    assert body["version"] == "1.0"
    assert body["response"] == {
        "outputSpeech": {"type": "PlainText", "text": "Hello"},
        "reprompt": {"outputSpeech": {"type": "PlainText", "text": "Say a number"}},
        "shouldEndSession": False,
    }


def test_play_response_with_card():
    body = encode_response([
        Speak(text="Track 3", end_session=True),
        PlayAudio(
            behavior=PlayBehavior.REPLACE_ALL,
            url="https://media.test/003.mp3",
            token="2",
            offset_ms=900,
            expected_previous_token="1",
        ),
        ShowCard(title="Now playing track 3", content="Track 3"),
        LogEvent(event={"decision": "play"}),
    ])

    response = body["response"]
    assert response["shouldEndSession"] is True
    assert response["card"] == {
        "type": "Simple",
        "title": "Now playing track 3",
        "content": "Track 3",
    }
    assert response["directives"] == [{
        "type": "AudioPlayer.Play",
        "playBehavior": "REPLACE_ALL",
        "audioItem": {
            "stream": {
                "url": "https://media.test/003.mp3",
                "token": "2",
                "offsetInMilliseconds": 900,
            }
        },
    }]


def test_enqueue_carries_expected_previous_token():
    body = encode_response([
        PlayAudio(
            behavior=PlayBehavior.ENQUEUE,
            url="https://media.test/004.mp3",
            token="3",
            expected_previous_token="2",
        )
    ])

    (directive,) = body["response"]["directives"]
    assert directive["playBehavior"] == "ENQUEUE"
    assert directive["audioItem"]["stream"]["expectedPreviousToken"] == "2"
    assert directive["audioItem"]["stream"]["offsetInMilliseconds"] == 0


def test_stop_directive_and_empty_response():
    assert encode_response([StopAudio()])["response"] == {
        "directives": [{"type": "AudioPlayer.Stop"}]
    }
    assert encode_response([LogEvent(event={})]) == {"version": "1.0", "response": {}}
