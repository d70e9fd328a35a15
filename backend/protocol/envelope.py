"""
Request/response envelope codec for the voice platform webhook.

Inbound (request envelope, JSON):
    {
      "session": {"user": {"userId": "..."}},
      "context": {"System": {"user": {"userId": "..."},
                             "device": {"supportedInterfaces": {"AudioPlayer": {}}}}},
      "request": {"type": "...", "requestId": "...",
                  "intent": {"name": "...", "slots": {"NameOrNumber": {"value": "..."}}},
                  "token": "...", "offsetInMilliseconds": 0, "error": {...},
                  "reason": "..."}
    }

Outbound (response envelope, JSON):
    {
      "version": "1.0",
      "response": {
        "outputSpeech": {"type": "PlainText", "text": "..."},
        "reprompt": {"outputSpeech": {...}},
        "card": {"type": "Simple", "title": "...", "content": "..."},
        "directives": [{"type": "AudioPlayer.Play", ...}, {"type": "AudioPlayer.Stop"}],
        "shouldEndSession": true
      }
    }

Usage example:

    meta, event = decode_request(envelope, ts_ms=now_ms)
    new_state, commands = reduce(state, event, catalog=catalog)
    body = encode_response(commands)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from constants import (
    AUDIO_PLAYER_FAILED,
    AUDIO_PLAYER_FINISHED,
    AUDIO_PLAYER_NEARLY_FINISHED,
    AUDIO_PLAYER_STARTED,
    AUDIO_PLAYER_STOPPED,
    CONTROLLER_NEXT,
    CONTROLLER_PAUSE,
    CONTROLLER_PLAY,
    CONTROLLER_PREVIOUS,
    DIRECTIVE_PLAY,
    DIRECTIVE_STOP,
    INTENT_CANCEL,
    INTENT_HELP,
    INTENT_LOOP_OFF,
    INTENT_LOOP_ON,
    INTENT_NEXT,
    INTENT_NO,
    INTENT_PAUSE,
    INTENT_PLAY_BY_NAME_OR_NUMBER,
    INTENT_PREVIOUS,
    INTENT_RESUME,
    INTENT_SHUFFLE_OFF,
    INTENT_SHUFFLE_ON,
    INTENT_START_OVER,
    INTENT_STOP,
    INTENT_YES,
    REQUEST_INTENT,
    REQUEST_LAUNCH,
    REQUEST_SESSION_ENDED,
    REQUEST_SYSTEM_EXCEPTION,
    RESPONSE_VERSION,
    SLOT_NAME_OR_NUMBER,
)
from playback.commands import Command, PlayAudio, ShowCard, Speak, StopAudio
from playback.enums.play_behavior import PlayBehavior
from playback.events import (
    CancelOrStop,
    Confirm,
    Deny,
    Event,
    EventType,
    Help,
    LaunchSession,
    LoopOff,
    LoopOn,
    Next,
    Pause,
    PlaybackFailed,
    PlaybackFinished,
    PlaybackNearlyFinished,
    PlaybackStarted,
    PlaybackStopped,
    PlayByNameOrNumber,
    PlayerEvent,
    Previous,
    Resume,
    SessionEnded,
    ShuffleOff,
    ShuffleOn,
    StartOver,
    SystemExceptionEncountered,
    UnrecognizedRequest,
    UnsupportedDevice,
    UserCommand,
)


# -------------------------
# Exceptions
# -------------------------

class EnvelopeProtocolError(Exception):
    """Base class for envelope protocol errors."""


class MalformedEnvelope(EnvelopeProtocolError):
    """
    Raised when the envelope is not shaped like a platform request.

    The request cannot be attributed to a user or a request type and must
    be rejected without touching any stored state.
    """


class MissingUserId(EnvelopeProtocolError):
    """Raised when neither context nor session carries a user id."""


# -------------------------
# Decoded request metadata
# -------------------------

@dataclass(frozen=True)
class RequestMeta:
    """Who sent the request and what it was, for logging and store keys."""
    user_id: str
    request_id: str | None
    request_type: str
    intent_name: str | None = None


# -------------------------
# Routing tables
# -------------------------

_INTENT_EVENTS: dict[str, tuple[type[UserCommand], EventType]] = {
    INTENT_RESUME: (Resume, EventType.RESUME),
    INTENT_PAUSE: (Pause, EventType.PAUSE),
    INTENT_STOP: (CancelOrStop, EventType.CANCEL_OR_STOP),
    INTENT_CANCEL: (CancelOrStop, EventType.CANCEL_OR_STOP),
    INTENT_NEXT: (Next, EventType.NEXT),
    INTENT_PREVIOUS: (Previous, EventType.PREVIOUS),
    INTENT_LOOP_ON: (LoopOn, EventType.LOOP_ON),
    INTENT_LOOP_OFF: (LoopOff, EventType.LOOP_OFF),
    INTENT_SHUFFLE_ON: (ShuffleOn, EventType.SHUFFLE_ON),
    INTENT_SHUFFLE_OFF: (ShuffleOff, EventType.SHUFFLE_OFF),
    INTENT_START_OVER: (StartOver, EventType.START_OVER),
    INTENT_YES: (Confirm, EventType.CONFIRM),
    INTENT_NO: (Deny, EventType.DENY),
    INTENT_HELP: (Help, EventType.HELP),
}

_CONTROLLER_EVENTS: dict[str, tuple[type[UserCommand], EventType]] = {
    CONTROLLER_PLAY: (Resume, EventType.RESUME),
    CONTROLLER_PAUSE: (Pause, EventType.PAUSE),
    CONTROLLER_NEXT: (Next, EventType.NEXT),
    CONTROLLER_PREVIOUS: (Previous, EventType.PREVIOUS),
}

_PLAYER_EVENTS: dict[str, tuple[type[PlayerEvent], EventType]] = {
    AUDIO_PLAYER_STARTED: (PlaybackStarted, EventType.PLAYBACK_STARTED),
    AUDIO_PLAYER_STOPPED: (PlaybackStopped, EventType.PLAYBACK_STOPPED),
    AUDIO_PLAYER_NEARLY_FINISHED: (PlaybackNearlyFinished, EventType.PLAYBACK_NEARLY_FINISHED),
    AUDIO_PLAYER_FINISHED: (PlaybackFinished, EventType.PLAYBACK_FINISHED),
    AUDIO_PLAYER_FAILED: (PlaybackFailed, EventType.PLAYBACK_FAILED),
}


# -------------------------
# Low-level helpers
# -------------------------

def _dig(data: Any, *keys: str) -> Any:
    """Walk nested mappings; None as soon as a level is missing."""
    for key in keys:
        if not isinstance(data, Mapping):
            return None
        data = data.get(key)
    return data


def _user_id(envelope: Mapping[str, Any]) -> str:
    user_id = _dig(envelope, "context", "System", "user", "userId") or _dig(
        envelope, "session", "user", "userId"
    )
    if not isinstance(user_id, str) or not user_id:
        raise MissingUserId("Envelope carries no user id")
    return user_id


def supports_audio_player(envelope: Mapping[str, Any]) -> bool:
    interfaces = _dig(envelope, "context", "System", "device", "supportedInterfaces")
    return isinstance(interfaces, Mapping) and "AudioPlayer" in interfaces


def _offset_ms(request: Mapping[str, Any]) -> int:
    raw = request.get("offsetInMilliseconds", 0)
    try:
        return max(int(raw), 0)
    except (TypeError, ValueError) as e:
        raise MalformedEnvelope(f"Invalid offsetInMilliseconds: {raw!r}") from e


# -------------------------
# Request → Event
# -------------------------

def decode_request(
    envelope: Mapping[str, Any],
    *,
    ts_ms: int,
) -> tuple[RequestMeta, Event]:
    """
    Decode a platform request envelope into request metadata and one event.
    """
    if not isinstance(envelope, Mapping):
        raise MalformedEnvelope("Envelope must be a JSON object")

    request = envelope.get("request")
    if not isinstance(request, Mapping):
        raise MalformedEnvelope("Envelope has no 'request' object")

    request_type = request.get("type")
    if not isinstance(request_type, str) or not request_type:
        raise MalformedEnvelope("Request has no 'type'")

    intent_name = _dig(request, "intent", "name")
    meta = RequestMeta(
        user_id=_user_id(envelope),
        request_id=request.get("requestId"),
        request_type=request_type,
        intent_name=intent_name if isinstance(intent_name, str) else None,
    )

    return meta, _event_for(envelope, request, request_type, meta.intent_name, ts_ms)


def _event_for(
    envelope: Mapping[str, Any],
    request: Mapping[str, Any],
    request_type: str,
    intent_name: str | None,
    ts_ms: int,
) -> Event:
    if request_type in _PLAYER_EVENTS:
        cls, event_type = _PLAYER_EVENTS[request_type]
        token = request.get("token")
        kwargs: dict[str, Any] = {
            "event_type": event_type,
            "ts_ms": ts_ms,
            "token": str(token) if token is not None else "",
            "offset_ms": _offset_ms(request),
        }
        if cls is PlaybackFailed:
            error = request.get("error")
            kwargs["error"] = dict(error) if isinstance(error, Mapping) else None
        return cls(**kwargs)

    if request_type == REQUEST_SESSION_ENDED:
        return SessionEnded(
            event_type=EventType.SESSION_ENDED,
            ts_ms=ts_ms,
            reason=request.get("reason"),
        )

    if request_type == REQUEST_SYSTEM_EXCEPTION:
        return SystemExceptionEncountered(
            event_type=EventType.SYSTEM_EXCEPTION,
            ts_ms=ts_ms,
            reason=_dig(request, "error", "message") or request.get("reason"),
        )

    if not supports_audio_player(envelope):
        return UnsupportedDevice(event_type=EventType.UNSUPPORTED_DEVICE, ts_ms=ts_ms)

    if request_type == REQUEST_LAUNCH:
        return LaunchSession(event_type=EventType.LAUNCH_SESSION, ts_ms=ts_ms)

    if request_type in _CONTROLLER_EVENTS:
        cls, event_type = _CONTROLLER_EVENTS[request_type]
        return cls(event_type=event_type, ts_ms=ts_ms, spoken=False)

    if request_type == REQUEST_INTENT:
        if intent_name == INTENT_PLAY_BY_NAME_OR_NUMBER:
            slot_value = _dig(request, "intent", "slots", SLOT_NAME_OR_NUMBER, "value")
            return PlayByNameOrNumber(
                event_type=EventType.PLAY_BY_NAME_OR_NUMBER,
                ts_ms=ts_ms,
                spoken=True,
                slot_value=slot_value if isinstance(slot_value, str) else None,
            )

        if intent_name in _INTENT_EVENTS:
            cls, event_type = _INTENT_EVENTS[intent_name]
            return cls(event_type=event_type, ts_ms=ts_ms, spoken=True)

        return UnrecognizedRequest(
            event_type=EventType.UNRECOGNIZED_REQUEST,
            ts_ms=ts_ms,
            request_type=f"{request_type}:{intent_name}",
        )

    return UnrecognizedRequest(
        event_type=EventType.UNRECOGNIZED_REQUEST,
        ts_ms=ts_ms,
        request_type=request_type,
    )


# -------------------------
# Commands → Response
# -------------------------

def _plain_text(text: str) -> dict[str, str]:
    return {"type": "PlainText", "text": text}


def _play_directive(cmd: PlayAudio) -> dict[str, Any]:
    stream: dict[str, Any] = {
        "url": cmd.url,
        "token": cmd.token,
        "offsetInMilliseconds": cmd.offset_ms,
    }
    if cmd.behavior is PlayBehavior.ENQUEUE and cmd.expected_previous_token is not None:
        stream["expectedPreviousToken"] = cmd.expected_previous_token

    return {
        "type": DIRECTIVE_PLAY,
        "playBehavior": cmd.behavior.value,
        "audioItem": {"stream": stream},
    }


def encode_response(commands: Iterable[Command]) -> dict[str, Any]:
    """
    Encode reducer commands into a response envelope.

    LogEvent commands are ignored here (the gateway executes them).
    A command list with no response content yields an empty response.
    """
    response: dict[str, Any] = {}
    directives: list[dict[str, Any]] = []

    for cmd in commands:
        if isinstance(cmd, Speak):
            _apply_speak(response, cmd)

        elif isinstance(cmd, ShowCard):
            response["card"] = {
                "type": "Simple",
                "title": cmd.title,
                "content": cmd.content,
            }

        elif isinstance(cmd, PlayAudio):
            directives.append(_play_directive(cmd))

        elif isinstance(cmd, StopAudio):
            directives.append({"type": DIRECTIVE_STOP})

    if directives:
        response["directives"] = directives

    return {"version": RESPONSE_VERSION, "response": response}


def _apply_speak(response: dict[str, Any], cmd: Speak) -> None:
    response["outputSpeech"] = _plain_text(cmd.text)
    if cmd.reprompt is not None:
        response["reprompt"] = {"outputSpeech": _plain_text(cmd.reprompt)}
        response["shouldEndSession"] = False
    if cmd.end_session is not None:
        response["shouldEndSession"] = cmd.end_session
