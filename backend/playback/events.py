"""
Unified event definitions for the playback reducer.

Rules:
- Events describe facts that have occurred (a user said something, the
  player reported progress).
- Events carry data only (no behavior).
- All reducer decisions are based on these events plus loaded state.
- No clocks, no IO. ts_ms is supplied by the decoder (or fake in tests).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


# =============================================================================
# Event Type Enumeration
# =============================================================================

class EventType(str, Enum):
    """
    Canonical event types understood by the reducer.

    Every event type must be explicitly routed or explicitly rejected
    (UnroutableEvent) by the reducer.
    """

    # ------------------------------------------------------------------
    # Conversation lifecycle
    # ------------------------------------------------------------------
    LAUNCH_SESSION = "LAUNCH_SESSION"
    SESSION_ENDED = "SESSION_ENDED"
    SYSTEM_EXCEPTION = "SYSTEM_EXCEPTION"
    UNSUPPORTED_DEVICE = "UNSUPPORTED_DEVICE"
    UNRECOGNIZED_REQUEST = "UNRECOGNIZED_REQUEST"

    # ------------------------------------------------------------------
    # User commands (spoken intents or hardware buttons)
    # ------------------------------------------------------------------
    PLAY_BY_NAME_OR_NUMBER = "PLAY_BY_NAME_OR_NUMBER"
    RESUME = "RESUME"
    PAUSE = "PAUSE"
    NEXT = "NEXT"
    PREVIOUS = "PREVIOUS"
    LOOP_ON = "LOOP_ON"
    LOOP_OFF = "LOOP_OFF"
    SHUFFLE_ON = "SHUFFLE_ON"
    SHUFFLE_OFF = "SHUFFLE_OFF"
    START_OVER = "START_OVER"
    CONFIRM = "CONFIRM"
    DENY = "DENY"
    HELP = "HELP"
    CANCEL_OR_STOP = "CANCEL_OR_STOP"

    # ------------------------------------------------------------------
    # Player lifecycle
    # ------------------------------------------------------------------
    PLAYBACK_STARTED = "PLAYBACK_STARTED"
    PLAYBACK_STOPPED = "PLAYBACK_STOPPED"
    PLAYBACK_NEARLY_FINISHED = "PLAYBACK_NEARLY_FINISHED"
    PLAYBACK_FINISHED = "PLAYBACK_FINISHED"
    PLAYBACK_FAILED = "PLAYBACK_FAILED"


# =============================================================================
# Base Event
# =============================================================================

@dataclass(frozen=True)
class Event:
    """
    Base event type.

    All events must specify:
    - event_type: discriminant
    - ts_ms: timestamp provided by the source (or fake in tests)
    """

    event_type: EventType
    ts_ms: int


# =============================================================================
# Conversation Lifecycle Events
# =============================================================================

@dataclass(frozen=True)
class LaunchSession(Event):
    """User opened the skill without a specific request."""


@dataclass(frozen=True)
class SessionEnded(Event):
    """Voice platform closed the conversation."""
    reason: str | None = None


@dataclass(frozen=True)
class SystemExceptionEncountered(Event):
    """Voice platform reports that a previous response was rejected."""
    reason: str | None = None


@dataclass(frozen=True)
class UnsupportedDevice(Event):
    """Request came from a device without an audio player."""


@dataclass(frozen=True)
class UnrecognizedRequest(Event):
    """Envelope decoded, but the request/intent type is not one we know."""
    request_type: str


# =============================================================================
# User Commands
# =============================================================================

@dataclass(frozen=True)
class UserCommand(Event):
    """
    Base class for user-initiated commands.

    spoken:
        True for voice intents, False for hardware playback-controller
        buttons. Only spoken commands may carry a supplementary card.
    """
    spoken: bool = True


@dataclass(frozen=True)
class PlayByNameOrNumber(UserCommand):
    """User asked for a specific track by catalog number or name."""
    slot_value: str | None = None


@dataclass(frozen=True)
class Resume(UserCommand):
    """Continue the current track from the stored offset."""


@dataclass(frozen=True)
class Pause(UserCommand):
    """Pause playback, keeping position."""


@dataclass(frozen=True)
class Next(UserCommand):
    """Skip forward."""


@dataclass(frozen=True)
class Previous(UserCommand):
    """Skip backward."""


@dataclass(frozen=True)
class LoopOn(UserCommand):
    """Enable wrap-around at list boundaries."""


@dataclass(frozen=True)
class LoopOff(UserCommand):
    """Disable wrap-around at list boundaries."""


@dataclass(frozen=True)
class ShuffleOn(UserCommand):
    """Re-derive a random play order."""


@dataclass(frozen=True)
class ShuffleOff(UserCommand):
    """Return to catalog order, keeping the current track."""


@dataclass(frozen=True)
class StartOver(UserCommand):
    """Replay the current track from the beginning."""


@dataclass(frozen=True)
class Confirm(UserCommand):
    """'Yes' outside an active session (resume prompt)."""


@dataclass(frozen=True)
class Deny(UserCommand):
    """'No' outside an active session: restart from the first track."""


@dataclass(frozen=True)
class Help(UserCommand):
    """User asked for help."""


@dataclass(frozen=True)
class CancelOrStop(UserCommand):
    """'Stop' / 'Cancel'. Pauses in session, says goodbye otherwise."""


# =============================================================================
# Player Lifecycle Events
# =============================================================================

@dataclass(frozen=True)
class PlayerEvent(Event):
    """
    Base class for audio player lifecycle notifications.

    token:
        Correlation token of the track the event refers to. Issued by a
        previous PlayAudio command (str(catalog_index)).
    offset_ms:
        Player-reported position within that track.
    """
    token: str
    offset_ms: int = 0


@dataclass(frozen=True)
class PlaybackStarted(PlayerEvent):
    """Player began playing the track identified by token."""


@dataclass(frozen=True)
class PlaybackStopped(PlayerEvent):
    """Player stopped (paused) the track identified by token."""


@dataclass(frozen=True)
class PlaybackNearlyFinished(PlayerEvent):
    """Player is ready to buffer the next track."""


@dataclass(frozen=True)
class PlaybackFinished(PlayerEvent):
    """Track played to the end."""


@dataclass(frozen=True)
class PlaybackFailed(PlayerEvent):
    """Player could not play the track."""
    error: dict[str, Any] | None = None
