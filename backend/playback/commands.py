"""
Output command definitions for the playback reducer.

Rules:
- Commands are declarative requests for side effects or response content.
- Commands are emitted by the reducer and executed/encoded by the gateway.
- No behavior, no async, no I/O, no clocks.
Invariant:
    - All concrete Command subclasses MUST be frozen dataclasses.
    - Commands are immutable value objects emitted by the reducer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from playback.enums.play_behavior import PlayBehavior


# =============================================================================
# Command Type Enumeration
# =============================================================================

class CommandType(str, Enum):
    """
    Canonical command types emitted by the reducer.

    These are stable discriminants used for logging and response encoding.
    """

    # Audio player directives
    PLAY_AUDIO = "PLAY_AUDIO"
    STOP_AUDIO = "STOP_AUDIO"

    # Spoken / visual response
    SPEAK = "SPEAK"
    SHOW_CARD = "SHOW_CARD"

    # Observability
    LOG_EVENT = "LOG_EVENT"


# =============================================================================
# Base Command
# =============================================================================

class Command:
    """
    Base command type.

    command_type is an explicit discriminant and must never be inferred
    from Python type identity.
    """

    command_type: CommandType


# =============================================================================
# Audio Player Directives
# =============================================================================

@dataclass(frozen=True)
class PlayAudio(Command):
    """
    Start or queue a stream on the device's audio player.

    expected_previous_token is only meaningful for ENQUEUE: the player
    switches to this stream only after the named stream finishes.
    """
    behavior: PlayBehavior
    url: str
    token: str
    offset_ms: int = 0
    expected_previous_token: str | None = None
    command_type: CommandType = CommandType.PLAY_AUDIO


@dataclass(frozen=True)
class StopAudio(Command):
    """Stop the audio player. Position is kept by the player event stream."""
    command_type: CommandType = CommandType.STOP_AUDIO


# =============================================================================
# Response Content
# =============================================================================

@dataclass(frozen=True)
class Speak(Command):
    """
    Spoken output.

    reprompt keeps the microphone open for an answer.
    end_session=None leaves the platform default in place.
    """
    text: str
    reprompt: str | None = None
    end_session: bool | None = None
    command_type: CommandType = CommandType.SPEAK


@dataclass(frozen=True)
class ShowCard(Command):
    """Simple companion-app card."""
    title: str
    content: str
    command_type: CommandType = CommandType.SHOW_CARD


# =============================================================================
# Observability Commands
# =============================================================================

@dataclass(frozen=True)
class LogEvent(Command):
    """Request to emit a structured observability event."""
    event: dict[str, Any]
    command_type: CommandType = CommandType.LOG_EVENT
