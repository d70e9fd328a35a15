"""
Structured decision records for the pure playback layer.

The controller, reconciler and reducer never write logs themselves; they
return LogEvent commands built here and the gateway executes them.
"""

from __future__ import annotations

from typing import Any

from playback.commands import Command, LogEvent
from playback.events import Event
from playback.state_dataclass import PlaylistState


def log_decision(
    state: PlaylistState,
    event: Event,
    decision: str,
    details: dict[str, Any] | None = None,
) -> LogEvent:
    info = state.info
    return LogEvent(
        event={
            "ts_ms": event.ts_ms,
            "event_type": event.event_type.value,
            "decision": decision,
            "index": info.index,
            "token": info.token,
            "offset_ms": info.offset_ms,
            "in_session": info.in_session,
            "enqueued_next": info.enqueued_next,
            "loop": state.setting.loop,
            "shuffle": state.setting.shuffle,
            "details": details or {},
        }
    )


def logs_last(commands: tuple[Command, ...]) -> tuple[Command, ...]:
    """Stable reorder: response commands first, LogEvents after."""
    non_logs: list[Command] = []
    logs: list[Command] = []

    for command in commands:
        if isinstance(command, LogEvent):
            logs.append(command)
        else:
            non_logs.append(command)

    return tuple(non_logs + logs)
