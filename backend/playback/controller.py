"""
Playback controller.

(state, event, catalog) -> (new_state, commands)

Decides which track plays next for play / resume / next / previous / stop,
applying skip-on-unavailable and loop-boundary policy.

Rules:
- Pure: no IO, no clocks, no randomness.
- User-facing errors become clarifications with state unchanged.
- Every REPLACE_ALL play clears enqueued_next.
- index_changed is consumed here (and only here) when a card is attached.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from playback import prompts
from playback.catalog import Catalog
from playback.commands import (
    Command,
    PlayAudio,
    ShowCard,
    Speak,
    StopAudio,
)
from playback.decision_log import log_decision
from playback.enums.play_behavior import PlayBehavior
from playback.errors import TrackNotFound, TrackUnavailable
from playback.events import Event, UserCommand
from playback.state_dataclass import PlaylistState


Result = tuple[PlaylistState, tuple[Command, ...]]


# =============================================================================
# Small helpers
# =============================================================================

def with_info(state: PlaylistState, **changes: Any) -> PlaylistState:
    """Copy of state with PlaybackInfo fields replaced."""
    return replace(state, info=replace(state.info, **changes))


def _is_spoken(event: Event) -> bool:
    return isinstance(event, UserCommand) and event.spoken


def _clarify(
    state: PlaylistState,
    event: Event,
    text: str,
    decision: str,
    details: dict[str, Any],
) -> Result:
    return state, (
        Speak(text=text, reprompt=prompts.ASK_FOR_TRACK),
        ShowCard(title="", content=text),
        log_decision(state, event, decision, details),
    )


def _boundary_stop(
    state: PlaylistState,
    event: Event,
    text: str,
    decision: str,
) -> Result:
    return state, (
        Speak(text=text),
        StopAudio(),
        log_decision(state, event, decision),
    )


def _start_stream(
    state: PlaylistState,
    event: Event,
    catalog: Catalog,
) -> Result:
    """Emit REPLACE_ALL for order[index] at the stored offset."""
    info = state.info
    catalog_index = info.order[info.index]
    track = catalog.track_at(catalog_index)

    show_card = _is_spoken(event) and info.index_changed

    new_state = with_info(
        state,
        enqueued_next=False,
        index_changed=info.index_changed and not show_card,
    )

    commands: list[Command] = [
        Speak(text=track.name, end_session=True),
        PlayAudio(
            behavior=PlayBehavior.REPLACE_ALL,
            url=track.url,
            token=str(catalog_index),
            offset_ms=info.offset_ms,
            expected_previous_token=None,
        ),
    ]

    if show_card:
        commands.append(
            ShowCard(
                title=prompts.now_playing_title(track.id),
                content=track.name,
            )
        )

    commands.append(
        log_decision(
            new_state,
            event,
            "play",
            {
                "track_id": track.id,
                "catalog_index": catalog_index,
                "card": show_card,
            },
        )
    )
    return new_state, tuple(commands)


# =============================================================================
# Public operations
# =============================================================================

def play(
    state: PlaylistState,
    event: Event,
    catalog: Catalog,
    *,
    hops: int = 0,
) -> Result:
    """
    Resume / continue: play order[index] from offset_ms.

    If the current track is unavailable, skip forward with next_track,
    whichever way the caller was moving. hops bounds the number of
    consecutive skips so a catalog made entirely of unavailable tracks
    terminates.
    """
    info = state.info
    catalog_index = info.order[info.index]

    if not catalog.is_unavailable(catalog_index):
        return _start_stream(state, event, catalog)

    if hops >= len(catalog):
        return _boundary_stop(state, event, prompts.NOTHING_PLAYABLE, "nothing_playable")

    skipped = log_decision(
        state,
        event,
        "skip_unavailable",
        {"track_id": catalog.track_at(catalog_index).id},
    )

    new_state, commands = next_track(state, event, catalog, hops=hops + 1)

    return new_state, commands + (skipped,)


def play_request(
    state: PlaylistState,
    event: Event,
    catalog: Catalog,
    slot_value: str | None,
) -> Result:
    """
    Play an explicitly requested track (by number or by name).

    A new request always starts from the top of the track. The card flag
    is raised when the request moves to a different position.
    """
    try:
        catalog_index = catalog.resolve(slot_value)
    except TrackNotFound as e:
        return _clarify(
            state,
            event,
            prompts.track_not_found(e.slot_value),
            "track_not_found",
            {"slot_value": e.slot_value},
        )
    except TrackUnavailable as e:
        return _clarify(
            state,
            event,
            prompts.track_unavailable(e.track_id),
            "track_unavailable",
            {"track_id": e.track_id},
        )

    info = state.info
    position = info.order.index(catalog_index)

    new_state = with_info(
        state,
        index=position,
        offset_ms=0,
        enqueued_next=False,
        index_changed=info.index_changed or position != info.index,
    )
    return _start_stream(new_state, event, catalog)


def next_track(
    state: PlaylistState,
    event: Event,
    catalog: Catalog,
    *,
    hops: int = 0,
) -> Result:
    """Advance one position; stop at the end of the list unless looping."""
    candidate = (state.info.index + 1) % len(catalog)

    if candidate == 0 and not state.setting.loop:
        return _boundary_stop(state, event, prompts.END_OF_LIST, "end_of_list")

    new_state = with_info(state, index=candidate, offset_ms=0, index_changed=True)
    return play(new_state, event, catalog, hops=hops)


def previous_track(
    state: PlaylistState,
    event: Event,
    catalog: Catalog,
) -> Result:
    """Step back one position; stop at the start of the list unless looping."""
    candidate = state.info.index - 1

    if candidate == -1:
        if not state.setting.loop:
            return _boundary_stop(state, event, prompts.START_OF_LIST, "start_of_list")
        candidate = len(catalog) - 1

    new_state = with_info(state, index=candidate, offset_ms=0, index_changed=True)
    return play(new_state, event, catalog)


def stop(state: PlaylistState, event: Event) -> Result:
    """Pause: position is preserved for a later resume."""
    return state, (
        StopAudio(),
        log_decision(state, event, "stop"),
    )
