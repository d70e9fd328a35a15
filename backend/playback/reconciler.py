"""
Player lifecycle reconciler.

(state, player_event, catalog) -> (new_state, commands)

Transitions:
- PlaybackStarted:        adopt token/index, in_session=True, had_prior_session=True
- PlaybackStopped:        adopt token/index, store offset (in_session untouched)
- PlaybackFinished:       in_session=False, had_prior_session=False, enqueued_next=False
- PlaybackNearlyFinished: at most one ENQUEUE per track, never past the end
                          unless looping
- PlaybackFailed:         in_session=False, log, no directive

A token that is not part of the current order is a consistency fault: it is
logged and the index is left where it was.
"""

from __future__ import annotations

from playback.catalog import Catalog
from playback.commands import Command, PlayAudio
from playback.controller import Result, with_info
from playback.decision_log import log_decision
from playback.enums.play_behavior import PlayBehavior
from playback.errors import TokenConsistencyFault, UnroutableEvent
from playback.events import (
    PlaybackFailed,
    PlaybackFinished,
    PlaybackNearlyFinished,
    PlaybackStarted,
    PlaybackStopped,
    PlayerEvent,
)
from playback.state_dataclass import PlaylistState


# =============================================================================
# Helpers
# =============================================================================

def position_of(order: tuple[int, ...], token: str) -> int:
    """
    Map a player token back to its play-order position.

    Raises:
        TokenConsistencyFault if the token is not a catalog index in order.
    """
    try:
        return order.index(int(token))
    except ValueError as e:
        raise TokenConsistencyFault(token) from e


def _adopt_token(
    state: PlaylistState,
    event: PlayerEvent,
) -> tuple[PlaylistState, tuple[Command, ...]]:
    try:
        index = position_of(state.info.order, event.token)
    except TokenConsistencyFault as e:
        new_state = with_info(state, token=event.token)
        return new_state, (
            log_decision(
                new_state,
                event,
                "token_consistency_fault",
                {"error": type(e).__name__, "message": str(e)},
            ),
        )

    return with_info(state, token=event.token, index=index), ()


def _enqueue_position(state: PlaylistState, catalog: Catalog) -> int | None:
    """
    Play-order position to queue after the current one, or None at the end
    of the list when not looping.

    Availability is not checked here; an unavailable successor comes back
    from the player as PlaybackFailed.
    """
    position = (state.info.index + 1) % len(catalog)
    if position == 0 and not state.setting.loop:
        return None
    return position


# =============================================================================
# Reconciler entrypoint
# =============================================================================

def reconcile(
    state: PlaylistState,
    event: PlayerEvent,
    catalog: Catalog,
) -> Result:
    """Apply one player lifecycle event to the loaded state."""
    if isinstance(event, PlaybackStarted):
        adopted, faults = _adopt_token(state, event)
        new_state = with_info(adopted, in_session=True, had_prior_session=True)
        return new_state, faults + (log_decision(new_state, event, "playback_started"),)

    if isinstance(event, PlaybackStopped):
        adopted, faults = _adopt_token(state, event)
        new_state = with_info(adopted, offset_ms=max(event.offset_ms, 0))
        return new_state, faults + (log_decision(new_state, event, "playback_stopped"),)

    if isinstance(event, PlaybackFinished):
        new_state = with_info(
            state,
            in_session=False,
            had_prior_session=False,
            enqueued_next=False,
        )
        return new_state, (log_decision(new_state, event, "playback_finished"),)

    if isinstance(event, PlaybackNearlyFinished):
        if state.info.enqueued_next:
            return state, (
                log_decision(state, event, "ignore", {"reason": "already_enqueued"}),
            )

        position = _enqueue_position(state, catalog)
        if position is None:
            return state, (
                log_decision(state, event, "ignore", {"reason": "end_of_list"}),
            )

        catalog_index = state.info.order[position]
        track = catalog.track_at(catalog_index)
        new_state = with_info(state, enqueued_next=True)

        return new_state, (
            PlayAudio(
                behavior=PlayBehavior.ENQUEUE,
                url=track.url,
                token=str(catalog_index),
                offset_ms=0,
                expected_previous_token=state.info.token,
            ),
            log_decision(
                new_state,
                event,
                "enqueue_next",
                {"track_id": track.id, "catalog_index": catalog_index},
            ),
        )

    if isinstance(event, PlaybackFailed):
        new_state = with_info(state, in_session=False)
        return new_state, (
            log_decision(
                new_state,
                event,
                "upstream_playback_failure",
                {"failed_token": event.token, "error": event.error or {}},
            ),
        )

    raise UnroutableEvent(event.event_type.value, "unknown player event")
