"""
Pure playback reducer.

(state, event) -> (new_state, commands)

Rules:
- Pure: no side effects, no IO, no clocks. Randomness only via injected rng.
- Deterministic: output depends only on inputs (and the rng's seed).
- Total: every event is routed or explicitly rejected with UnroutableEvent.

Routing mirrors the conversation handler table: several commands are only
meaningful while a track is playing or paused (in_session), and
Confirm/Deny only outside of it.
"""

from __future__ import annotations

import random

from playback import prompts
from playback.catalog import Catalog
from playback.commands import Command, ShowCard, Speak
from playback.controller import (
    Result,
    next_track,
    play,
    play_request,
    previous_track,
    stop,
)
from playback.decision_log import log_decision, logs_last
from playback.errors import UnroutableEvent
from playback.events import (
    CancelOrStop,
    Confirm,
    Deny,
    Event,
    Help,
    LaunchSession,
    LoopOff,
    LoopOn,
    Next,
    Pause,
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
)
from playback.modes import (
    restart_from_beginning,
    set_loop,
    set_shuffle,
    start_over,
)
from playback.reconciler import reconcile
from playback.state_dataclass import PlaylistState


# =============================================================================
# Non-playback responses
# =============================================================================

def _launch(state: PlaylistState, event: Event, catalog: Catalog) -> Result:
    info = state.info
    if info.had_prior_session and not info.in_session:
        track = catalog.track_at(info.order[info.index])
        return state, (
            Speak(
                text=prompts.resume_question(track.name),
                reprompt=prompts.RESUME_REPROMPT,
            ),
            log_decision(state, event, "offer_resume", {"track_id": track.id}),
        )

    return state, (
        Speak(text=prompts.WELCOME, reprompt=prompts.ASK_FOR_TRACK),
        ShowCard(title="", content=prompts.WELCOME),
        log_decision(state, event, "welcome"),
    )


def _help(state: PlaylistState, event: Event) -> Result:
    return state, (
        Speak(text=prompts.HELP, reprompt=prompts.HELP),
        ShowCard(title=prompts.HELP_CARD_TITLE, content=prompts.HELP),
        log_decision(state, event, "help"),
    )


def _unroutable(event: Event, reason: str) -> UnroutableEvent:
    return UnroutableEvent(event.event_type.value, reason)


# =============================================================================
# Reducer entrypoint
# =============================================================================

def reduce(
    state: PlaylistState,
    event: Event,
    *,
    catalog: Catalog,
    rng: random.Random | None = None,
) -> tuple[PlaylistState, tuple[Command, ...]]:
    """
    Pure reducer for the playlist state machine.

    Given the loaded playlist state and a single event, returns:
    - the next state (to be persisted)
    - a tuple of commands (response content + LogEvents, logs last)

    Raises:
        UnroutableEvent when no handler accepts the event in this state.
    """
    new_state, commands = _route(state, event, catalog, rng)
    return new_state, logs_last(commands)


def _route(
    state: PlaylistState,
    event: Event,
    catalog: Catalog,
    rng: random.Random | None,
) -> Result:
    in_session = state.info.in_session

    # ------------------------------------------------------------------
    # Device / platform
    # ------------------------------------------------------------------
    if isinstance(event, UnsupportedDevice):
        return state, (
            Speak(text=prompts.NO_AUDIO_PLAYER, end_session=True),
            log_decision(state, event, "unsupported_device"),
        )

    if isinstance(event, PlayerEvent):
        return reconcile(state, event, catalog)

    if isinstance(event, SystemExceptionEncountered):
        return state, (
            log_decision(state, event, "system_exception", {"reason": event.reason}),
        )

    if isinstance(event, SessionEnded):
        return state, (
            log_decision(state, event, "session_ended", {"reason": event.reason}),
        )

    if isinstance(event, UnrecognizedRequest):
        raise _unroutable(event, f"unrecognized request {event.request_type}")

    # ------------------------------------------------------------------
    # Always available
    # ------------------------------------------------------------------
    if isinstance(event, LaunchSession):
        return _launch(state, event, catalog)

    if isinstance(event, Help):
        return _help(state, event)

    if isinstance(event, PlayByNameOrNumber):
        return play_request(state, event, catalog, event.slot_value)

    if isinstance(event, Resume):
        return play(state, event, catalog)

    # ------------------------------------------------------------------
    # Outside a session
    # ------------------------------------------------------------------
    if not in_session:
        if isinstance(event, Confirm):
            return play(state, event, catalog)

        if isinstance(event, Deny):
            return restart_from_beginning(state, event, catalog)

        if isinstance(event, CancelOrStop):
            return state, (
                Speak(text=prompts.GOODBYE),
                log_decision(state, event, "goodbye"),
            )

        raise _unroutable(event, "not in playback session")

    # ------------------------------------------------------------------
    # Inside a session
    # ------------------------------------------------------------------
    if isinstance(event, Next):
        return next_track(state, event, catalog)

    if isinstance(event, Previous):
        return previous_track(state, event, catalog)

    if isinstance(event, (Pause, CancelOrStop)):
        return stop(state, event)

    if isinstance(event, LoopOn):
        return set_loop(state, event, True)

    if isinstance(event, LoopOff):
        return set_loop(state, event, False)

    if isinstance(event, ShuffleOn):
        return set_shuffle(state, event, catalog, True, rng)

    if isinstance(event, ShuffleOff):
        return set_shuffle(state, event, catalog, False, rng)

    if isinstance(event, StartOver):
        return start_over(state, event, catalog)

    raise _unroutable(event, "not available during playback")
