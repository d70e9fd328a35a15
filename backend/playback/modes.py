"""
Loop / shuffle / restart toggles.

Shuffle never edits the play order in place: turning it on derives a fresh
permutation, turning it off maps index back to the catalog index it points
at and restores identity order, so the same track keeps playing.
"""

from __future__ import annotations

import random
from dataclasses import replace

from playback import prompts
from playback.catalog import Catalog
from playback.commands import Speak
from playback.controller import Result, play, with_info
from playback.decision_log import log_decision
from playback.events import Event
from playback.order import identity, shuffle
from playback.state_dataclass import PlaylistState


def set_loop(state: PlaylistState, event: Event, on: bool) -> Result:
    new_state = replace(state, setting=replace(state.setting, loop=on))
    return new_state, (
        Speak(text=prompts.LOOP_ON if on else prompts.LOOP_OFF),
        log_decision(new_state, event, "loop_on" if on else "loop_off"),
    )


def set_shuffle(
    state: PlaylistState,
    event: Event,
    catalog: Catalog,
    on: bool,
    rng: random.Random | None = None,
) -> Result:
    """Toggle shuffle and immediately play under the new order."""
    if on:
        new_state = replace(
            with_info(
                state,
                order=shuffle(len(catalog), rng),
                index=0,
                offset_ms=0,
                index_changed=True,
            ),
            setting=replace(state.setting, shuffle=True),
        )
    elif state.setting.shuffle:
        info = state.info
        new_state = replace(
            with_info(
                state,
                index=info.order[info.index],
                order=identity(len(catalog)),
            ),
            setting=replace(state.setting, shuffle=False),
        )
    else:
        new_state = state

    new_state, commands = play(new_state, event, catalog)
    return new_state, commands + (
        log_decision(new_state, event, "shuffle_on" if on else "shuffle_off"),
    )


def start_over(state: PlaylistState, event: Event, catalog: Catalog) -> Result:
    """Replay the current track from offset 0."""
    return play(with_info(state, offset_ms=0), event, catalog)


def restart_from_beginning(
    state: PlaylistState,
    event: Event,
    catalog: Catalog,
) -> Result:
    """Forget the previous session and play from the first position."""
    new_state = with_info(
        state,
        index=0,
        offset_ms=0,
        index_changed=True,
        had_prior_session=False,
    )
    return play(new_state, event, catalog)
