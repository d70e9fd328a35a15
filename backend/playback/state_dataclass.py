"""
Authoritative playlist state container.

Rules:
- These dataclasses are a pure data model.
- They contain ALL durable state the reducer may ever need.
- No behavior, no helpers, no derived logic.
- One PlaylistState per user; it lives in the store between events.
"""
from __future__ import annotations

from dataclasses import dataclass, field


# =============================================================================
# Settings
# =============================================================================

@dataclass(frozen=True)
class PlaybackSetting:
    """User-selected playback modes."""
    loop: bool = False
    shuffle: bool = False


# =============================================================================
# Playback position
# =============================================================================

@dataclass(frozen=True)
class PlaybackInfo:
    """Where the user is in the play order."""

    # Play-order position -> catalog index. Always a permutation of range(N).
    order: tuple[int, ...] = ()

    # Current play-order position.
    index: int = 0

    # Last offset reported by the player for the current track.
    offset_ms: int = 0

    # Correlation token of the active track, str(order[index]) while active.
    token: str = ""

    # Successor already queued for gapless playback.
    # Reset whenever a new stream is started and on finish.
    enqueued_next: bool = False

    # A track is playing or paused.
    in_session: bool = False

    # Some track has started since the last finish.
    had_prior_session: bool = False

    # One-shot: index moved by navigation; consumed by the next spoken
    # response to decide whether to attach a card.
    index_changed: bool = True


# =============================================================================
# Playlist State
# =============================================================================

@dataclass(frozen=True)
class PlaylistState:
    """Immutable snapshot of one user's playback session."""

    setting: PlaybackSetting = field(default_factory=PlaybackSetting)
    info: PlaybackInfo = field(default_factory=PlaybackInfo)
