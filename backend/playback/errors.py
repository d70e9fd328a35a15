"""
Playback error taxonomy.

User-facing errors (TrackNotFound, TrackUnavailable) are recovered by the
controller into a spoken clarification with state unchanged. Internal
faults are either logged and tolerated (TokenConsistencyFault) or left to
propagate to the gateway catch-all (UnroutableEvent, PersistedStateError).
"""

from __future__ import annotations


class PlaylistError(Exception):
    """Base class for playlist controller errors."""


class CatalogError(PlaylistError):
    """
    Raised when a catalog definition is unusable.

    Empty track lists, duplicate ids and malformed records all land here.
    Raised at startup, never while handling a request.
    """


class TrackNotFound(PlaylistError):
    """A requested name or number matches no catalog entry."""

    def __init__(self, slot_value: str | None) -> None:
        super().__init__(f"No track matches {slot_value!r}")
        self.slot_value = slot_value


class TrackUnavailable(PlaylistError):
    """A requested track exists but is permanently excluded from playback."""

    def __init__(self, track_id: int) -> None:
        super().__init__(f"Track {track_id} is unavailable")
        self.track_id = track_id


class TokenConsistencyFault(PlaylistError):
    """
    A player lifecycle token does not map to any play-order position.

    Indicates the player and the persisted order have drifted apart
    (e.g. a late event for a token issued before a reshuffle).
    """

    def __init__(self, token: str) -> None:
        super().__init__(f"Token {token!r} is not part of the current order")
        self.token = token


class UnroutableEvent(PlaylistError):
    """No handler accepts this event in the current state."""

    def __init__(self, event_type: str, reason: str) -> None:
        super().__init__(f"Unroutable event {event_type}: {reason}")
        self.event_type = event_type
        self.reason = reason


class PersistedStateError(PlaylistError):
    """Stored attributes for a user cannot be turned into a valid state."""


class CatalogSizeMismatch(PersistedStateError):
    """Stored play order was built for a catalog of a different size."""

    def __init__(self, stored: int, expected: int) -> None:
        super().__init__(f"Stored order has {stored} entries, catalog has {expected}")
        self.stored = stored
        self.expected = expected
