"""
Session lifecycle: load-before-handle, save-after-handle.

Responsibilities:
- Detect a first-ever request and write default state (first write wins)
- Load and validate stored state for every request
- Reset playback position if the catalog size changed underneath it
- Persist state after every handled request

Non-responsibilities:
- No routing or playback decisions (see playback.reducer)
- No per-user serialization (see session.gateway)
"""

from __future__ import annotations

import time

from observability.logger import log_event
from playback.catalog import Catalog
from playback.errors import CatalogSizeMismatch
from playback.order import identity
from playback.state_dataclass import PlaybackInfo, PlaybackSetting, PlaylistState
from session.serialization import (
    from_attributes,
    setting_from_attributes,
    to_attributes,
)
from session.store import SessionStore


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def default_state(catalog: Catalog) -> PlaylistState:
    """State written for a user on their first request."""
    return PlaylistState(
        setting=PlaybackSetting(loop=False, shuffle=False),
        info=PlaybackInfo(
            order=identity(len(catalog)),
            index=0,
            offset_ms=0,
            token="",
            enqueued_next=False,
            in_session=False,
            had_prior_session=False,
            index_changed=True,
        ),
    )


async def ensure_initialized(
    store: SessionStore,
    user_id: str,
    catalog: Catalog,
) -> PlaylistState:
    """
    Return the user's stored state, creating defaults on first use.

    Raises:
        PersistedStateError if the stored document is invalid.
    """
    attributes = await store.load(user_id)

    if not attributes:
        created = await store.create(user_id, to_attributes(default_state(catalog)))
        log_event({
            "ts_ms": _now_ms(),
            "event_type": "SESSION_STATE_INITIALIZED",
            "user_id": user_id,
            "created": created,
        })
        # Another request may have won the create; read back the winner.
        attributes = await store.load(user_id)
        if not attributes:
            return default_state(catalog)

    try:
        return from_attributes(attributes, catalog_size=len(catalog))
    except CatalogSizeMismatch as e:
        log_event({
            "ts_ms": _now_ms(),
            "event_type": "PLAYBACK_INFO_RESET",
            "level": "WARNING",
            "user_id": user_id,
            "stored_order_len": e.stored,
            "catalog_len": e.expected,
        })
        return PlaylistState(
            setting=setting_from_attributes(attributes),
            info=default_state(catalog).info,
        )


async def persist(
    store: SessionStore,
    user_id: str,
    state: PlaylistState,
    *,
    previous: PlaylistState,
) -> None:
    """
    Save state after a request, changed or not.

    A failed save is always logged. It is re-raised only when the request
    actually changed state; a read-only request keeps its response.
    """
    try:
        await store.save(user_id, to_attributes(state))
    except Exception as exc:  # pylint: disable=broad-exception-caught
        log_event({
            "ts_ms": _now_ms(),
            "event_type": "SESSION_STATE_SAVE_FAILED",
            "level": "ERROR",
            "user_id": user_id,
            "state_changed": state != previous,
            "exception": type(exc).__name__,
            "message": str(exc),
        })
        if state != previous:
            raise
