"""
Session gateway: one inbound request envelope -> one response envelope.

Responsibilities:
- Decode the request envelope into an event (protocol.envelope)
- Serialize requests per user (one in flight per user id per process)
- Load-or-initialize stored state, run the reducer, persist the result
- Execute LogEvent commands emitted by the reducer
- Turn any handler failure into a "please repeat" response (an empty one
  for player lifecycle requests)

NOT responsible for:
- Routing or playback decisions (playback.reducer)
- Validating stored documents (session.serialization)
- HTTP concerns (server.routes)
"""

from __future__ import annotations

import asyncio
import random
import time
import weakref
from dataclasses import dataclass
from typing import Any, Mapping

from observability.logger import log_event
from observability.metrics import timed
from playback import prompts
from playback.catalog import Catalog
from playback.commands import Command, LogEvent, Speak
from playback.errors import PlaylistError
from playback.events import Event, PlayerEvent
from playback.reducer import reduce
from playback.state_dataclass import PlaylistState
from protocol.envelope import RequestMeta, decode_request, encode_response
from session.lifecycle import ensure_initialized, persist
from session.store import SessionStore


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def _apology(event: Event) -> tuple[Command, ...]:
    # Player lifecycle requests accept no speech in the response.
    if isinstance(event, PlayerEvent):
        return ()
    return (Speak(text=prompts.PLEASE_REPEAT, reprompt=prompts.PLEASE_REPEAT),)


# ------------------------------------------------------------------
# Gateway result
# ------------------------------------------------------------------

@dataclass(frozen=True)
class GatewayResult:
    """
    Return value for handle_request.

    response:
        Response envelope to send back to the platform

    state:
        Playlist state after the request (None if it was never loaded)
    """
    response: dict[str, Any]
    state: PlaylistState | None = None


# ------------------------------------------------------------------
# SessionGateway
# ------------------------------------------------------------------

class SessionGateway:
    """
    One gateway per process, shared by all users.

    The catalog and store are injected; rng drives shuffle only.
    """

    def __init__(
        self,
        *,
        catalog: Catalog,
        store: SessionStore,
        rng: random.Random | None = None,
    ) -> None:
        self._catalog = catalog
        self._store = store
        self._rng = rng
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    def _lock_for(self, user_id: str) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock

    async def handle_request(self, envelope: Mapping[str, Any]) -> GatewayResult:
        """
        Handle one platform request.

        Raises:
            EnvelopeProtocolError if the envelope cannot be attributed to a
            user or request type. Nothing is loaded or stored in that case.
        """
        meta, event = decode_request(envelope, ts_ms=_now_ms())

        lock = self._lock_for(meta.user_id)
        async with lock:
            with timed(
                "request_handling",
                user_id=meta.user_id,
                request_id=meta.request_id,
                details={"request_type": meta.request_type, "intent": meta.intent_name},
            ) as extra:
                state: PlaylistState | None = None
                try:
                    state = await ensure_initialized(
                        self._store, meta.user_id, self._catalog
                    )
                    new_state, commands = reduce(
                        state, event, catalog=self._catalog, rng=self._rng
                    )
                except Exception as exc:  # pylint: disable=broad-exception-caught
                    self._log_handler_failure(meta, event.event_type.value, exc)
                    extra["failed"] = True
                    new_state = state
                    commands = _apology(event)

                self._execute_logs(meta, commands)

                # Unreadable stored state is left as-is for inspection.
                if state is not None and new_state is not None:
                    await persist(self._store, meta.user_id, new_state, previous=state)

                return GatewayResult(
                    response=encode_response(commands),
                    state=new_state,
                )

    # ------------------------------------------------------------------
    # Command execution
    # ------------------------------------------------------------------

    def _execute_logs(self, meta: RequestMeta, commands: tuple[Command, ...]) -> None:
        for cmd in commands:
            if isinstance(cmd, LogEvent):
                log_event({
                    **cmd.event,
                    "user_id": meta.user_id,
                    "request_id": meta.request_id,
                })

    def _log_handler_failure(
        self,
        meta: RequestMeta,
        event_type: str,
        exc: Exception,
    ) -> None:
        log_event({
            "ts_ms": _now_ms(),
            "event_type": "REQUEST_HANDLER_FAILED",
            "level": "WARNING" if isinstance(exc, PlaylistError) else "ERROR",
            "user_id": meta.user_id,
            "request_id": meta.request_id,
            "request_type": meta.request_type,
            "intent": meta.intent_name,
            "dropped_event": event_type,
            "exception": type(exc).__name__,
            "message": str(exc),
        })
