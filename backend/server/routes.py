"""
Route registration for the playlist skill API.

Responsibilities:
- Define HTTP endpoints
- Hand request envelopes to the gateway
- Pull dependencies from app.state
"""

from __future__ import annotations

import json
import time
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from observability.logger import log_event
from protocol.envelope import EnvelopeProtocolError
from session.gateway import SessionGateway


def _reject(reason: str, detail: str) -> JSONResponse:
    log_event({
        "ts_ms": time.time_ns() // 1_000_000,
        "event_type": "ENVELOPE_REJECTED",
        "level": "WARNING",
        "reason": reason,
        "message": detail,
    })
    return JSONResponse(status_code=400, content={"error": reason, "detail": detail})


def register_routes(app: FastAPI) -> None:
    """Register all routes on the FastAPI app."""
    @app.get("/health")
    async def health() -> dict[str, str]: # pyright: ignore[reportUnusedFunction]
        return {"status": "ok"}

    @app.post("/skill")
    async def skill(request: Request) -> Any: # pyright: ignore[reportUnusedFunction]
        try:
            envelope = await request.json()
        except json.JSONDecodeError as e:
            return _reject("invalid_json", str(e))

        gateway: SessionGateway = app.state.gateway

        try:
            result = await gateway.handle_request(envelope)
        except EnvelopeProtocolError as e:
            return _reject(type(e).__name__, str(e))

        return result.response
