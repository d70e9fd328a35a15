"""
FastAPI app factory.

Responsibilities:
- Create and configure FastAPI app
- Apply log level from config
- Initialize shared resources (catalog, store, shuffle rng, gateway)
- Register routes
"""

from __future__ import annotations

import random
import time

from fastapi import FastAPI

from config import AppConfig

from observability import logger
from observability.logger import log_event
from playback.catalog import load_catalog
from session.gateway import SessionGateway
from session.store import SessionStore, build_store

from server.routes import register_routes


def create_app(
    config: AppConfig | None = None,
    *,
    store: SessionStore | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    This is the app factory pattern that allows:
    - Testing with different configurations (and an injected store)
    - Environment-specific setup
    - ASGI server compatibility

    Raises:
        CatalogError if the catalog file is missing or invalid.
    """
    if config is None:
        config = AppConfig.load_from_env()

    logger.configure(config.log_level)

    app = FastAPI(title="Playlist Skill API")

    app.state.config = config

    # Catalog and store are built ONCE per process
    catalog = load_catalog(config.catalog_path)

    app.state.gateway = SessionGateway(
        catalog=catalog,
        store=store if store is not None else build_store(config),
        rng=random.Random(config.shuffle_seed),
    )

    log_event({
        "ts_ms": time.time_ns() // 1_000_000,
        "event_type": "APP_STARTED",
        "env": config.env,
        "catalog_size": len(catalog),
        "store_backend": config.store_backend,
    })

    # Routes
    register_routes(app)

    return app
