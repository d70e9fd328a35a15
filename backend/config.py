"""
Application configuration.

Responsibilities:
- Load deployment-specific configuration
- Read environment variables
- Provide a typed, immutable config object

Non-responsibilities:
- No playback logic
- No wire constants (see constants.py)
- No runtime mutation
"""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable application configuration.

    Constructed once at process startup.
    Passed downward to the app factory, store factory and gateway.
    """

    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------

    env: str = "dev"
    log_level: str = "INFO"

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    catalog_path: str = "data/catalog.example.json"

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    store_backend: str = "memory"
    store_path: str = "data/playback_state.json"

    # ------------------------------------------------------------------
    # Shuffle
    # ------------------------------------------------------------------

    # Fixed seed for reproducible demos; None draws from the OS.
    shuffle_seed: int | None = None

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @staticmethod
    def load_from_env() -> AppConfig:
        """
        Load configuration from environment variables.

        Raises:
            ValueError if SHUFFLE_SEED is set but not an integer.
        """
        raw_seed = os.environ.get("SHUFFLE_SEED")
        return AppConfig(
            env=os.environ.get("ENV", "dev"),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),

            catalog_path=os.environ.get("CATALOG_PATH", "data/catalog.example.json"),

            store_backend=os.environ.get("STORE_BACKEND", "memory"),
            store_path=os.environ.get("STORE_PATH", "data/playback_state.json"),

            shuffle_seed=int(raw_seed) if raw_seed else None,
        )
