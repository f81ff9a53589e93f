"""
Configuration from environment variables.

    TABLETURF_ENV        deployment name (default "development")
    TABLETURF_CATALOG    path to a JSON card catalog (built-in set if unset)
    TABLETURF_LOG_LEVEL  log level for entry points (default "INFO")
    TABLETURF_AGENT_TIMEOUT  seconds an agent process gets per answer (default 10)
    ALLOWED_ORIGINS      CORS origins for the API, comma separated (default "*")
"""

import os

from .engine_core.environment import Environment

TABLETURF_ENV = os.getenv("TABLETURF_ENV", "development")
TABLETURF_CATALOG = os.getenv("TABLETURF_CATALOG") or None
TABLETURF_LOG_LEVEL = os.getenv("TABLETURF_LOG_LEVEL", "INFO")
AGENT_TIMEOUT = float(os.getenv("TABLETURF_AGENT_TIMEOUT", "10"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

# Standard match: 15-card decks, 4 cards in hand, 12 turns.
DEFAULT_ENVIRONMENT = Environment(
    player_size=2,
    deck_size=15,
    hand_size=4,
    max_turn=12,
    duplicate_pick=False,
)
