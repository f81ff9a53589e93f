"""
API Module - HTTP interface for analysis tools.

Exposes the engine as a stateless REST API:
1. Enumerate legal actions for a position
2. Replay a match record turn by turn
3. Simulate matches between built-in policies

Live network play is not offered.
"""

from .schemas import (
    # Requests
    LegalActionsRequest,
    ReplayRequest,
    SimulateRequest,
    # Responses
    LegalActionsResponse,
    ReplayResponse,
    SimulateResponse,
    HealthResponse,
    ErrorResponse,
    ErrorCode,
    # Shared
    PlayerSnapshot,
    SnapshotInfo,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "LegalActionsRequest",
    "ReplayRequest",
    "SimulateRequest",
    # Responses
    "LegalActionsResponse",
    "ReplayResponse",
    "SimulateResponse",
    "HealthResponse",
    "ErrorResponse",
    "ErrorCode",
    # Shared
    "PlayerSnapshot",
    "SnapshotInfo",
    # Service
    "APIService",
    "create_app",
]
