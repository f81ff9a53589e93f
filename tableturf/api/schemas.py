"""
Pydantic Schemas for API - Request/response models for OpenAPI.

The API is a stateless analysis service: every request carries the
position or record it is about.

Error Codes:
- INVALID_REQUEST: Request is well-formed JSON but inconsistent (unknown player, unknown card)
- DECODE_ERROR: A field row or encoded action could not be decoded
- INVALID_CONFIGURATION: Environment, catalog or decks are inconsistent
- INVALID_ACTION: A recorded action is not legal when replayed
- UNKNOWN_POLICY: Policy name is not registered
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..catalog.loader import CardRecord
from ..session.record import MAX_PLAYERS, EnvironmentRecord, MatchRecord


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    INVALID_REQUEST = "INVALID_REQUEST"
    DECODE_ERROR = "DECODE_ERROR"
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
    INVALID_ACTION = "INVALID_ACTION"
    UNKNOWN_POLICY = "UNKNOWN_POLICY"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class PlayerSnapshot(BaseModel):
    """One player's private and public state."""
    player_id: int = Field(ge=0)
    special_point: int = Field(0, ge=0)
    hand: list[int] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class SnapshotInfo(BaseModel):
    """The board after a turn."""
    turn: int
    field_rows: list[str]
    special_points: list[int]
    scores: list[int]


# =============================================================================
# Request Models
# =============================================================================

class LegalActionsRequest(BaseModel):
    """A position to enumerate legal actions for."""
    field_rows: list[str] = Field(..., description="Field rows using . # y Y b B")
    players: list[PlayerSnapshot]
    player_id: int = Field(0, ge=0, description="Player to enumerate for")
    turn: int = Field(1, ge=1)
    cards: Optional[list[CardRecord]] = Field(
        None, description="Catalog to use; the server catalog when omitted"
    )


class ReplayRequest(BaseModel):
    """A match record to re-resolve."""
    record: MatchRecord
    final_only: bool = Field(False, description="Return only the last snapshot")


class SimulateRequest(BaseModel):
    """A match between built-in policies on the server catalog."""
    policies: list[str] = Field(
        default_factory=lambda: ["random", "random"], min_length=1, max_length=MAX_PLAYERS
    )
    seed: Optional[int] = None
    environment: EnvironmentRecord = Field(default_factory=EnvironmentRecord)
    include_record: bool = Field(False, description="Attach the full match record")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class LegalActionsResponse(BaseModel):
    """Legal actions in protocol encoding, generator order."""
    player_id: int
    turn: int
    count: int
    actions: list[str]


class ReplayResponse(BaseModel):
    """Snapshots of a replayed match."""
    finished: bool
    winner: Optional[int] = None
    scores: list[int]
    turns: int
    snapshots: list[SnapshotInfo] = Field(default_factory=list)


class SimulateResponse(BaseModel):
    """Summary of a simulated match."""
    winner: Optional[int] = None
    scores: list[int]
    turns_played: int
    forfeited_by: list[int] = Field(default_factory=list)
    player_names: list[str] = Field(default_factory=list)
    record: Optional[MatchRecord] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    environment: str
    card_count: int
