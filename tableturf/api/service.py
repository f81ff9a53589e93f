"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Turns engine failures into ErrorResponse objects
3. Formats responses

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

from .. import __version__, config
from ..bots.policy import create_policy
from ..catalog.builtin import straight_street
from ..catalog.loader import load_catalog
from ..engine_core.action_generator import ActionGenerator
from ..engine_core.card import CardCatalog, build_catalog
from ..engine_core.decoding import DecodeError
from ..engine_core.errors import ConfigurationError, GameOverError, InvalidActionError
from ..engine_core.grid import FieldShape
from ..engine_core.state import GameState, PlayerState
from ..session.match import MatchRunner
from ..session.record import replay
from .schemas import (
    ErrorCode,
    ErrorResponse,
    HealthResponse,
    LegalActionsRequest,
    LegalActionsResponse,
    ReplayRequest,
    ReplayResponse,
    SimulateRequest,
    SimulateResponse,
    SnapshotInfo,
)

logger = logging.getLogger(__name__)


def _default_catalog() -> CardCatalog:
    return load_catalog(config.TABLETURF_CATALOG)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        response = service.legal_actions(request)
        if isinstance(response, ErrorResponse):
            ...
    """
    catalog: CardCatalog = field(default_factory=_default_catalog)
    field_shape: FieldShape = field(default_factory=straight_street)

    def health(self) -> HealthResponse:
        return HealthResponse(
            status="healthy",
            service="tableturf-engine",
            version=__version__,
            environment=config.TABLETURF_ENV,
            card_count=len(self.catalog),
        )

    def legal_actions(self, request: LegalActionsRequest) -> LegalActionsResponse | ErrorResponse:
        """Enumerate the legal actions of one player in a given position."""
        try:
            catalog = (
                build_catalog(record.to_card() for record in request.cards)
                if request.cards is not None else self.catalog
            )
            field_shape = FieldShape.from_text("\n".join(request.field_rows))
        except DecodeError as e:
            return _error(ErrorCode.DECODE_ERROR, str(e), row=e.row, column=e.column)
        except ConfigurationError as e:
            return _error(ErrorCode.INVALID_CONFIGURATION, str(e))

        ids = [p.player_id for p in request.players]
        if ids != list(range(len(ids))):
            return _error(ErrorCode.INVALID_REQUEST, "players must be listed by id starting at 0")
        if request.player_id >= len(ids):
            return _error(ErrorCode.INVALID_REQUEST, f"Unknown player id {request.player_id}")
        unknown = sorted({
            card_id for p in request.players for card_id in p.hand if card_id not in catalog
        })
        if unknown:
            return _error(ErrorCode.INVALID_REQUEST, f"Unknown card ids {unknown}")

        state = GameState(
            turn=request.turn,
            field=field_shape,
            players=[
                PlayerState(player_id=p.player_id, special_point=p.special_point, hand=list(p.hand))
                for p in request.players
            ],
        )
        actions = ActionGenerator(catalog=catalog).generate(state, request.player_id)
        return LegalActionsResponse(
            player_id=request.player_id,
            turn=request.turn,
            count=len(actions),
            actions=[action.encode() for action in actions],
        )

    def replay(self, request: ReplayRequest) -> ReplayResponse | ErrorResponse:
        """Re-resolve a match record and return its snapshots."""
        try:
            result = replay(request.record)
            states = result.snapshots[-1:] if request.final_only else result.snapshots
            snapshots = [
                SnapshotInfo(
                    turn=state.turn,
                    field_rows=state.field.to_rows(),
                    special_points=state.special_points,
                    scores=state.scores(),
                )
                for state in states
            ]
        except InvalidActionError as e:
            return _error(
                ErrorCode.INVALID_ACTION,
                str(e),
                players=e.player_ids,
            )
        except (ConfigurationError, GameOverError, ValueError) as e:
            # ValueError: wrong action count, or squares with no field glyph
            return _error(ErrorCode.INVALID_CONFIGURATION, str(e))

        return ReplayResponse(
            finished=result.finished,
            winner=result.winner,
            scores=result.scores,
            turns=len(result.snapshots) - 1,
            snapshots=snapshots,
        )

    def simulate(self, request: SimulateRequest) -> SimulateResponse | ErrorResponse:
        """Play one match between built-in policies."""
        try:
            policies = [
                create_policy(name, seed=None if request.seed is None else request.seed + i)
                for i, name in enumerate(request.policies)
            ]
        except ValueError as e:
            return _error(ErrorCode.UNKNOWN_POLICY, str(e))

        try:
            env = request.environment.to_environment()
            runner = MatchRunner(env, self.catalog, self.field_shape, policies, seed=request.seed)
            result = runner.play()
        except ConfigurationError as e:
            return _error(ErrorCode.INVALID_CONFIGURATION, str(e))

        logger.info(
            "simulated %s: winner=%s scores=%s", request.policies, result.winner, result.scores
        )
        return SimulateResponse(
            winner=result.winner,
            scores=result.scores,
            turns_played=result.turns_played,
            forfeited_by=result.forfeited_by,
            player_names=runner.names,
            record=result.record if request.include_record else None,
        )


def _error(code: ErrorCode, message: str, **details) -> ErrorResponse:
    logger.debug("request failed (%s): %s", code.value, message)
    return ErrorResponse(
        error=message,
        error_code=code,
        details={k: v for k, v in details.items() if v is not None} or None,
    )
