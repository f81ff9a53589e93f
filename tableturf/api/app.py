"""
FastAPI Application - REST API for match analysis.

Endpoints:
    GET    /api/v1/health          Health check
    POST   /api/v1/legal-actions   Legal actions of a player in a position
    POST   /api/v1/replay          Re-resolve a match record
    POST   /api/v1/simulate        Play a match between built-in policies

The API is stateless: it does not host live games.
All responses are JSON with explicit Pydantic schemas.

The analysis endpoints are plain functions, so FastAPI runs them in its
threadpool and a long simulation does not hold up the event loop.
"""

from typing import Union

from .. import __version__
from ..config import ALLOWED_ORIGINS


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService
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
    )

    app = FastAPI(
        title="Tableturf Engine API",
        description="""
Turn-based territory card game engine.

## Error Codes

| Code | Description |
|------|-------------|
| `INVALID_REQUEST` | Unknown player or card in the request |
| `DECODE_ERROR` | Field row or action text could not be decoded |
| `INVALID_CONFIGURATION` | Environment, catalog or decks are inconsistent |
| `INVALID_ACTION` | A recorded action is illegal when replayed |
| `UNKNOWN_POLICY` | Policy name is not registered |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    status_codes = {
        ErrorCode.INVALID_REQUEST: 400,
        ErrorCode.DECODE_ERROR: 400,
        ErrorCode.INVALID_CONFIGURATION: 422,
        ErrorCode.INVALID_ACTION: 422,
        ErrorCode.UNKNOWN_POLICY: 400,
        ErrorCode.INTERNAL_ERROR: 500,
    }

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_codes.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    # =========================================================================
    # Analysis Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/legal-actions",
        response_model=LegalActionsResponse,
        responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
        tags=["Analysis"],
        summary="Enumerate legal actions",
    )
    def legal_actions(request: LegalActionsRequest) -> Union[LegalActionsResponse, JSONResponse]:
        """
        Enumerate every legal action of `player_id` in the given position.

        Actions use the protocol encoding (`PASS 3`, `PUT 3 R 5 4`, ...).
        """
        response = api_service.legal_actions(request)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.post(
        "/api/v1/replay",
        response_model=ReplayResponse,
        responses={422: {"model": ErrorResponse}},
        tags=["Analysis"],
        summary="Replay a match record",
    )
    def replay_record(request: ReplayRequest) -> Union[ReplayResponse, JSONResponse]:
        """Re-resolve a recorded match and return the board after every turn."""
        response = api_service.replay(request)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.post(
        "/api/v1/simulate",
        response_model=SimulateResponse,
        responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
        tags=["Analysis"],
        summary="Simulate a match between policies",
    )
    def simulate(request: SimulateRequest) -> Union[SimulateResponse, JSONResponse]:
        """Play one seeded match on the server catalog and default field."""
        response = api_service.simulate(request)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return api_service.health()

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Tableturf Engine API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/api/v1/health",
        }

    return app


# For running directly: uvicorn tableturf.api.app:app
app = None
try:
    app = create_app()
except ImportError:
    # FastAPI not installed
    pass
