"""
Engine Core - Deterministic game state and turn resolution.

The engine is the runtime that:
1. Parses field and card shapes
2. Builds the GameState from an Environment, a catalog and decks
3. Validates and generates legal actions
4. Resolves each turn's batch of simultaneous actions
5. Decides the outcome of a finished game

The core does no I/O and no logging.
"""

from .errors import (
    TableturfError,
    ConfigurationError,
    InvalidActionError,
    ExhaustedDeckError,
    GameOverError,
    EmptyShapeError,
)
from .decoding import DecodeError, DecodeResult
from .grid import (
    ShapeGrid,
    FieldShape,
    CardShape,
    FieldSquare,
    FieldSquareKind,
    CardSquare,
    EMPTY,
    BLOCK,
)
from .action import Action, ActionType, Direction, MulliganAction, DIRECTIONS
from .card import CardDefinition, CardCatalog, build_catalog
from .environment import Environment
from .state import GameState, PlayerState
from .validator import ActionValidator, is_valid_action
from .action_generator import ActionGenerator, legal_actions, is_legal
from .reducer import TurnResolver, TurnReport, resolve_turn, apply_turn
from .outcome import Outcome, determine_outcome, is_win, is_lose, is_draw, winner
from .transcript import (
    InitialInput,
    TurnTranscript,
    initial_input_text,
    hand_text,
    parse_initial_input,
    parse_hand,
    parse_turn_transcript,
)

__all__ = [
    "TableturfError",
    "ConfigurationError",
    "InvalidActionError",
    "ExhaustedDeckError",
    "GameOverError",
    "EmptyShapeError",
    "DecodeError",
    "DecodeResult",
    "ShapeGrid",
    "FieldShape",
    "CardShape",
    "FieldSquare",
    "FieldSquareKind",
    "CardSquare",
    "EMPTY",
    "BLOCK",
    "Action",
    "ActionType",
    "Direction",
    "MulliganAction",
    "DIRECTIONS",
    "CardDefinition",
    "CardCatalog",
    "build_catalog",
    "Environment",
    "GameState",
    "PlayerState",
    "ActionValidator",
    "is_valid_action",
    "ActionGenerator",
    "legal_actions",
    "is_legal",
    "TurnResolver",
    "TurnReport",
    "resolve_turn",
    "apply_turn",
    "Outcome",
    "determine_outcome",
    "is_win",
    "is_lose",
    "is_draw",
    "winner",
    "InitialInput",
    "TurnTranscript",
    "initial_input_text",
    "hand_text",
    "parse_initial_input",
    "parse_hand",
    "parse_turn_transcript",
]
