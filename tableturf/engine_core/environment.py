"""
Environment - Fixed parameters of one game.
"""

from __future__ import annotations
from dataclasses import dataclass

from .errors import ConfigurationError


@dataclass(frozen=True)
class Environment:
    """
    Immutable game parameters.

    Invariant: max_turn + hand_size <= deck_size + 1, so every player
    can draw once per turn until the last turn without running dry.
    """
    player_size: int = 2
    deck_size: int = 15
    hand_size: int = 4
    max_turn: int = 12
    duplicate_pick: bool = False

    def __post_init__(self):
        errors = []
        if self.player_size < 2:
            errors.append("player_size must be >= 2")
        if self.hand_size < 1:
            errors.append("hand_size must be >= 1")
        if self.max_turn < 1:
            errors.append("max_turn must be >= 1")
        if self.deck_size < self.hand_size:
            errors.append("deck_size must be >= hand_size")
        if self.max_turn + self.hand_size > self.deck_size + 1:
            errors.append(
                f"max_turn + hand_size ({self.max_turn + self.hand_size}) "
                f"exceeds deck_size + 1 ({self.deck_size + 1})"
            )
        if errors:
            raise ConfigurationError("Invalid environment: " + "; ".join(errors))

    def header_line(self) -> str:
        """First line of the initial protocol input."""
        return (
            f"{self.player_size} {self.deck_size} {self.hand_size} "
            f"{self.max_turn} {int(self.duplicate_pick)}"
        )
