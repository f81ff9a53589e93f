"""
Engine errors.

Every failure the core can raise derives from TableturfError. The core
never recovers from these itself; they propagate to whoever is driving
the game (match runner, API service, CLI).
"""

from __future__ import annotations
from typing import Any


class TableturfError(Exception):
    """Base class for engine errors."""


class ConfigurationError(TableturfError):
    """Game setup is inconsistent (environment, decks, catalog)."""


class InvalidActionError(TableturfError):
    """
    One or more submitted actions failed re-validation at resolve time.

    `reasons` maps player id -> why that player's action was rejected.
    The turn is rejected as a whole: no part of it was applied.
    """

    def __init__(self, reasons: dict[int, str], actions: dict[int, Any] | None = None):
        self.reasons = dict(reasons)
        self.actions = dict(actions or {})
        detail = "; ".join(f"player {pid}: {why}" for pid, why in sorted(self.reasons.items()))
        super().__init__(f"Invalid action(s) - {detail}")

    @property
    def player_ids(self) -> list[int]:
        return sorted(self.reasons)


class ExhaustedDeckError(TableturfError, AssertionError):
    """
    A draw was attempted on an empty deck.

    Unreachable while the Environment invariant holds.
    """


class GameOverError(TableturfError):
    """An operation is not allowed in the current game phase."""


class EmptyShapeError(TableturfError, ValueError):
    """A shape operation needs at least one filled cell and found none."""
