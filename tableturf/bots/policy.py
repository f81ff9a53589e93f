"""
Bot Policy - Interface for bot decision-making.

A BotPolicy sees exactly what an external agent sees over the text
protocol (the turn transcript plus the card catalog) and picks one of
the legal actions. Policies also build their deck and answer the
opening-hand mulligan question.
"""

from __future__ import annotations
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from statistics import median
from typing import TYPE_CHECKING

from ..engine_core.action import Action, ActionType, MulliganAction
from ..engine_core.errors import ConfigurationError

if TYPE_CHECKING:
    from ..engine_core.card import CardCatalog
    from ..engine_core.environment import Environment
    from ..engine_core.grid import FieldShape
    from ..engine_core.transcript import TurnTranscript


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains:
    - The action to take
    - Explanation (for logs)
    - How many candidate actions were looked at
    """
    action: Action
    explanation: str = ""
    evaluated_actions: int = 0
    best_score: float = 0.0


def build_deck(catalog: CardCatalog, env: Environment, rng: random.Random) -> list[int]:
    """
    Pick deck_size card ids from the catalog.

    With duplicate picks the ids are drawn at random with replacement,
    otherwise the first deck_size ids in catalog order are used.
    """
    card_ids = list(catalog)
    if env.duplicate_pick:
        if not card_ids:
            raise ConfigurationError("Cannot build a deck from an empty catalog")
        return [rng.choice(card_ids) for _ in range(env.deck_size)]
    if len(card_ids) < env.deck_size:
        raise ConfigurationError(
            f"Catalog has {len(card_ids)} cards, a deck needs {env.deck_size} distinct cards"
        )
    return card_ids[:env.deck_size]


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    A policy defines how a bot selects actions.
    Implementations can range from simple heuristics
    to complex search algorithms.
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    @abstractmethod
    def select_action(
        self,
        transcript: TurnTranscript,
        catalog: CardCatalog,
        legal_actions: list[Action],
    ) -> BotDecision:
        """
        Select an action from the legal actions.

        Args:
            transcript: What the player sees this turn
            catalog: Card definitions
            legal_actions: Decoded legal actions, in transcript order

        Returns:
            BotDecision with the selected action
        """
        pass

    def begin_game(self, env: Environment, field: FieldShape, catalog: CardCatalog) -> None:
        """Called once before the deck is chosen. Default: nothing to prepare."""

    def end_game(self) -> None:
        """Called once when the match is over, including after a forfeit."""

    def select_mulligan(self, hand: list[int], catalog: CardCatalog) -> MulliganAction:
        """Keep or redraw the opening hand. Default: keep."""
        return MulliganAction.KEEP

    def choose_deck(self, catalog: CardCatalog, env: Environment) -> list[int]:
        return build_deck(catalog, env, self.rng)

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """
    Random policy - selects actions uniformly at random.

    Used for:
    - Testing
    - Baseline comparison
    - The reference agent
    """

    def select_action(
        self,
        transcript: TurnTranscript,
        catalog: CardCatalog,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        action = self.rng.choice(legal_actions)
        return BotDecision(
            action=action,
            explanation="Selected randomly",
            evaluated_actions=len(legal_actions),
        )

    def select_mulligan(self, hand: list[int], catalog: CardCatalog) -> MulliganAction:
        return self.rng.choice([MulliganAction.KEEP, MulliganAction.MULLIGAN])


class FirstLegalPolicy(BotPolicy):
    """
    First-legal policy - always selects the first legal action.

    Used for:
    - Deterministic testing
    - Baseline comparison
    """

    def select_action(
        self,
        transcript: TurnTranscript,
        catalog: CardCatalog,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        return BotDecision(
            action=legal_actions[0],
            explanation="Selected first legal action",
            evaluated_actions=1,
        )


class GreedyPolicy(BotPolicy):
    """
    Greedy policy - paints as many squares as possible this turn.

    Placements are ranked by card power, SPECIAL_PUT first among equal
    power. With no placement available it passes its weakest card.
    """

    def select_action(
        self,
        transcript: TurnTranscript,
        catalog: CardCatalog,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        def score(action: Action) -> tuple[int, int, int]:
            power = catalog[action.card_id].power
            if action.action_type is ActionType.PASS:
                return (0, -power, 0)
            return (1, power, int(action.action_type is ActionType.SPECIAL_PUT))

        best = max(legal_actions, key=score)
        best_score = score(best)
        return BotDecision(
            action=best,
            explanation=(
                f"Pass weakest card {best.card_id}" if best_score[0] == 0
                else f"Paint {best_score[1]} squares with card {best.card_id}"
            ),
            evaluated_actions=len(legal_actions),
            best_score=float(best_score[1]),
        )

    def select_mulligan(self, hand: list[int], catalog: CardCatalog) -> MulliganAction:
        """Redraw when no card in hand reaches the catalog's median power."""
        if not hand:
            return MulliganAction.KEEP
        threshold = median(card.power for card in catalog.values())
        if max(catalog[card_id].power for card_id in hand) < threshold:
            return MulliganAction.MULLIGAN
        return MulliganAction.KEEP


POLICIES: dict[str, type[BotPolicy]] = {
    "random": RandomPolicy,
    "first": FirstLegalPolicy,
    "greedy": GreedyPolicy,
}


def create_policy(name: str, seed: int | None = None) -> BotPolicy:
    """Instantiate a policy by its registry name."""
    try:
        policy_cls = POLICIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown policy {name!r}; expected one of {sorted(POLICIES)}"
        ) from None
    return policy_cls(seed=seed)
