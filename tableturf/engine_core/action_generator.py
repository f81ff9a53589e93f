"""
Action Generator - Generates all legal actions for a player.

The action generator is used by:
1. Bots to enumerate possible moves
2. The per-turn transcript sent to external agents
3. Validation tests (every generated action must re-validate)

Design: Generates Action objects, not just action types.
This ensures all generated actions are fully specified.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .action import Action, DIRECTIONS
from .card import CardCatalog
from .state import GameState
from .validator import ActionValidator


@dataclass
class ActionGenerator:
    """
    Generates legal actions for one player's hand.

    Uses the ActionValidator so that generator and validator can never
    disagree.
    """
    catalog: CardCatalog
    validator: ActionValidator = field(init=False)

    def __post_init__(self):
        self.validator = ActionValidator(catalog=self.catalog)

    def generate(self, state: GameState, player_id: int) -> list[Action]:
        """
        Generate all legal actions for a player.

        For every distinct card in hand (hand order), every direction
        and every field position: PUT candidates, then SPECIAL_PUT
        candidates when the card is affordable. One PASS per distinct
        card closes each card's block.
        """
        player = state.get_player(player_id)
        actions = []
        for card_id in dict.fromkeys(player.hand):
            card = self.catalog[card_id]
            affordable = player.special_point >= card.cost
            for direction in DIRECTIONS:
                actions.extend(self._placements(state, player_id, Action.put, card_id, direction))
                if affordable:
                    actions.extend(
                        self._placements(state, player_id, Action.special_put, card_id, direction)
                    )
            actions.append(Action.pass_turn(card_id))
        return actions

    def _placements(self, state, player_id, factory, card_id, direction) -> list[Action]:
        actions = []
        for y in range(state.field.height):
            for x in range(state.field.width):
                action = factory(card_id, direction, y, x)
                if self.validator.is_valid(state, action, player_id):
                    actions.append(action)
        return actions


def legal_actions(catalog: CardCatalog, state: GameState, player_id: int) -> list[Action]:
    """
    Convenience function to get legal actions.

    Creates an ActionGenerator and generates actions.
    """
    generator = ActionGenerator(catalog=catalog)
    return generator.generate(state, player_id)


def is_legal(catalog: CardCatalog, state: GameState, action: Action, player_id: int) -> bool:
    """Check if a specific action is among the generated legal actions."""
    return action in legal_actions(catalog, state, player_id)
