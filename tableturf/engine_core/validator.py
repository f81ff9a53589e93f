"""
Action Validator - Legality of a proposed action.

Rules:
- PASS: the card is in the player's hand.
- PUT: every square of the oriented card lands inside the field on an
  empty square, and at least one of them touches (8-neighborhood) a
  colored or special square of the player.
- SPECIAL_PUT: the player can pay the card's cost, every square lands
  inside the field on a square that is neither special nor block, and
  at least one of them touches a special square of the player.

PUT and SPECIAL_PUT also require the card to be held by the player.
"""

from __future__ import annotations
from dataclasses import dataclass

from .action import Action, ActionType
from .card import CardCatalog
from .grid import FieldSquare
from .state import GameState


@dataclass
class ActionValidator:
    """
    Pure legality predicate.

    Stateless - the catalog is the only thing it holds on to.
    """
    catalog: CardCatalog

    def is_valid(self, state: GameState, action: Action, player_id: int) -> bool:
        return self.check(state, action, player_id) is None

    def check(self, state: GameState, action: Action, player_id: int) -> str | None:
        """
        Validate an action for a player.

        Returns an error message if invalid, None if valid.
        """
        player = state.get_player(player_id)
        if action.card_id not in player.hand:
            return f"Card {action.card_id} not in hand"

        if action.action_type is ActionType.PASS:
            return None

        card = self.catalog.get(action.card_id)
        if card is None:
            return f"Card {action.card_id} not in catalog"

        if action.action_type is ActionType.SPECIAL_PUT:
            if player.special_point < card.cost:
                return (
                    f"Special point {player.special_point} is below the cost {card.cost} "
                    f"of card {action.card_id}"
                )
            return self._check_placement(
                state,
                action,
                player_id,
                can_cover=_special_put_can_cover,
                is_anchor=lambda square: square.is_special and square.owner == player_id,
            )

        return self._check_placement(
            state,
            action,
            player_id,
            can_cover=_put_can_cover,
            is_anchor=lambda square: square.owned_by(player_id),
        )

    def _check_placement(self, state, action, player_id, can_cover, is_anchor) -> str | None:
        field = state.field
        card = self.catalog[action.card_id]

        touches_anchor = False
        for cy, cx, _ in card.placement(action.direction, action.y, action.x):
            if not field.in_bounds(cy, cx):
                return f"Square ({cy}, {cx}) is outside the field"
            if not can_cover(field.at(cy, cx)):
                return f"Square ({cy}, {cx}) is occupied"
            if not touches_anchor:
                touches_anchor = any(
                    is_anchor(field.at(ny, nx)) for ny, nx in field.neighbors(cy, cx)
                )

        if not touches_anchor:
            if action.action_type is ActionType.SPECIAL_PUT:
                return "Placement does not touch a special square of the player"
            return "Placement does not touch a square of the player"
        return None


def _put_can_cover(square: FieldSquare) -> bool:
    return square.is_empty


def _special_put_can_cover(square: FieldSquare) -> bool:
    return not (square.is_special or square.is_block)


def is_valid_action(catalog: CardCatalog, state: GameState, action: Action, player_id: int) -> bool:
    """Convenience wrapper around ActionValidator."""
    return ActionValidator(catalog=catalog).is_valid(state, action, player_id)
