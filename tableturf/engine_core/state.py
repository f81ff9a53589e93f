"""
Game State - Mutable per-game state.

Holds the turn counter, the field and one PlayerState per seat. Player
ids are seat indexes (0 is yellow, 1 is blue). The state is built once
per game by GameState.create(), which validates the decks and deals the
opening hands.
"""

from __future__ import annotations
from collections import Counter, deque
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Sequence

from .card import CardCatalog
from .environment import Environment
from .errors import ConfigurationError, ExhaustedDeckError, GameOverError
from .grid import FieldShape


@dataclass
class PlayerState:
    """
    State for a single player.

    `hand` keeps the order cards were drawn in; `deck` is drawn from the
    front.
    """
    player_id: int
    special_point: int = 0
    hand: list[int] = field(default_factory=list)
    deck: deque[int] = field(default_factory=deque)
    mulligan_used: bool = False

    def draw(self) -> int:
        """Move the front card of the deck into the hand."""
        if not self.deck:
            raise ExhaustedDeckError(f"Player {self.player_id} has no card left to draw")
        card_id = self.deck.popleft()
        self.hand.append(card_id)
        return card_id

    def discard(self, card_id: int) -> None:
        """Remove the first occurrence of a card from the hand."""
        self.hand.remove(card_id)

    def deal(self, cards: Sequence[int], hand_size: int) -> None:
        """Replace hand and deck with a fresh deal from `cards`."""
        self.deck = deque(cards)
        self.hand = []
        for _ in range(hand_size):
            self.draw()


@dataclass
class GameState:
    """
    Complete game state at a point in time.

    `turn` starts at 1; the game is over once it exceeds max_turn.
    """
    turn: int
    field: FieldShape
    players: list[PlayerState]

    @classmethod
    def create(
        cls,
        env: Environment,
        catalog: CardCatalog,
        field: FieldShape,
        decks: Sequence[Sequence[int]],
    ) -> GameState:
        """
        Start a game.

        Every deck must have exactly deck_size cards, all known to the
        catalog, and no repeats unless duplicate picks are enabled.
        Each player is dealt hand_size cards from the front of the deck.
        """
        if len(decks) != env.player_size:
            raise ConfigurationError(
                f"Expected {env.player_size} decks, got {len(decks)}"
            )
        for player_id, deck in enumerate(decks):
            _validate_deck(env, catalog, player_id, deck)

        players = []
        for player_id, deck in enumerate(decks):
            player = PlayerState(player_id=player_id)
            player.deal(deck, env.hand_size)
            players.append(player)

        return cls(turn=1, field=field.copy(), players=players)

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def special_points(self) -> list[int]:
        return [p.special_point for p in self.players]

    def get_player(self, player_id: int) -> PlayerState:
        if not 0 <= player_id < len(self.players):
            raise ValueError(f"Unknown player id {player_id}")
        return self.players[player_id]

    def is_done(self, env: Environment) -> bool:
        return self.turn > env.max_turn

    def count_player(self, player_id: int) -> int:
        return self.field.count_player(player_id)

    def scores(self) -> list[int]:
        return [self.field.count_player(p.player_id) for p in self.players]

    def mulligan(self, env: Environment, player_id: int, deck_order: Sequence[int]) -> None:
        """
        Redeal a player's opening hand from a new deck ordering.

        Only before the first turn is resolved, and once per player.
        The shuffle itself is the caller's job: `deck_order` must be a
        permutation of the player's current hand + deck.
        """
        if self.turn != 1:
            raise GameOverError("Mulligan is only allowed before the first turn")
        player = self.get_player(player_id)
        if player.mulligan_used:
            raise ConfigurationError(f"Player {player_id} already used their mulligan")
        current = Counter(player.hand) + Counter(player.deck)
        if Counter(deck_order) != current:
            raise ConfigurationError(
                f"Mulligan deck for player {player_id} is not a reordering of their deck"
            )
        player.deal(deck_order, env.hand_size)
        player.mulligan_used = True

    def clone(self) -> GameState:
        """Deep copy the state."""
        return deepcopy(self)


def _validate_deck(
    env: Environment,
    catalog: CardCatalog,
    player_id: int,
    deck: Sequence[int],
) -> None:
    if len(deck) != env.deck_size:
        raise ConfigurationError(
            f"Deck of player {player_id} has {len(deck)} cards, expected {env.deck_size}"
        )
    unknown = sorted({card_id for card_id in deck if card_id not in catalog})
    if unknown:
        raise ConfigurationError(f"Deck of player {player_id} has unknown card ids {unknown}")
    if not env.duplicate_pick:
        repeated = sorted(card_id for card_id, n in Counter(deck).items() if n > 1)
        if repeated:
            raise ConfigurationError(
                f"Deck of player {player_id} repeats card ids {repeated} "
                "but duplicate picks are disabled"
            )
