"""
Text snapshot of a game for humans and logs.

    <field rows>
    t3,y2,b1
    y: 4 [yY] 7 [yyy/.Y.] ...
    b: ...

Rendering only reads the state.
"""

from __future__ import annotations

from .engine_core.card import CardCatalog
from .engine_core.grid import PLAYER_GLYPHS
from .engine_core.state import GameState


def player_label(player_id: int) -> str:
    if player_id < len(PLAYER_GLYPHS):
        return PLAYER_GLYPHS[player_id][0]
    return f"p{player_id}"


def render_status(state: GameState) -> str:
    parts = [f"t{state.turn}"]
    parts.extend(f"{player_label(p.player_id)}{p.special_point}" for p in state.players)
    return ",".join(parts)


def render_hand(state: GameState, catalog: CardCatalog, player_id: int) -> str:
    cards = []
    for card_id in state.get_player(player_id).hand:
        card = catalog.get(card_id)
        if card is None:
            cards.append(f"{card_id} [?]")
        else:
            cards.append(f"{card_id} [{'/'.join(card.shape.to_rows())}]")
    return f"{player_label(player_id)}: " + " ".join(cards)


def render_text(state: GameState, catalog: CardCatalog, show_hands: bool = True) -> str:
    lines = state.field.to_rows()
    lines.append(render_status(state))
    if show_hands:
        lines.extend(render_hand(state, catalog, p.player_id) for p in state.players)
    return "\n".join(lines)
