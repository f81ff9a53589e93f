"""
Turn Resolver - Applies one batch of simultaneous actions.

Each turn every player submits one action and the whole batch is
resolved as a single step:

1. Re-validate every action. Any failure rejects the whole batch
   (InvalidActionError) before anything is changed.
2. Order the actions by power, highest first. PASS has power 0. Equal
   power is ordered by submission index, highest index first.
3. Apply in that order. PASS earns a special point. Placements paint
   their squares; a square painted twice this turn by equal power
   becomes a block, by strictly higher power changes hands, by lower
   power stays with the earlier painter. A special square beats a
   colored square painted this turn. SPECIAL_PUT pays its cost.
4. Activate special squares around everything painted this turn that
   no longer have an empty neighbor; each activation is worth one
   special point to the owner, once.
5. Discard the played cards, advance the turn, and (unless the game is
   over) have every player draw one card.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .action import Action, ActionType
from .card import CardCatalog, CardDefinition
from .environment import Environment
from .errors import GameOverError, InvalidActionError
from .grid import BLOCK, CardSquare, Coord, FieldSquare
from .state import GameState
from .validator import ActionValidator


@dataclass
class TurnReport:
    """
    What happened during one resolved turn.

    `state` is the state after the turn; the other fields are for
    logging, transcripts and renderers.
    """
    state: GameState
    turn: int
    order: list[int] = field(default_factory=list)
    painted: list[Coord] = field(default_factory=list)
    blocked: list[Coord] = field(default_factory=list)
    activated: list[Coord] = field(default_factory=list)
    special_point_gains: dict[int, int] = field(default_factory=dict)


@dataclass
class TurnResolver:
    """
    Resolves turns in place on a GameState.

    Holds only read-only inputs (environment and catalog).
    """
    env: Environment
    catalog: CardCatalog
    validator: ActionValidator = field(init=False)

    def __post_init__(self):
        self.validator = ActionValidator(catalog=self.catalog)

    def resolve(self, state: GameState, actions: list[Action]) -> TurnReport:
        """
        Apply one action per player (indexed by player id) to `state`.

        Raises InvalidActionError, leaving `state` untouched, if any
        action fails validation.
        """
        if state.is_done(self.env):
            raise GameOverError("Game is over - no turns left to resolve")
        if len(actions) != state.num_players:
            raise ValueError(f"Expected {state.num_players} actions, got {len(actions)}")

        reasons = {}
        for player_id, action in enumerate(actions):
            error = self.validator.check(state, action, player_id)
            if error:
                reasons[player_id] = error
        if reasons:
            raise InvalidActionError(
                reasons,
                actions={pid: actions[pid] for pid in reasons},
            )

        report = TurnReport(state=state, turn=state.turn)
        report.order = self._resolution_order(actions)

        painted_power: dict[Coord, int] = {}
        for player_id in report.order:
            action = actions[player_id]
            player = state.players[player_id]
            if action.action_type is ActionType.PASS:
                player.special_point += 1
                _gain(report, player_id, 1)
                continue

            card = self.catalog[action.card_id]
            self._paint(state, report, painted_power, player_id, action, card)
            if action.action_type is ActionType.SPECIAL_PUT:
                player.special_point -= card.cost
                _gain(report, player_id, -card.cost)

        self._activate(state, report)

        for player_id, action in enumerate(actions):
            state.players[player_id].discard(action.card_id)

        state.turn += 1
        if not state.is_done(self.env):
            for player in state.players:
                player.draw()
        return report

    def _resolution_order(self, actions: list[Action]) -> list[int]:
        powers = [
            self.catalog[a.card_id].power if a.is_placement else 0
            for a in actions
        ]
        return sorted(range(len(actions)), key=lambda i: (powers[i], i), reverse=True)

    def _paint(self, state, report, painted_power, player_id, action, card: CardDefinition) -> None:
        field_shape = state.field
        for cy, cx, square in card.placement(action.direction, action.y, action.x):
            coord = (cy, cx)
            current = field_shape.at(cy, cx)
            earlier_power = painted_power.get(coord)

            if square is CardSquare.SPECIAL:
                new = FieldSquare.special(player_id)
                if current.is_empty or current.is_colored:
                    # Empty, a previous turn's colored square (SPECIAL_PUT only),
                    # or a colored square from this turn: special wins outright.
                    replace = True
                elif current.is_special and earlier_power is not None:
                    replace = _contest(field_shape, report, painted_power, coord, earlier_power, card.power)
                else:
                    replace = False
            else:
                new = FieldSquare.colored(player_id)
                if current.is_empty:
                    replace = True
                elif current.is_colored:
                    if earlier_power is None:
                        replace = True
                    else:
                        replace = _contest(field_shape, report, painted_power, coord, earlier_power, card.power)
                else:
                    replace = False

            if replace:
                field_shape.set(cy, cx, new)
                painted_power[coord] = card.power
                if coord not in report.painted:
                    report.painted.append(coord)

    def _activate(self, state: GameState, report: TurnReport) -> None:
        field_shape = state.field
        candidates = set()
        for y, x in report.painted + report.blocked:
            candidates.add((y, x))
            candidates.update(field_shape.neighbors(y, x))

        for y, x in sorted(candidates):
            square = field_shape.at(y, x)
            if not square.is_special or square.activated:
                continue
            if field_shape.has_empty_neighbor(y, x):
                continue
            field_shape.set(y, x, square.with_activation())
            state.players[square.owner].special_point += 1
            _gain(report, square.owner, 1)
            report.activated.append((y, x))


def _contest(field_shape, report, painted_power, coord, earlier_power, power) -> bool:
    """
    Settle a square already painted this turn.

    Returns True when the new paint should replace it.
    """
    if power == earlier_power:
        field_shape.set(coord[0], coord[1], BLOCK)
        if coord in report.painted:
            report.painted.remove(coord)
        report.blocked.append(coord)
        return False
    return power > earlier_power


def _gain(report: TurnReport, player_id: int, amount: int) -> None:
    report.special_point_gains[player_id] = report.special_point_gains.get(player_id, 0) + amount


def resolve_turn(
    env: Environment,
    catalog: CardCatalog,
    state: GameState,
    actions: list[Action],
) -> TurnReport:
    """Resolve a turn in place."""
    return TurnResolver(env=env, catalog=catalog).resolve(state, actions)


def apply_turn(
    env: Environment,
    catalog: CardCatalog,
    state: GameState,
    actions: list[Action],
) -> TurnReport:
    """
    Resolve a turn on a copy of `state`.

    The original is left unchanged; the new state is `report.state`.
    """
    return resolve_turn(env, catalog, state.clone(), actions)
