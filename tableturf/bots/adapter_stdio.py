"""
Stdio adapter - runs a BotPolicy as an external agent.

Conversation with the judge, one line per message unless noted:

    -> bot name
    <- initial input (environment, field, cards; several lines)
    -> deck card ids
    <- opening hand card ids
    -> PASS | MULLIGAN
    repeat for every turn:
    <- turn transcript (several lines)
    -> one encoded action

The adapter stops after answering the last turn. Logging goes to
stderr because stdout carries the protocol.
"""

from __future__ import annotations
import argparse
import logging
import sys
from typing import Iterator, TextIO

from ..engine_core.card import build_catalog
from ..engine_core.transcript import (
    parse_hand,
    parse_initial_input,
    parse_turn_transcript,
)
from ..logger import setup_logging
from .policy import POLICIES, BotPolicy, create_policy

logger = logging.getLogger(__name__)


class AdapterInputError(Exception):
    """Raised when the adapter receives invalid input."""


class StdioAgent:
    """Speaks the line protocol for one policy."""

    def __init__(
        self,
        policy: BotPolicy,
        name: str | None = None,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ):
        self.policy = policy
        self.name = name or policy.get_name()
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout

    def _write(self, line: str) -> None:
        self.stdout.write(line + "\n")
        self.stdout.flush()

    def run(self) -> int:
        """Play one game. Returns the number of turns answered."""
        lines: Iterator[str] = iter(self.stdin)
        self._write(self.name)

        initial = parse_initial_input(lines)
        if not initial.success:
            raise AdapterInputError(f"Bad initial input: {initial.error}")
        env = initial.value.env
        field_height = initial.value.field.height
        catalog = build_catalog(initial.value.cards)

        deck = self.policy.choose_deck(catalog, env)
        self._write(" ".join(str(card_id) for card_id in deck))

        hand = parse_hand(lines)
        if not hand.success:
            raise AdapterInputError(f"Bad opening hand: {hand.error}")
        self._write(self.policy.select_mulligan(hand.value, catalog).encode())

        answered = 0
        while True:
            result = parse_turn_transcript(lines, field_height)
            if not result.success:
                raise AdapterInputError(f"Bad turn input: {result.error}")
            transcript = result.value
            if len(transcript.hand) != env.hand_size:
                logger.warning(
                    "turn %d: hand has %d cards, expected %d",
                    transcript.turn, len(transcript.hand), env.hand_size,
                )
            decision = self.policy.select_action(transcript, catalog, transcript.actions())
            logger.debug("turn %d: %s (%s)", transcript.turn, decision.action, decision.explanation)
            self._write(decision.action.encode())
            answered += 1
            if transcript.turn >= env.max_turn:
                return answered


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Tableturf stdio agent")
    parser.add_argument("--policy", choices=sorted(POLICIES), default="random")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--name", default=None, help="Name announced to the judge")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    setup_logging(args.log_level, stream=sys.stderr)
    agent = StdioAgent(create_policy(args.policy, seed=args.seed), name=args.name)
    try:
        agent.run()
    except AdapterInputError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
