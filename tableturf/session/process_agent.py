"""
Process Agent - the judge's side of the stdio protocol.

A ProcessAgent runs an external program once per game and plays it as a
BotPolicy. The conversation mirrors StdioAgent in bots.adapter_stdio:

    <- bot name
    -> initial input (environment, field, cards)
    <- deck card ids
    -> opening hand card ids
    <- PASS | MULLIGAN
    repeat for every turn:
    -> turn transcript
    <- one encoded action

Every answer must arrive within `timeout` seconds. A child that times
out, exits, or sends an undecodable line raises AgentError; the match
runner turns that into a forfeit once turns are being played.
"""

from __future__ import annotations
import logging
import os
import queue
import shlex
import subprocess
import threading
from typing import IO, Sequence

from .. import config
from ..bots.policy import BotDecision, BotPolicy
from ..engine_core.action import Action, MulliganAction
from ..engine_core.card import CardCatalog
from ..engine_core.environment import Environment
from ..engine_core.errors import TableturfError
from ..engine_core.grid import FieldShape
from ..engine_core.transcript import TurnTranscript, hand_text, initial_input_text

logger = logging.getLogger(__name__)


class AgentError(TableturfError):
    """An agent process timed out, exited early, or broke the protocol."""


def _pump_lines(stream: IO[str], lines: queue.Queue) -> None:
    """Copy lines from the child's stdout into `lines`; None marks EOF."""
    with stream:
        for line in stream:
            lines.put(line)
    lines.put(None)


class ProcessAgent(BotPolicy):
    """
    An external program playing through stdin/stdout.

    Usage:
        agent = ProcessAgent("python -m tableturf.bots.adapter_stdio --policy greedy")
        MatchRunner(env, catalog, field, [agent, GreedyPolicy()]).run()
    """

    def __init__(
        self,
        command: str | Sequence[str],
        timeout: float | None = None,
        name: str | None = None,
    ):
        super().__init__()
        self.command = shlex.split(command) if isinstance(command, str) else list(command)
        if not self.command:
            raise ValueError("Agent command is empty")
        self.timeout = config.AGENT_TIMEOUT if timeout is None else timeout
        self.name = name
        self.announced_name: str | None = None
        self.process: subprocess.Popen | None = None
        self._lines: queue.Queue | None = None

    def get_name(self) -> str:
        return self.name or self.announced_name or os.path.basename(self.command[0])

    def begin_game(self, env: Environment, field: FieldShape, catalog: CardCatalog) -> None:
        """Start a fresh child and send it the initial input."""
        self.end_game()
        try:
            self.process = subprocess.Popen(
                self.command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                text=True,
                bufsize=1,
            )
        except OSError as e:
            raise AgentError(f"Cannot start agent {self.command[0]!r}: {e}") from e
        self._lines = queue.Queue()
        threading.Thread(
            target=_pump_lines, args=(self.process.stdout, self._lines), daemon=True
        ).start()
        logger.debug("started agent pid %d: %s", self.process.pid, shlex.join(self.command))

        self.announced_name = self._read_line("name").strip() or None
        self._send(initial_input_text(env, field, catalog.values()))

    def choose_deck(self, catalog: CardCatalog, env: Environment) -> list[int]:
        line = self._read_line("deck")
        tokens = line.split()
        if not all(token.isascii() and token.isdigit() for token in tokens):
            raise AgentError(f"{self.get_name()}: deck line is not card ids: {line!r}")
        return [int(token) for token in tokens]

    def select_mulligan(self, hand: list[int], catalog: CardCatalog) -> MulliganAction:
        self._send(hand_text(hand))
        result = MulliganAction.decode(self._read_line("mulligan answer"))
        if not result.success:
            raise AgentError(f"{self.get_name()}: {result.error}")
        return result.value

    def select_action(
        self,
        transcript: TurnTranscript,
        catalog: CardCatalog,
        legal_actions: list[Action],
    ) -> BotDecision:
        self._send(transcript.to_text())
        line = self._read_line(f"action for turn {transcript.turn}")
        result = Action.decode(line)
        if not result.success:
            raise AgentError(f"{self.get_name()}: {result.error}")
        return BotDecision(action=result.value, explanation=f"answered {line.strip()!r}")

    def end_game(self) -> None:
        """Close the child's input and wait for it; kill it if it lingers."""
        process, self.process = self.process, None
        self._lines = None
        if process is None:
            return
        try:
            process.stdin.close()
        except OSError as e:
            logger.debug("agent pid %d: closing stdin failed: %s", process.pid, e)
        try:
            process.wait(timeout=self.timeout)
        except subprocess.TimeoutExpired:
            logger.warning("agent pid %d did not exit, killing it", process.pid)
            process.kill()
            process.wait()
        if process.returncode:
            logger.warning("agent pid %d exited with status %d", process.pid, process.returncode)

    def _send(self, text: str) -> None:
        if self.process is None:
            raise AgentError(f"{self.get_name()}: agent is not running")
        try:
            self.process.stdin.write(text)
            self.process.stdin.flush()
        except OSError as e:
            raise AgentError(f"{self.get_name()}: cannot write to agent: {e}") from e

    def _read_line(self, what: str) -> str:
        if self._lines is None:
            raise AgentError(f"{self.get_name()}: agent is not running")
        try:
            line = self._lines.get(timeout=self.timeout)
        except queue.Empty:
            raise AgentError(
                f"{self.get_name()}: no {what} within {self.timeout:g}s"
            ) from None
        if line is None:
            raise AgentError(f"{self.get_name()}: agent exited before sending its {what}")
        return line.rstrip("\n")
