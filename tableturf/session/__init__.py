"""
Session Module - Runs games between agents.

A session is one game (or a series of games):
- Policies pick decks and mulligan
- The judge loop collects actions and resolves turns
- Every game produces a MatchRecord that can be saved and replayed
- External programs play through ProcessAgent over the stdio protocol
"""

from .record import (
    EnvironmentRecord,
    MatchRecord,
    ReplayResult,
    replay,
    load_record,
    save_record,
)
from .match import MatchRunner, MatchResult, SeriesResult, run_series
from .process_agent import AgentError, ProcessAgent

__all__ = [
    "EnvironmentRecord",
    "MatchRecord",
    "ReplayResult",
    "replay",
    "load_record",
    "save_record",
    "MatchRunner",
    "MatchResult",
    "SeriesResult",
    "run_series",
    "AgentError",
    "ProcessAgent",
]
