"""
Bots module - Agent implementations.

Provides:
- BotPolicy: Interface for bot decision-making
- RandomPolicy: The reference agent
- FirstLegalPolicy, GreedyPolicy: Deterministic baselines
- StdioAgent: Runs a policy over the text protocol
"""

from .policy import (
    BotPolicy,
    BotDecision,
    RandomPolicy,
    FirstLegalPolicy,
    GreedyPolicy,
    POLICIES,
    build_deck,
    create_policy,
)
from .adapter_stdio import StdioAgent, AdapterInputError

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "GreedyPolicy",
    "POLICIES",
    "build_deck",
    "create_policy",
    "StdioAgent",
    "AdapterInputError",
]
