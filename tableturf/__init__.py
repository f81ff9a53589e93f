"""
Tableturf - Territory Card Game Engine

A deterministic engine for a turn-based grid and card placement contest.
Every player submits one move per turn and the engine resolves the whole
batch at once. The package provides:
- Field and card shape model
- Legal move validation and enumeration
- Simultaneous turn resolution
- Reference bot policies and a match runner
"""

__version__ = "0.1.0"
