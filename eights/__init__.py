"""
Eights - Crazy Eights Engine

A deterministic, rules-driven engine for Crazy Eights against a computer
opponent. The engine provides:
- Deck construction and dealing
- Immutable game state and a reducer for all transitions
- Legal move generation
- The opponent's move-selection policy
- Sessions with a scheduled, cancellable opponent turn
"""

__version__ = "0.1.0"
