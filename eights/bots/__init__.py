"""
Bots module - Computer opponent implementations.

Provides:
- BotPolicy: Interface for bot decision-making
- BotDecision: A chosen action with an explanation
- EightsBot: The Crazy Eights opponent
"""

from .policy import BotPolicy, BotDecision
from .eights_bot import EightsBot

__all__ = [
    "BotPolicy",
    "BotDecision",
    "EightsBot",
]
