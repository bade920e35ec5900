"""Runtime entity exports."""

from .card import Card
from .enemy import Enemy, PoisonState
from .player import Player

__all__ = [
    "Card",
    "Enemy",
    "Player",
    "PoisonState",
]
