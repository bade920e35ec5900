"""Factory helpers for runtime entities."""

from .card_factory import create_card, create_cards
from .enemy_factory import generate_boss, generate_intent, generate_wave
from .id_factory import make_instance_id
from .player_factory import create_player, create_player_from_class_id

__all__ = [
    "create_card",
    "create_cards",
    "create_player",
    "create_player_from_class_id",
    "generate_boss",
    "generate_intent",
    "generate_wave",
    "make_instance_id",
]
