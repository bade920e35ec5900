"""Shared type aliases for the core and domain layers."""
from typing import Literal, Tuple

CardType = Literal["attack", "defense", "power", "draw", "special"]
Rarity = Literal["common", "uncommon", "rare", "epic", "legendary"]
EffectId = Literal["none", "poison", "rage", "aura", "heal", "apocalypse", "dragon", "meditate"]
RelicType = Literal[
    "extra_hp",
    "extra_damage",
    "extra_block",
    "extra_energy",
    "lifesteal",
    "extra_card_draw",
    "gold_multiplier",
    "exp_multiplier",
    "regeneration",
    "critical_chance",
]
EnemyType = Literal["basic", "fast", "tank", "boss", "final_boss", "scout", "mage", "healer", "swarm"]
PlayerClassId = Literal["warrior", "mage", "rogue", "paladin"]
Difficulty = Literal["normal", "hard"]
GamePhase = Literal[
    "class_selection",
    "menu",
    "player_turn",
    "enemy_turn",
    "wave_complete",
    "relic_shop",
    "boss_reward",
    "phase_complete",
    "game_over",
]

# Ordered lowest to highest; rarity comparisons use the index in this tuple.
RARITY_ORDER: Tuple[Rarity, ...] = ("common", "uncommon", "rare", "epic", "legendary")
CARD_TYPES: Tuple[CardType, ...] = ("attack", "defense", "power", "draw", "special")
EFFECT_IDS: Tuple[EffectId, ...] = ("none", "poison", "rage", "aura", "heal", "apocalypse", "dragon", "meditate")
RELIC_TYPES: Tuple[RelicType, ...] = (
    "extra_hp",
    "extra_damage",
    "extra_block",
    "extra_energy",
    "lifesteal",
    "extra_card_draw",
    "gold_multiplier",
    "exp_multiplier",
    "regeneration",
    "critical_chance",
)
PLAYER_CLASS_IDS: Tuple[PlayerClassId, ...] = ("warrior", "mage", "rogue", "paladin")
DIFFICULTIES: Tuple[Difficulty, ...] = ("normal", "hard")


def rarity_rank(rarity: Rarity) -> int:
    """Return the position of a rarity in RARITY_ORDER."""
    return RARITY_ORDER.index(rarity)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded away from zero."""
    if value < 0:
        return -int(-value + 0.5)
    return int(value + 0.5)


__all__ = [
    "CardType",
    "Rarity",
    "EffectId",
    "RelicType",
    "EnemyType",
    "PlayerClassId",
    "Difficulty",
    "GamePhase",
    "RARITY_ORDER",
    "CARD_TYPES",
    "EFFECT_IDS",
    "RELIC_TYPES",
    "PLAYER_CLASS_IDS",
    "DIFFICULTIES",
    "rarity_rank",
    "round_half_up",
]
