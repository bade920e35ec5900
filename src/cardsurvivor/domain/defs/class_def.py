"""Player class definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from cardsurvivor.core.types import PlayerClassId


@dataclass(frozen=True, slots=True)
class LevelUpStep:
    """Permanent-for-the-run bonus applied on every level-up."""

    max_hp: int = 0
    damage_buff: int = 0
    extra_card_draw: int = 0
    lifesteal_percent: int = 0
    regeneration: int = 0


@dataclass(frozen=True, slots=True)
class ClassDef:
    """Defines base stats, passives and the starter deck for a class."""

    id: PlayerClassId
    name: str
    description: str
    passive: str
    base_hp: int
    base_energy: int
    base_damage: int
    hp_bonus: int
    energy_bonus: int
    damage_bonus_percent: int
    flat_damage_bonus: int
    lifesteal_percent: int
    regeneration: int
    power_discount: int
    unlock_cost: int
    level_up: LevelUpStep
    starting_deck: Tuple[str, ...]
