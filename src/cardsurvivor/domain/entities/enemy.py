"""Enemy runtime models."""
from __future__ import annotations

from dataclasses import dataclass, field

from cardsurvivor.core.types import EnemyType
from cardsurvivor.domain.intents import AttackIntent, EnemyIntent


@dataclass(slots=True)
class PoisonState:
    """Damage-over-time applied by poison cards."""

    active: bool = False
    damage_per_turn: int = 0
    turns_remaining: int = 0


@dataclass(slots=True)
class Enemy:
    """Represents a spawned enemy for the current wave."""

    id: str
    name: str
    enemy_type: EnemyType
    hp: int
    max_hp: int
    base_damage: int
    current_damage: int
    defense: int = 0
    is_elite: bool = False
    poison: PoisonState = field(default_factory=PoisonState)
    intent: EnemyIntent | None = None

    def __post_init__(self) -> None:
        if self.intent is None:
            self.intent = AttackIntent(damage=self.base_damage)

    @property
    def is_dead(self) -> bool:
        return self.hp <= 0

    @property
    def is_boss(self) -> bool:
        return self.enemy_type in ("boss", "final_boss")

    def take_damage(self, raw: int) -> int:
        """Apply flat defense with a minimum of 1 damage and return the damage dealt."""
        actual = max(1, raw - self.defense)
        self.hp = max(0, self.hp - actual)
        return actual

    def heal(self, amount: int) -> None:
        self.hp = min(self.max_hp, self.hp + amount)

    def apply_poison(self, damage: int, turns: int) -> None:
        # A new application replaces the previous one.
        self.poison = PoisonState(active=True, damage_per_turn=damage, turns_remaining=turns)

    def process_poison(self) -> int:
        """Tick poison once; returns the damage dealt (defense does not apply)."""
        if not self.poison.active or self.poison.turns_remaining <= 0:
            return 0
        dealt = min(self.hp, self.poison.damage_per_turn)
        self.hp = max(0, self.hp - self.poison.damage_per_turn)
        self.poison.turns_remaining -= 1
        if self.poison.turns_remaining <= 0:
            self.poison.active = False
        return dealt
