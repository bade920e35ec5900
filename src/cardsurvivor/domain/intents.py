"""Enemy intents: the telegraphed action an enemy will take on its next turn."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class EnemyIntent:
    """Base intent."""

    @property
    def label(self) -> str:
        return type(self).__name__.removesuffix("Intent").lower()


@dataclass(frozen=True, slots=True)
class AttackIntent(EnemyIntent):
    damage: int


@dataclass(frozen=True, slots=True)
class AttackTwiceIntent(EnemyIntent):
    damage: int


@dataclass(frozen=True, slots=True)
class DefendIntent(EnemyIntent):
    block: int


@dataclass(frozen=True, slots=True)
class BuffIntent(EnemyIntent):
    pass


@dataclass(frozen=True, slots=True)
class DebuffIntent(EnemyIntent):
    pass


@dataclass(frozen=True, slots=True)
class HealIntent(EnemyIntent):
    amount: int


@dataclass(frozen=True, slots=True)
class SummonIntent(EnemyIntent):
    """Declared for future content; resolves to nothing."""


def describe_intent(intent: EnemyIntent) -> str:
    """Return a short player-facing description of an intent."""
    if isinstance(intent, AttackIntent):
        return f"Attack {intent.damage}"
    if isinstance(intent, AttackTwiceIntent):
        return f"Attack {intent.damage} x2"
    if isinstance(intent, DefendIntent):
        return f"Defend {intent.block}"
    if isinstance(intent, HealIntent):
        return f"Heal {intent.amount}"
    return intent.label.capitalize()
