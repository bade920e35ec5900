"""Events emitted by the combat engine for the presentation layer."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True)
class CombatEvent:
    """Base combat event."""


@dataclass(slots=True)
class ActionRejectedEvent(CombatEvent):
    reason: str


@dataclass(slots=True)
class ClassSelectedEvent(CombatEvent):
    class_id: str
    class_name: str


@dataclass(slots=True)
class ClassUnlockedEvent(CombatEvent):
    class_id: str
    class_name: str
    cost: int


@dataclass(slots=True)
class RunStartedEvent(CombatEvent):
    class_id: str
    difficulty: str


@dataclass(slots=True)
class WaveStartedEvent(CombatEvent):
    phase: int
    wave: int
    enemy_names: List[str]
    is_boss_wave: bool


@dataclass(slots=True)
class PlayerTurnStartedEvent(CombatEvent):
    energy: int
    hand_size: int
    level: int


@dataclass(slots=True)
class CardSelectedEvent(CombatEvent):
    card_id: str
    card_name: str
    selected: bool


@dataclass(slots=True)
class CardPlayedEvent(CombatEvent):
    card_id: str
    card_name: str
    energy_spent: int
    energy_left: int


@dataclass(slots=True)
class DamageDealtEvent(CombatEvent):
    target_id: str
    target_name: str
    damage: int
    target_hp: int
    critical: bool = False


@dataclass(slots=True)
class LifestealEvent(CombatEvent):
    amount: int
    player_hp: int


@dataclass(slots=True)
class EnemyDefeatedEvent(CombatEvent):
    """An enemy left the roster; rewards are zero for effect and poison kills."""

    enemy_id: str
    enemy_name: str
    gold: int = 0
    experience: int = 0
    score: int = 0


@dataclass(slots=True)
class LevelUpEvent(CombatEvent):
    level: int
    max_hp: int


@dataclass(slots=True)
class BlockGainedEvent(CombatEvent):
    amount: int
    total_block: int


@dataclass(slots=True)
class CardsDrawnEvent(CombatEvent):
    requested: int
    drawn: int


@dataclass(slots=True)
class PoisonAppliedEvent(CombatEvent):
    target_id: str
    target_name: str
    damage_per_turn: int
    turns: int


@dataclass(slots=True)
class PoisonTickEvent(CombatEvent):
    enemy_id: str
    enemy_name: str
    damage: int
    enemy_hp: int


@dataclass(slots=True)
class DamageBuffEvent(CombatEvent):
    amount: int
    turns: int
    damage_buff: int


@dataclass(slots=True)
class PlayerHealedEvent(CombatEvent):
    amount: int
    player_hp: int


@dataclass(slots=True)
class EnergyGainedEvent(CombatEvent):
    amount: int
    energy: int


@dataclass(slots=True)
class EnemyTurnStartedEvent(CombatEvent):
    enemy_count: int


@dataclass(slots=True)
class PlayerDebuffedEvent(CombatEvent):
    enemy_name: str
    damage_buff: int


@dataclass(slots=True)
class EnemyHealedEvent(CombatEvent):
    healer_name: str
    target_id: str
    target_name: str
    target_hp: int


@dataclass(slots=True)
class PlayerDamagedEvent(CombatEvent):
    incoming: int
    blocked: int
    damage: int
    player_hp: int


@dataclass(slots=True)
class WaveCompletedEvent(CombatEvent):
    wave: int
    score_bonus: int
    gold: int
    experience: int
    gems_earned: int


@dataclass(slots=True)
class BossRewardsOfferedEvent(CombatEvent):
    relic_ids: List[str]


@dataclass(slots=True)
class RelicGainedEvent(CombatEvent):
    relic_id: str
    relic_name: str


@dataclass(slots=True)
class PhaseCompletedEvent(CombatEvent):
    phase: int


@dataclass(slots=True)
class GameOverEvent(CombatEvent):
    won: bool
    overall_wave: int
    score: int
    gems_earned: int
    bonus_relic_ids: List[str] = field(default_factory=list)


@dataclass(slots=True)
class GemsClaimedEvent(CombatEvent):
    amount: int
    total_gems: int


@dataclass(slots=True)
class CardBoughtEvent(CombatEvent):
    card_id: str
    card_name: str
    price: int
    gold_left: int


@dataclass(slots=True)
class RelicShopOpenedEvent(CombatEvent):
    relic_ids: List[str]


@dataclass(slots=True)
class RelicBoughtEvent(CombatEvent):
    relic_id: str
    relic_name: str
    price: int
    gems_left: int


@dataclass(slots=True)
class RelicEquipChangedEvent(CombatEvent):
    relic_id: str
    relic_name: str
    equipped: bool


def format_event(event: CombatEvent) -> str:
    """Render a single event as a short status line."""
    if isinstance(event, ActionRejectedEvent):
        return event.reason
    if isinstance(event, ClassSelectedEvent):
        return f"{event.class_name} selected."
    if isinstance(event, ClassUnlockedEvent):
        return f"{event.class_name} unlocked for {event.cost} gems!"
    if isinstance(event, RunStartedEvent):
        return f"New {event.difficulty} run as {event.class_id}."
    if isinstance(event, WaveStartedEvent):
        prefix = "Boss wave" if event.is_boss_wave else "Wave"
        return f"Phase {event.phase} - {prefix} {event.wave}: {', '.join(event.enemy_names)}"
    if isinstance(event, PlayerTurnStartedEvent):
        return f"Your turn (level {event.level}): {event.energy} energy, {event.hand_size} cards."
    if isinstance(event, CardSelectedEvent):
        if event.selected:
            return f"{event.card_name} selected. Choose a target."
        return f"{event.card_name} deselected."
    if isinstance(event, CardPlayedEvent):
        return f"Played {event.card_name}."
    if isinstance(event, DamageDealtEvent):
        crit = " Critical!" if event.critical else ""
        return f"{event.damage} damage to {event.target_name}.{crit}"
    if isinstance(event, LifestealEvent):
        return f"Lifesteal +{event.amount} HP."
    if isinstance(event, EnemyDefeatedEvent):
        if event.gold or event.experience:
            return f"{event.enemy_name} defeated! +{event.gold} gold, +{event.experience} XP."
        return f"{event.enemy_name} defeated!"
    if isinstance(event, LevelUpEvent):
        return f"Level up! Now level {event.level}."
    if isinstance(event, BlockGainedEvent):
        return f"+{event.amount} block."
    if isinstance(event, CardsDrawnEvent):
        return f"Drew {event.drawn} cards."
    if isinstance(event, PoisonAppliedEvent):
        return f"{event.target_name} is poisoned ({event.damage_per_turn} x {event.turns})."
    if isinstance(event, PoisonTickEvent):
        return f"Poison deals {event.damage} to {event.enemy_name}."
    if isinstance(event, DamageBuffEvent):
        return f"+{event.amount} damage for {event.turns} turns."
    if isinstance(event, PlayerHealedEvent):
        return f"+{event.amount} HP."
    if isinstance(event, EnergyGainedEvent):
        return f"+{event.amount} energy."
    if isinstance(event, EnemyTurnStartedEvent):
        return "Enemy turn."
    if isinstance(event, PlayerDebuffedEvent):
        return f"{event.enemy_name} weakens you! Damage bonus is now {event.damage_buff}."
    if isinstance(event, EnemyHealedEvent):
        return f"{event.healer_name} heals {event.target_name}."
    if isinstance(event, PlayerDamagedEvent):
        if event.blocked:
            return f"Blocked {event.blocked}. You take {event.damage} damage."
        return f"You take {event.damage} damage."
    if isinstance(event, WaveCompletedEvent):
        return f"Wave {event.wave} complete! +{event.score_bonus} score, +{event.gold} gold."
    if isinstance(event, BossRewardsOfferedEvent):
        return "Boss defeated! Choose a relic."
    if isinstance(event, RelicGainedEvent):
        return f"{event.relic_name} obtained!"
    if isinstance(event, PhaseCompletedEvent):
        return f"Phase {event.phase} cleared!"
    if isinstance(event, GameOverEvent):
        outcome = "Victory" if event.won else "Defeat"
        return f"{outcome} at wave {event.overall_wave}. Score {event.score}, {event.gems_earned} gems to claim."
    if isinstance(event, GemsClaimedEvent):
        return f"Claimed {event.amount} gems."
    if isinstance(event, CardBoughtEvent):
        return f"Bought {event.card_name} for {event.price} gold."
    if isinstance(event, RelicShopOpenedEvent):
        return "Relic shop open."
    if isinstance(event, RelicBoughtEvent):
        return f"Bought {event.relic_name} for {event.price} gems."
    if isinstance(event, RelicEquipChangedEvent):
        return f"{event.relic_name} {'equipped' if event.equipped else 'unequipped'}."
    return type(event).__name__
