"""Effect handlers for power and special cards, keyed by effect id."""
from __future__ import annotations

from typing import Callable, Dict, List

from cardsurvivor.core.types import EffectId
from cardsurvivor.domain.entities import Card
from cardsurvivor.domain.state import GameSession
from cardsurvivor.services.events import (
    CombatEvent,
    DamageBuffEvent,
    DamageDealtEvent,
    EnemyDefeatedEvent,
    EnergyGainedEvent,
    PlayerHealedEvent,
    PoisonAppliedEvent,
)

EffectHandler = Callable[[GameSession, Card, "int | None"], List[CombatEvent]]

POISON_TURNS = 3
RAGE_TURNS = 3
AURA_TURNS = 2
APOCALYPSE_DAMAGE = 5
MEDITATE_ENERGY = 2
MEDITATE_HEAL = 5


def _no_effect(session: GameSession, card: Card, target_index: int | None) -> List[CombatEvent]:
    return []


def _poison(session: GameSession, card: Card, target_index: int | None) -> List[CombatEvent]:
    # Always lands on the first enemy in the roster.
    if not session.enemies:
        return []
    target = session.enemies[0]
    target.apply_poison(card.value, POISON_TURNS)
    return [PoisonAppliedEvent(target.id, target.name, card.value, POISON_TURNS)]


def _damage_buff(turns: int) -> EffectHandler:
    def handler(session: GameSession, card: Card, target_index: int | None) -> List[CombatEvent]:
        player = session.player
        assert player is not None
        player.damage_buff += card.value
        player.damage_buff_turns = turns
        return [DamageBuffEvent(card.value, turns, player.damage_buff)]

    return handler


def _heal(session: GameSession, card: Card, target_index: int | None) -> List[CombatEvent]:
    player = session.player
    assert player is not None
    player.heal(card.value)
    return [PlayerHealedEvent(card.value, player.hp)]


def _apocalypse(session: GameSession, card: Card, target_index: int | None) -> List[CombatEvent]:
    events: List[CombatEvent] = []
    for enemy in session.enemies:
        dealt = enemy.take_damage(APOCALYPSE_DAMAGE)
        events.append(DamageDealtEvent(enemy.id, enemy.name, dealt, enemy.hp))
    events.extend(sweep_dead_enemies(session))
    return events


def _dragon(session: GameSession, card: Card, target_index: int | None) -> List[CombatEvent]:
    if target_index is None or not 0 <= target_index < len(session.enemies):
        return []
    target = session.enemies[target_index]
    dealt = target.take_damage(card.value)
    events: List[CombatEvent] = [DamageDealtEvent(target.id, target.name, dealt, target.hp)]
    if target.is_dead:
        session.enemies.pop(target_index)
        events.append(EnemyDefeatedEvent(target.id, target.name))
    return events


def _meditate(session: GameSession, card: Card, target_index: int | None) -> List[CombatEvent]:
    player = session.player
    assert player is not None
    # May overcap max energy by up to two.
    before = player.energy
    player.energy = min(player.max_energy + MEDITATE_ENERGY, player.energy + MEDITATE_ENERGY)
    player.heal(MEDITATE_HEAL)
    return [
        EnergyGainedEvent(player.energy - before, player.energy),
        PlayerHealedEvent(MEDITATE_HEAL, player.hp),
    ]


def sweep_dead_enemies(session: GameSession) -> List[CombatEvent]:
    """Remove dead enemies without granting rewards."""
    fallen = [enemy for enemy in session.enemies if enemy.is_dead]
    session.enemies = [enemy for enemy in session.enemies if not enemy.is_dead]
    return [EnemyDefeatedEvent(enemy.id, enemy.name) for enemy in fallen]


CARD_EFFECTS: Dict[EffectId, EffectHandler] = {
    "none": _no_effect,
    "poison": _poison,
    "rage": _damage_buff(RAGE_TURNS),
    "aura": _damage_buff(AURA_TURNS),
    "heal": _heal,
    "apocalypse": _apocalypse,
    "dragon": _dragon,
    "meditate": _meditate,
}


def apply_card_effect(session: GameSession, card: Card, target_index: int | None = None) -> List[CombatEvent]:
    """Resolve the effect bound to a power or special card."""
    return CARD_EFFECTS[card.effect](session, card, target_index)
