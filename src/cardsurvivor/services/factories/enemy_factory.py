"""Factory for enemy waves, bosses and enemy intents."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Tuple

from cardsurvivor.core.rng import RandomSource
from cardsurvivor.core.types import Difficulty, EnemyType, round_half_up
from cardsurvivor.domain.entities import Enemy
from cardsurvivor.domain.intents import (
    AttackIntent,
    AttackTwiceIntent,
    BuffIntent,
    DebuffIntent,
    DefendIntent,
    EnemyIntent,
    HealIntent,
)
from cardsurvivor.domain.state import TOTAL_PHASES, WAVES_PER_PHASE

from .id_factory import make_instance_id

MAX_ENEMIES_PER_WAVE = 6
ELITE_MIN_EFFECTIVE_WAVE = 8
ELITE_CHANCE_PERCENT = 10
PHASE_STAT_GROWTH = 0.15
HARD_MULTIPLIER = 1.5

# Final boss base stats are fixed; only difficulty scales them.
FINAL_BOSS_NAME = "Demon Lord"
FINAL_BOSS_HP = 250
FINAL_BOSS_DAMAGE = 25
FINAL_BOSS_DEFENSE = 8
BOSS_NAMES = ("Alpha Demon", "Demon General")


@dataclass(frozen=True, slots=True)
class EnemyTemplate:
    """Base stats for one enemy kind as a function of the wave number."""

    name: str
    enemy_type: EnemyType
    hp: Callable[[int], int]
    damage: Callable[[int], int]
    defense: Callable[[int], int] = lambda wave: 0


ZOMBIE_EARLY = EnemyTemplate("Zombie", "basic", lambda w: 20 + w * 2, lambda w: 5 + w)
ZOMBIE_MID = EnemyTemplate("Zombie", "basic", lambda w: 22 + w * 2, lambda w: 5 + w)
BAT_MID = EnemyTemplate("Bat", "fast", lambda w: 15 + w * 2, lambda w: 6 + w)
ZOMBIE_LATE = EnemyTemplate("Zombie", "basic", lambda w: 25 + w * 2, lambda w: 6 + w)
BAT_LATE = EnemyTemplate("Bat", "fast", lambda w: 18 + w * 2, lambda w: 7 + w)
GOLEM_LATE = EnemyTemplate("Golem", "tank", lambda w: 40 + w * 3, lambda w: 8 + w, lambda w: 3 + w // 2)
ZOMBIE_END = EnemyTemplate("Zombie", "basic", lambda w: 28 + w * 2, lambda w: 7 + w)
BAT_END = EnemyTemplate("Bat", "fast", lambda w: 20 + w * 2, lambda w: 8 + w)
GOLEM_END = EnemyTemplate("Golem", "tank", lambda w: 45 + w * 3, lambda w: 10 + w, lambda w: 4 + w // 2)
SWARM_END = EnemyTemplate("Swarm", "swarm", lambda w: 30 + w * 2, lambda w: 5 + w)
MAGE_END = EnemyTemplate("Mage", "mage", lambda w: 25 + w * 2, lambda w: 12 + w)

ELITE_TEMPLATES: Tuple[EnemyTemplate, ...] = (
    EnemyTemplate("Scout", "scout", lambda w: 25 + w * 2, lambda w: 8 + w),
    EnemyTemplate("Dark Mage", "mage", lambda w: 30 + w * 2, lambda w: 12 + w),
    EnemyTemplate("Healer", "healer", lambda w: 35 + w * 2, lambda w: 6 + w),
)

# (max effective wave, [(max roll, template), ...]); the last row has no cap.
NORMAL_TABLES: Tuple[Tuple[int | None, Tuple[Tuple[int, EnemyTemplate], ...]], ...] = (
    (2, ((100, ZOMBIE_EARLY),)),
    (4, ((70, ZOMBIE_MID), (100, BAT_MID))),
    (6, ((50, ZOMBIE_LATE), (75, BAT_LATE), (100, GOLEM_LATE))),
    (None, ((30, ZOMBIE_END), (50, BAT_END), (65, GOLEM_END), (80, SWARM_END), (100, MAGE_END))),
)


def effective_wave(wave: int, phase: int) -> int:
    return wave + (phase - 1) * 2


def wave_enemy_count(wave: int) -> int:
    return min(2 + wave // 2, MAX_ENEMIES_PER_WAVE)


def stat_multiplier(phase: int, difficulty: Difficulty) -> float:
    difficulty_factor = HARD_MULTIPLIER if difficulty == "hard" else 1.0
    return (1 + PHASE_STAT_GROWTH * (phase - 1)) * difficulty_factor


def generate_wave(wave: int, phase: int, difficulty: Difficulty, rng: RandomSource) -> List[Enemy]:
    """Roll a regular wave of enemies."""
    count = wave_enemy_count(wave)
    ew = effective_wave(wave, phase)
    multiplier = stat_multiplier(phase, difficulty)
    enemies: List[Enemy] = []
    for _ in range(count):
        if ew >= ELITE_MIN_EFFECTIVE_WAVE and rng.randint(1, 100) <= ELITE_CHANCE_PERCENT:
            template = rng.choice(ELITE_TEMPLATES)
            enemies.append(_spawn(template, wave, multiplier, rng, is_elite=True))
            continue
        template = _roll_normal_template(ew, rng.randint(1, 100))
        enemies.append(_spawn(template, wave, multiplier, rng))
    return enemies


def generate_boss(phase: int, difficulty: Difficulty, rng: RandomSource) -> Enemy:
    """Create the boss guarding the end of ``phase``."""
    if phase >= TOTAL_PHASES:
        multiplier = stat_multiplier(1, difficulty)
        return Enemy(
            id=make_instance_id("enemy", rng),
            name=FINAL_BOSS_NAME,
            enemy_type="final_boss",
            hp=round_half_up(FINAL_BOSS_HP * multiplier),
            max_hp=round_half_up(FINAL_BOSS_HP * multiplier),
            base_damage=round_half_up(FINAL_BOSS_DAMAGE * multiplier),
            current_damage=round_half_up(FINAL_BOSS_DAMAGE * multiplier),
            defense=round_half_up(FINAL_BOSS_DEFENSE * multiplier),
        )
    name = BOSS_NAMES[min(phase, len(BOSS_NAMES)) - 1]
    template = EnemyTemplate(name, "boss", lambda w: 80 + w * 10, lambda w: 20 + w * 2, lambda w: 5 + w)
    return _spawn(template, WAVES_PER_PHASE, stat_multiplier(phase, difficulty), rng)


def generate_intent(
    enemy: Enemy,
    *,
    player_hp: int,
    player_block: int,
    other_enemies: int,
    rng: RandomSource,
) -> EnemyIntent:
    """Pick the enemy's next action from a single 1-100 roll and its type."""
    del player_block  # no current enemy type reacts to block
    roll = rng.randint(1, 100)
    current = enemy.current_damage
    base = enemy.base_damage
    kind = enemy.enemy_type

    if kind == "basic":
        return AttackIntent(current) if roll <= 85 else DefendIntent(base)
    if kind == "fast":
        return AttackTwiceIntent(current) if roll <= 70 else AttackIntent(current + 3)
    if kind == "tank":
        return DefendIntent(base + 5) if roll <= 60 else AttackIntent(current)
    if kind == "boss":
        if roll <= 40:
            return AttackIntent(current + 10)
        if roll <= 70:
            return BuffIntent()
        if roll <= 90:
            return DebuffIntent()
        return HealIntent(15)
    if kind == "final_boss":
        if roll <= 50:
            return AttackIntent(current + 15)
        if roll <= 75:
            return AttackTwiceIntent(current + 8)
        if roll <= 90:
            return DebuffIntent()
        return BuffIntent()
    if kind == "scout":
        if player_hp < 20 and roll <= 70:
            return AttackIntent(current + 5)
        return DebuffIntent()
    if kind == "mage":
        if roll <= 50:
            return AttackIntent(current + 8)
        if roll <= 80:
            return DebuffIntent()
        return DefendIntent(base)
    if kind == "healer":
        if other_enemies == 0 or roll > 60:
            return AttackIntent(current)
        return HealIntent(20)
    return AttackTwiceIntent(current)


def _roll_normal_template(ew: int, roll: int) -> EnemyTemplate:
    for max_wave, rows in NORMAL_TABLES:
        if max_wave is not None and ew > max_wave:
            continue
        for max_roll, template in rows:
            if roll <= max_roll:
                return template
        return rows[-1][1]
    raise AssertionError("enemy table has no open-ended row")


def _spawn(
    template: EnemyTemplate,
    wave: int,
    multiplier: float,
    rng: RandomSource,
    *,
    is_elite: bool = False,
) -> Enemy:
    hp = round_half_up(template.hp(wave) * multiplier)
    damage = round_half_up(template.damage(wave) * multiplier)
    return Enemy(
        id=make_instance_id("enemy", rng),
        name=template.name,
        enemy_type=template.enemy_type,
        hp=hp,
        max_hp=hp,
        base_damage=damage,
        current_damage=damage,
        defense=round_half_up(template.defense(wave) * multiplier),
        is_elite=is_elite,
    )
