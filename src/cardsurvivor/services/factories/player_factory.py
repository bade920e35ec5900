"""Factory for creating player entities from class definitions."""
from __future__ import annotations

from typing import Iterable

from cardsurvivor.core.rng import RandomSource
from cardsurvivor.core.types import round_half_up
from cardsurvivor.data.repositories import CardsRepository, ClassesRepository
from cardsurvivor.domain.defs import ClassDef, RelicDef
from cardsurvivor.domain.entities import Player
from cardsurvivor.services.errors import FactoryError

from .card_factory import create_cards


def create_player(
    class_def: ClassDef,
    relics: Iterable[RelicDef],
    cards_repo: CardsRepository,
    rng: RandomSource,
) -> Player:
    """Build a fresh run player with class stats, relic bonuses and the starter deck."""
    player = Player(
        player_class=class_def.id,
        hp=0,
        max_hp=0,
        energy=0,
        max_energy=0,
        level_up_step=class_def.level_up,
        power_discount=class_def.power_discount,
    )
    for relic in relics:
        if relic.applies_to(class_def.id):
            _fold_relic(player, relic)

    player.max_hp = class_def.base_hp + class_def.hp_bonus + player.relic_bonus_hp
    player.hp = player.max_hp
    player.max_energy = class_def.base_energy + class_def.energy_bonus + player.relic_bonus_energy
    player.energy = player.max_energy

    intrinsic_damage = round_half_up(class_def.base_damage * class_def.damage_bonus_percent / 100)
    player.base_damage_buff = intrinsic_damage + class_def.flat_damage_bonus + player.relic_bonus_damage
    player.damage_buff = player.base_damage_buff

    player.lifesteal_percent = class_def.lifesteal_percent + player.relic_bonus_lifesteal
    player.regeneration = class_def.regeneration + player.relic_bonus_regeneration
    player.extra_card_draw = player.relic_bonus_card_draw
    player.crit_chance = player.relic_bonus_crit

    player.deck = create_cards(class_def.starting_deck, cards_repo, rng)
    player.draw_pile = list(player.deck)
    rng.shuffle(player.draw_pile)
    return player


def create_player_from_class_id(
    class_id: str,
    relics: Iterable[RelicDef],
    classes_repo: ClassesRepository,
    cards_repo: CardsRepository,
    rng: RandomSource,
) -> Player:
    """Instantiate a player using the provided repositories."""
    try:
        class_def = classes_repo.get(class_id)
    except KeyError as exc:
        raise FactoryError(f"Class '{class_id}' not found.") from exc
    return create_player(class_def, relics, cards_repo, rng)


def _fold_relic(player: Player, relic: RelicDef) -> None:
    kind = relic.relic_type
    if kind == "extra_hp":
        player.relic_bonus_hp += relic.value
    elif kind == "extra_damage":
        player.relic_bonus_damage += relic.value
    elif kind == "extra_block":
        player.relic_bonus_block += relic.value
    elif kind == "extra_energy":
        player.relic_bonus_energy += relic.value
    elif kind == "lifesteal":
        player.relic_bonus_lifesteal += relic.value
    elif kind == "extra_card_draw":
        player.relic_bonus_card_draw += relic.value
    elif kind == "gold_multiplier":
        player.relic_gold_multiplier += relic.value / 100
    elif kind == "exp_multiplier":
        player.relic_exp_multiplier += relic.value / 100
    elif kind == "regeneration":
        player.relic_bonus_regeneration += relic.value
    elif kind == "critical_chance":
        player.relic_bonus_crit += relic.value
