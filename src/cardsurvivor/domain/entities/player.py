"""Player runtime model: HP, energy, card zones and run-scoped progression."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from cardsurvivor.core.rng import RandomSource
from cardsurvivor.core.types import PlayerClassId
from cardsurvivor.domain.defs import LevelUpStep

from .card import Card

HAND_LIMIT = 10
BASE_DRAW = 4
EXP_TO_LEVEL = 100


@dataclass(slots=True)
class Player:
    """
    Mutable per-run aggregate.

    ``deck`` is the full owned pool. Every card in ``deck`` lives in exactly one
    of ``draw_pile``, ``hand`` or ``discard_pile``; zone moves never copy or
    drop a card.
    """

    player_class: PlayerClassId
    hp: int
    max_hp: int
    energy: int
    max_energy: int
    level_up_step: LevelUpStep
    deck: List[Card] = field(default_factory=list)
    draw_pile: List[Card] = field(default_factory=list)
    hand: List[Card] = field(default_factory=list)
    discard_pile: List[Card] = field(default_factory=list)
    gold: int = 0
    level: int = 1
    experience: int = 0

    damage_buff: int = 0
    damage_buff_turns: int = 0
    base_damage_buff: int = 0
    defense_buff: int = 0
    defense_buff_turns: int = 0

    lifesteal_percent: int = 0
    regeneration: int = 0
    extra_card_draw: int = 0
    crit_chance: int = 0
    power_discount: int = 0

    relic_bonus_hp: int = 0
    relic_bonus_damage: int = 0
    relic_bonus_block: int = 0
    relic_bonus_energy: int = 0
    relic_bonus_lifesteal: int = 0
    relic_bonus_card_draw: int = 0
    relic_bonus_regeneration: int = 0
    relic_bonus_crit: int = 0
    relic_gold_multiplier: float = 1.0
    relic_exp_multiplier: float = 1.0

    @property
    def is_dead(self) -> bool:
        return self.hp <= 0

    @property
    def experience_progress(self) -> float:
        return self.experience / EXP_TO_LEVEL

    # -----------------------
    # Turn lifecycle
    # -----------------------
    def start_turn(self, rng: RandomSource) -> None:
        """Refresh energy, tick temporary buffs, regenerate and draw a new hand."""
        self.energy = self.max_energy

        if self.damage_buff_turns > 0:
            self.damage_buff_turns -= 1
            if self.damage_buff_turns <= 0:
                self.damage_buff = self.base_damage_buff

        if self.defense_buff_turns > 0:
            self.defense_buff_turns -= 1
            if self.defense_buff_turns <= 0:
                self.defense_buff = 0

        if self.regeneration > 0:
            self.heal(self.regeneration)

        self.draw_cards(BASE_DRAW + self.extra_card_draw, rng)

    def draw_cards(self, count: int, rng: RandomSource) -> int:
        """Draw up to ``count`` cards, recycling the discard pile when needed."""
        drawn = 0
        for _ in range(count):
            if not self.draw_pile:
                self._reshuffle_discard(rng)
            if self.draw_pile and len(self.hand) < HAND_LIMIT:
                self.hand.append(self.draw_pile.pop(0))
                drawn += 1
        return drawn

    def end_turn(self) -> None:
        """Move the whole hand to the discard pile."""
        self.discard_pile.extend(self.hand)
        self.hand.clear()

    def discard_from_hand(self, card: Card) -> bool:
        """Move a specific card from hand to discard; False if it is not in hand."""
        for index, held in enumerate(self.hand):
            if held.instance_id == card.instance_id:
                self.discard_pile.append(self.hand.pop(index))
                return True
        return False

    def holds(self, card: Card) -> bool:
        return any(held.instance_id == card.instance_id for held in self.hand)

    def _reshuffle_discard(self, rng: RandomSource) -> None:
        if not self.discard_pile:
            return
        recycled = list(self.discard_pile)
        rng.shuffle(recycled)
        self.draw_pile.extend(recycled)
        self.discard_pile.clear()

    # -----------------------
    # Health and resources
    # -----------------------
    def take_damage(self, amount: int) -> None:
        self.hp = max(0, self.hp - amount)

    def heal(self, amount: int) -> None:
        self.hp = min(self.max_hp, self.hp + amount)

    def add_gold(self, amount: int) -> int:
        """Add gold after the relic multiplier; returns the amount credited."""
        credited = int(amount * self.relic_gold_multiplier)
        self.gold += credited
        return credited

    def add_card(self, card: Card) -> None:
        """Add a newly acquired card; it joins the rotation on the next reshuffle."""
        self.deck.append(card)
        self.discard_pile.append(card)

    # -----------------------
    # Leveling
    # -----------------------
    def add_experience(self, amount: int) -> int:
        """Add experience after the relic multiplier; returns the number of level-ups."""
        self.experience += int(amount * self.relic_exp_multiplier)
        levels = 0
        while self.experience >= EXP_TO_LEVEL:
            self.level_up()
            levels += 1
        return levels

    def level_up(self) -> None:
        self.experience -= EXP_TO_LEVEL
        self.level += 1
        step = self.level_up_step
        self.max_hp += step.max_hp
        self.hp = min(self.max_hp, self.hp + step.max_hp)
        self.damage_buff += step.damage_buff
        self.base_damage_buff += step.damage_buff
        self.extra_card_draw += step.extra_card_draw
        self.lifesteal_percent += step.lifesteal_percent
        self.regeneration += step.regeneration
