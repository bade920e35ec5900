"""Card runtime models."""
from __future__ import annotations

from dataclasses import dataclass

from cardsurvivor.core.types import CardType, EffectId, Rarity
from cardsurvivor.domain.defs import CardDef


@dataclass(frozen=True, slots=True)
class Card:
    """A single physical copy of a card inside a player's deck."""

    instance_id: str
    definition: CardDef

    @property
    def card_id(self) -> str:
        return self.definition.id

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def card_type(self) -> CardType:
        return self.definition.card_type

    @property
    def cost(self) -> int:
        return self.definition.cost

    @property
    def value(self) -> int:
        return self.definition.value

    @property
    def rarity(self) -> Rarity:
        return self.definition.rarity

    @property
    def effect(self) -> EffectId:
        return self.definition.effect
