"""Card definition structures."""
from __future__ import annotations

from dataclasses import dataclass

from cardsurvivor.core.types import CardType, EffectId, Rarity


@dataclass(frozen=True, slots=True)
class CardDef:
    """Immutable catalog entry for a playable card."""

    id: str
    name: str
    description: str
    card_type: CardType
    cost: int
    value: int
    rarity: Rarity
    effect: EffectId = "none"
    in_shop: bool = True
