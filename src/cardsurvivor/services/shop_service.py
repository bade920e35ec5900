"""Between-wave card shop and gem-priced relic shop rules."""
from __future__ import annotations

from typing import Dict, List, Sequence

from cardsurvivor.core.rng import RandomSource
from cardsurvivor.core.types import RARITY_ORDER, Rarity
from cardsurvivor.data.repositories import CardsRepository, RelicsRepository
from cardsurvivor.domain.defs import CardDef, RelicDef

SHOP_OFFER_COUNT = 6
RELIC_SHOP_OFFER_COUNT = 4
CARD_PRICE_PER_ENERGY = 15

RELIC_PRICES: Dict[Rarity, int] = {
    "common": 50,
    "uncommon": 100,
    "rare": 250,
    "epic": 500,
    "legendary": 1000,
}


def allowed_rarities(level: int) -> Sequence[Rarity]:
    """Rarities the card shop may offer at a player level."""
    if level <= 1:
        return ("common",)
    if level == 2:
        return ("common", "uncommon")
    if level == 3:
        return tuple(rarity for rarity in RARITY_ORDER if rarity != "legendary")
    return RARITY_ORDER


def card_price(card: CardDef) -> int:
    return card.cost * CARD_PRICE_PER_ENERGY


def relic_price(relic: RelicDef) -> int:
    return RELIC_PRICES[relic.rarity]


class ShopService:
    """Builds shop offers from the catalogs."""

    def __init__(self, *, cards_repo: CardsRepository, relics_repo: RelicsRepository) -> None:
        self._cards_repo = cards_repo
        self._relics_repo = relics_repo

    def card_offers(self, level: int, rng: RandomSource) -> List[CardDef]:
        """Shuffle the level-appropriate shop cards and keep the first few."""
        allowed = set(allowed_rarities(level))
        pool = [card for card in self._cards_repo.shop_catalog() if card.rarity in allowed]
        rng.shuffle(pool)
        return pool[:SHOP_OFFER_COUNT]

    def relic_offers(self, owned_relic_ids: Sequence[str], rng: RandomSource) -> List[RelicDef]:
        """Pick relics the player does not own yet for the relic shop."""
        owned = set(owned_relic_ids)
        pool = [relic for relic in self._relics_repo.all() if relic.id not in owned]
        rng.shuffle(pool)
        return pool[:RELIC_SHOP_OFFER_COUNT]
