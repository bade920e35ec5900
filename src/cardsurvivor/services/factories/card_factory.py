"""Factory for creating physical card copies from definitions."""
from __future__ import annotations

from typing import Iterable, List

from cardsurvivor.core.rng import RandomSource
from cardsurvivor.data.repositories import CardsRepository
from cardsurvivor.domain.defs import CardDef
from cardsurvivor.domain.entities import Card
from cardsurvivor.services.errors import FactoryError

from .id_factory import make_instance_id


def create_card(card_def: CardDef, rng: RandomSource) -> Card:
    """Create a new copy of a card with its own instance id."""
    return Card(instance_id=make_instance_id(f"card_{card_def.id}", rng), definition=card_def)


def create_cards(card_ids: Iterable[str], cards_repo: CardsRepository, rng: RandomSource) -> List[Card]:
    """Create one copy per id, in order."""
    cards: List[Card] = []
    for card_id in card_ids:
        try:
            card_def = cards_repo.get(card_id)
        except KeyError as exc:
            raise FactoryError(f"Card '{card_id}' not found.") from exc
        cards.append(create_card(card_def, rng))
    return cards
