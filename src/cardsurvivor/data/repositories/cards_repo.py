"""Cards repository."""
from __future__ import annotations

from typing import Dict, List

from cardsurvivor.core.types import CARD_TYPES, EFFECT_IDS, RARITY_ORDER
from cardsurvivor.data.errors import DataValidationError
from cardsurvivor.data.repositories.base import RepositoryBase
from cardsurvivor.domain.defs import CardDef

_TARGETED_EFFECTS = {"dragon"}


class CardsRepository(RepositoryBase[CardDef]):
    """Loads and validates card definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("cards.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, CardDef]:
        cards: Dict[str, CardDef] = {}
        for raw_id, payload in raw.items():
            context = f"card '{raw_id}'"
            card_data = self._require_mapping(payload, context)
            self._assert_required(
                card_data, {"name", "description", "type", "cost", "value", "rarity"}, context
            )
            card_type = self._require_choice(card_data["type"], CARD_TYPES, f"{context} type")
            effect = self._require_choice(card_data.get("effect", "none"), EFFECT_IDS, f"{context} effect")
            if effect != "none" and card_type not in ("power", "special"):
                raise DataValidationError(f"{context} effect is only valid on power or special cards.")
            cards[raw_id] = CardDef(
                id=raw_id,
                name=self._require_str(card_data["name"], f"{context} name"),
                description=self._require_str(card_data["description"], f"{context} description"),
                card_type=card_type,
                cost=self._require_int(card_data["cost"], f"{context} cost", minimum=0),
                value=self._require_int(card_data["value"], f"{context} value", minimum=0),
                rarity=self._require_choice(card_data["rarity"], RARITY_ORDER, f"{context} rarity"),
                effect=effect,
                in_shop=self._require_bool(card_data.get("in_shop", True), f"{context} in_shop"),
            )
        return cards

    def shop_catalog(self) -> List[CardDef]:
        """Return the cards that may be offered in the between-wave shop."""
        return [card for card in self.all() if card.in_shop]


def card_needs_target(card: CardDef) -> bool:
    """Return True when playing the card requires an enemy target."""
    return card.card_type == "attack" or card.effect in _TARGETED_EFFECTS
