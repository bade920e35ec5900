"""Relics repository."""
from __future__ import annotations

from typing import Dict, List

from cardsurvivor.core.types import PLAYER_CLASS_IDS, RARITY_ORDER, RELIC_TYPES, Rarity, rarity_rank
from cardsurvivor.data.repositories.base import RepositoryBase
from cardsurvivor.domain.defs import RelicDef


class RelicsRepository(RepositoryBase[RelicDef]):
    """Loads and validates relic definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("relics.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, RelicDef]:
        relics: Dict[str, RelicDef] = {}
        for raw_id, payload in raw.items():
            context = f"relic '{raw_id}'"
            relic_data = self._require_mapping(payload, context)
            self._assert_required(relic_data, {"name", "description", "rarity", "type", "value"}, context)
            target_class = relic_data.get("target_class")
            if target_class is not None:
                target_class = self._require_choice(target_class, PLAYER_CLASS_IDS, f"{context} target_class")
            relics[raw_id] = RelicDef(
                id=raw_id,
                name=self._require_str(relic_data["name"], f"{context} name"),
                description=self._require_str(relic_data["description"], f"{context} description"),
                rarity=self._require_choice(relic_data["rarity"], RARITY_ORDER, f"{context} rarity"),
                relic_type=self._require_choice(relic_data["type"], RELIC_TYPES, f"{context} type"),
                value=self._require_int(relic_data["value"], f"{context} value", minimum=0),
                target_class=target_class,
            )
        return relics

    def at_least(self, min_rarity: Rarity) -> List[RelicDef]:
        """Return relics whose rarity is min_rarity or higher."""
        threshold = rarity_rank(min_rarity)
        return [relic for relic in self.all() if rarity_rank(relic.rarity) >= threshold]
