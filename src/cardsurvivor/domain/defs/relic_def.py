"""Relic definition structures."""
from __future__ import annotations

from dataclasses import dataclass

from cardsurvivor.core.types import PlayerClassId, Rarity, RelicType


@dataclass(frozen=True, slots=True)
class RelicDef:
    """Passive modifier that can be owned and equipped across runs."""

    id: str
    name: str
    description: str
    rarity: Rarity
    relic_type: RelicType
    value: int
    target_class: PlayerClassId | None = None

    def applies_to(self, class_id: str) -> bool:
        return self.target_class is None or self.target_class == class_id
