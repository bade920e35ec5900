"""Persistent cross-run progression."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from cardsurvivor.core.types import PlayerClassId

MAX_EQUIPPED_RELICS = 3
DEFAULT_UNLOCKED_CLASS: PlayerClassId = "warrior"


@dataclass
class PlayerProgression:
    """
    Meta-progression that survives process restarts.

    Mutators enforce ``equipped_relics ⊆ owned_relics`` and the equip cap; a
    request that would break either is ignored and reported as False.
    """

    gems: int = 0
    total_wins: int = 0
    total_games: int = 0
    best_wave: int = 0
    best_score: int = 0
    unlocked_classes: List[PlayerClassId] = field(default_factory=lambda: [DEFAULT_UNLOCKED_CLASS])
    owned_relics: List[str] = field(default_factory=list)
    equipped_relics: List[str] = field(default_factory=list)

    def add_gems(self, amount: int) -> None:
        if amount > 0:
            self.gems += amount

    def spend_gems(self, amount: int) -> bool:
        if amount < 0 or self.gems < amount:
            return False
        self.gems -= amount
        return True

    def owns_relic(self, relic_id: str) -> bool:
        return relic_id in self.owned_relics

    def add_relic(self, relic_id: str) -> bool:
        if relic_id in self.owned_relics:
            return False
        self.owned_relics.append(relic_id)
        return True

    def equip_relic(self, relic_id: str) -> bool:
        if relic_id not in self.owned_relics:
            return False
        if relic_id in self.equipped_relics:
            return False
        if len(self.equipped_relics) >= MAX_EQUIPPED_RELICS:
            return False
        self.equipped_relics.append(relic_id)
        return True

    def unequip_relic(self, relic_id: str) -> bool:
        if relic_id not in self.equipped_relics:
            return False
        self.equipped_relics = [equipped for equipped in self.equipped_relics if equipped != relic_id]
        return True

    def is_class_unlocked(self, class_id: str) -> bool:
        return class_id in self.unlocked_classes

    def unlock_class(self, class_id: PlayerClassId) -> bool:
        if class_id in self.unlocked_classes:
            return False
        self.unlocked_classes.append(class_id)
        return True

    def record_run(self, *, wave: int, score: int, won: bool) -> None:
        """Count a finished run and keep the best wave/score."""
        self.total_games += 1
        if won:
            self.total_wins += 1
        self.best_wave = max(self.best_wave, wave)
        self.best_score = max(self.best_score, score)
