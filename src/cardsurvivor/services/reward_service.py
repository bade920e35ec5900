"""Boss relic rewards and end-of-run progression commits."""
from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from cardsurvivor.core.rng import RandomSource
from cardsurvivor.core.types import Rarity
from cardsurvivor.data.repositories import RelicsRepository
from cardsurvivor.domain.defs import RelicDef
from cardsurvivor.domain.progression import PlayerProgression
from cardsurvivor.services.progression_store import ProgressionStore

logger = logging.getLogger(__name__)

BOSS_REWARD_COUNT = 3

# (minimum overall wave, roll threshold, minimum rarity), checked in order.
WIN_BONUS_TABLE: Tuple[Tuple[int, int, Rarity], ...] = ((5, 30, "rare"), (10, 20, "epic"))
LOSS_BONUS_TABLE: Tuple[Tuple[int, int, Rarity], ...] = ((3, 20, "common"), (5, 10, "uncommon"))


def run_end_gems(overall_wave: int, won: bool) -> int:
    """Gems earned for finishing a run at ``overall_wave``."""
    return overall_wave * 2 + (overall_wave * 5 if won else 0)


class RewardService:
    """Rolls relic rewards and records finished runs in the progression store."""

    def __init__(self, *, relics_repo: RelicsRepository, store: ProgressionStore) -> None:
        self._relics_repo = relics_repo
        self._store = store

    def boss_reward_offers(self, owned_relic_ids: Sequence[str], rng: RandomSource) -> List[RelicDef]:
        """Offer unowned relics first, topping up with owned ones when too few remain."""
        owned = set(owned_relic_ids)
        unowned = [relic for relic in self._relics_repo.all() if relic.id not in owned]
        rng.shuffle(unowned)
        offers = unowned[:BOSS_REWARD_COUNT]
        backfill = [relic for relic in self._relics_repo.all() if relic.id in owned]
        while len(offers) < BOSS_REWARD_COUNT and backfill:
            pick = rng.choice(backfill)
            backfill.remove(pick)
            offers.append(pick)
        return offers

    def complete_game(
        self, *, overall_wave: int, score: int, won: bool, rng: RandomSource
    ) -> List[RelicDef]:
        """Record the run and grant any bonus relics; returns the relics granted."""

        def commit(progression: PlayerProgression) -> List[RelicDef]:
            progression.record_run(wave=overall_wave, score=score, won=won)
            granted: List[RelicDef] = []
            table = WIN_BONUS_TABLE if won else LOSS_BONUS_TABLE
            for min_wave, threshold, min_rarity in table:
                if overall_wave >= min_wave and rng.randint(1, 100) <= threshold:
                    relic = self._random_unowned(progression, min_rarity, rng)
                    if relic is not None:
                        progression.add_relic(relic.id)
                        granted.append(relic)
            return granted

        granted = self._store.update(commit)
        logger.info(
            "Run recorded: wave=%s score=%s won=%s bonus_relics=%s",
            overall_wave,
            score,
            won,
            [relic.id for relic in granted],
        )
        return granted

    def _random_unowned(
        self, progression: PlayerProgression, min_rarity: Rarity, rng: RandomSource
    ) -> RelicDef | None:
        candidates = [
            relic for relic in self._relics_repo.at_least(min_rarity) if not progression.owns_relic(relic.id)
        ]
        if not candidates:
            return None
        return rng.choice(candidates)
