import pytest

from cardsurvivor.data.repositories import RelicsRepository
from cardsurvivor.domain.progression import PlayerProgression
from cardsurvivor.services import InMemoryProgressionStore, RewardService
from cardsurvivor.services.reward_service import run_end_gems

from tests.helpers.scripted_rng import ScriptedRNG


@pytest.fixture(scope="module")
def relics_repo() -> RelicsRepository:
    return RelicsRepository()


def _service(relics_repo, progression=None):
    store = InMemoryProgressionStore(progression)
    return RewardService(relics_repo=relics_repo, store=store), store


@pytest.mark.parametrize(
    ("wave", "won", "expected"),
    [(1, False, 2), (7, False, 14), (15, True, 105)],
)
def test_run_end_gems(wave: int, won: bool, expected: int) -> None:
    assert run_end_gems(wave, won) == expected


def test_boss_rewards_prefer_unowned(relics_repo) -> None:
    service, _ = _service(relics_repo)

    offers = service.boss_reward_offers(["ancient_tome"], ScriptedRNG())

    assert [relic.id for relic in offers] == ["broken_shield", "mage_crown", "mage_crystal"]


def test_boss_rewards_backfill_with_owned(relics_repo) -> None:
    service, _ = _service(relics_repo)
    all_ids = [relic.id for relic in relics_repo.all()]

    offers = service.boss_reward_offers(all_ids[:-1], ScriptedRNG())

    assert [relic.id for relic in offers] == [all_ids[-1], all_ids[0], all_ids[1]]


def test_loss_below_wave_three_rolls_nothing(relics_repo) -> None:
    service, store = _service(relics_repo)
    rng = ScriptedRNG()

    granted = service.complete_game(overall_wave=2, score=40, won=False, rng=rng)

    assert granted == []
    assert rng.consumed == []
    progression = store.load()
    assert progression.total_games == 1
    assert progression.best_wave == 2
    assert progression.best_score == 40


def test_loss_rolls_common_then_uncommon(relics_repo) -> None:
    service, store = _service(relics_repo)

    granted = service.complete_game(overall_wave=6, score=300, won=False, rng=ScriptedRNG([20, 10]))

    assert [relic.id for relic in granted] == ["ancient_tome", "mage_crown"]
    assert store.load().owned_relics == ["ancient_tome", "mage_crown"]


def test_failed_rolls_grant_nothing(relics_repo) -> None:
    service, store = _service(relics_repo)

    granted = service.complete_game(overall_wave=6, score=300, won=False, rng=ScriptedRNG([21, 11]))

    assert granted == []
    assert store.load().total_games == 1


def test_win_rolls_rare_and_epic(relics_repo) -> None:
    service, store = _service(relics_repo, PlayerProgression(owned_relics=["ancient_tome"]))

    granted = service.complete_game(overall_wave=15, score=900, won=True, rng=ScriptedRNG([30, 20]))

    assert [relic.id for relic in granted] == ["mage_crown", "mage_orb"]
    progression = store.load()
    assert progression.total_wins == 1
    assert progression.owned_relics == ["ancient_tome", "mage_crown", "mage_orb"]


def test_best_records_are_not_lowered(relics_repo) -> None:
    service, store = _service(relics_repo, PlayerProgression(best_wave=10, best_score=500))

    service.complete_game(overall_wave=3, score=100, won=False, rng=ScriptedRNG([99]))

    progression = store.load()
    assert progression.best_wave == 10
    assert progression.best_score == 500
