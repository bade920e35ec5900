from cardsurvivor.data.repositories import CardsRepository, RelicsRepository
from cardsurvivor.presentation.cli import render
from cardsurvivor.services.events import ActionRejectedEvent, DamageDealtEvent


def test_hp_bar_fills_proportionally() -> None:
    assert render.hp_bar(10, 20, width=10) == "[#####-----]"
    assert render.hp_bar(0, 20, width=4) == "[----]"
    assert render.hp_bar(5, 0, width=3) == "[   ]"


def test_render_events_prints_bullets(capsys) -> None:
    render.render_events([ActionRejectedEvent("Not enough energy!"), DamageDealtEvent("e1", "Zombie", 8, 14)])

    out = capsys.readouterr().out
    assert "- Not enough energy!" in out
    assert "- 8 damage to Zombie." in out


def test_describe_offers_include_prices() -> None:
    strike = CardsRepository().get("strike")
    gloves = RelicsRepository().get("warrior_gloves")

    assert render.describe_card_offer(strike).endswith("15 gold")
    assert "[warrior]" in render.describe_relic(gloves)
    assert render.describe_relic(gloves, with_price=True).endswith("50 gems")


def test_debug_flag_requires_exact_value(monkeypatch) -> None:
    monkeypatch.setenv("CARDSURVIVOR_DEBUG", "true")
    assert not render.debug_enabled()
    monkeypatch.setenv("CARDSURVIVOR_DEBUG", "1")
    assert render.debug_enabled()


def test_render_player_shows_experience_progress(capsys) -> None:
    from cardsurvivor.data.repositories import ClassesRepository
    from cardsurvivor.services import GameEngine, InMemoryProgressionStore

    from tests.helpers.scripted_rng import ScriptedRNG

    cards_repo = CardsRepository()
    engine = GameEngine(
        cards_repo,
        RelicsRepository(),
        ClassesRepository(cards_repo=cards_repo),
        InMemoryProgressionStore(),
        ScriptedRNG(),
    )
    engine.select_class("warrior")
    engine.session.player.experience = 45

    snapshot = engine.snapshot()
    render.render_player(snapshot.player, snapshot.player_block)

    assert snapshot.player.experience_progress == 0.45
    assert "Lv1 (45% XP)" in capsys.readouterr().out
