from typing import Iterable

import pytest

from cardsurvivor.data.repositories import CardsRepository, ClassesRepository, RelicsRepository
from cardsurvivor.presentation.cli import app
from cardsurvivor.services import GameEngine, InMemoryProgressionStore

from tests.helpers.scripted_rng import ScriptedRNG


@pytest.fixture
def engine() -> GameEngine:
    cards_repo = CardsRepository()
    return GameEngine(
        cards_repo,
        RelicsRepository(),
        ClassesRepository(cards_repo=cards_repo),
        InMemoryProgressionStore(),
        ScriptedRNG(),
    )


def _feed(monkeypatch, answers: Iterable[str]) -> None:
    replies = iter(answers)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(replies))


def test_prompt_index_retries_until_valid(monkeypatch, capsys) -> None:
    _feed(monkeypatch, ["abc", "9", "2"])

    assert app._prompt_index("> ", 3) == 1
    out = capsys.readouterr().out
    assert "Please enter a number." in out
    assert "between 1 and 3" in out


def test_prompt_index_blank_cancels(monkeypatch) -> None:
    _feed(monkeypatch, [""])

    assert app._prompt_index("> ", 3, allow_blank=True) is None


def test_class_selection_picks_warrior(monkeypatch, engine: GameEngine) -> None:
    _feed(monkeypatch, ["1"])

    assert app._class_selection_loop(engine)
    assert engine.selected_class_id == "warrior"
    assert engine.session.phase == "menu"


def test_locked_class_stays_on_selection(monkeypatch, capsys, engine: GameEngine) -> None:
    _feed(monkeypatch, ["2"])

    assert app._class_selection_loop(engine)
    assert engine.session.phase == "class_selection"
    assert "Cannot unlock Mage" in capsys.readouterr().out


def test_menu_quit(monkeypatch, engine: GameEngine) -> None:
    engine.select_class("warrior")
    _feed(monkeypatch, ["7"])

    assert not app._menu_loop(engine, {"difficulty": "normal", "auto_resolve_enemy_turn": True})


def test_menu_starts_run(monkeypatch, engine: GameEngine) -> None:
    engine.select_class("warrior")
    _feed(monkeypatch, ["1"])

    assert app._menu_loop(engine, {"difficulty": "normal", "auto_resolve_enemy_turn": True})
    assert engine.session.phase == "player_turn"


def test_player_turn_plays_card_on_chosen_target(monkeypatch, engine: GameEngine) -> None:
    engine.select_class("warrior")
    engine.start_new_game()
    _feed(monkeypatch, ["1", "2"])

    app._player_turn(engine)

    assert engine.session.enemies[1].hp == 14
    assert engine.session.player.energy == 2


def test_player_turn_end(monkeypatch, engine: GameEngine) -> None:
    engine.select_class("warrior")
    engine.start_new_game()
    _feed(monkeypatch, ["e"])

    app._player_turn(engine)

    assert engine.session.player.hp == 68
    assert engine.session.phase == "player_turn"
