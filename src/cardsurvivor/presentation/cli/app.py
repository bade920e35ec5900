"""Console-driven UI loops for Card Survivor."""
from __future__ import annotations

import logging
import secrets
import time
from typing import Any, Dict, List, Sequence

from cardsurvivor.core.rng import RNG
from cardsurvivor.data.repositories import CardsRepository, ClassesRepository, RelicsRepository
from cardsurvivor.presentation.cli import config, render
from cardsurvivor.services import GameEngine, JsonProgressionStore, SaveLoadError
from cardsurvivor.services.events import CombatEvent

logger = logging.getLogger(__name__)

_MAX_RANDOM_SEED = 2**31 - 1


def main() -> None:
    """Start the interactive CLI session."""
    logging.basicConfig(
        level=logging.DEBUG if render.debug_enabled() else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    settings = config.load_config()
    engine = _build_engine(settings)
    print("=== Card Survivor ===")
    try:
        _run(engine, settings)
    except (KeyboardInterrupt, EOFError):
        print()
    except SaveLoadError as exc:
        print(f"Progression could not be saved: {exc}")
    print("Goodbye!")


def _build_engine(settings: Dict[str, Any]) -> GameEngine:
    """Construct the engine with concrete repositories and the on-disk store."""
    seed = secrets.randbelow(_MAX_RANDOM_SEED)
    logger.debug("Using seed %s", seed)
    cards_repo = CardsRepository()
    return GameEngine(
        cards_repo,
        RelicsRepository(),
        ClassesRepository(cards_repo=cards_repo),
        JsonProgressionStore(config.get_progression_path()),
        RNG(seed),
        auto_resolve_enemy_turn=bool(settings["auto_resolve_enemy_turn"]),
    )


def _run(engine: GameEngine, settings: Dict[str, Any]) -> None:
    while True:
        phase = engine.session.phase
        if phase == "class_selection":
            if not _class_selection_loop(engine):
                return
        elif phase == "menu":
            if not _menu_loop(engine, settings):
                return
        elif phase == "relic_shop":
            _relic_shop_loop(engine)
        elif phase == "player_turn":
            _player_turn(engine)
        elif phase == "enemy_turn":
            _paced_enemy_turn(engine)
        elif phase in ("wave_complete", "boss_reward", "phase_complete"):
            _between_waves_loop(engine)
        elif phase == "game_over":
            if not _game_over_loop(engine):
                return


def _show(events: Sequence[CombatEvent]) -> None:
    render.render_events(events)


def _prompt_index(prompt: str, count: int, *, allow_blank: bool = False) -> int | None:
    while True:
        raw = input(prompt).strip()
        if allow_blank and not raw:
            return None
        try:
            index = int(raw) - 1
        except ValueError:
            print("Please enter a number.")
            continue
        if 0 <= index < count:
            return index
        print(f"Please enter a value between 1 and {count}.")


# -----------------------
# Out of combat
# -----------------------
def _class_selection_loop(engine: GameEngine) -> bool:
    classes = engine.class_catalog()
    progression = engine.progression()
    options = []
    for class_def in classes:
        if progression.is_class_unlocked(class_def.id):
            options.append(f"{class_def.name} - {class_def.passive}")
        else:
            options.append(f"{class_def.name} (locked, {class_def.unlock_cost} gems)")
    options.append("Quit")
    render.render_menu(f"Choose your class  (gems: {progression.gems})", options)
    index = _prompt_index("Select an option: ", len(options))
    assert index is not None
    if index == len(classes):
        return False
    class_def = classes[index]
    if not progression.is_class_unlocked(class_def.id):
        _show(engine.unlock_class(class_def.id))
        if not engine.progression().is_class_unlocked(class_def.id):
            return True
    _show(engine.select_class(class_def.id))
    return True


def _menu_loop(engine: GameEngine, settings: Dict[str, Any]) -> bool:
    progression = engine.progression()
    options = [
        f"Start game ({settings['difficulty']})",
        "Relic shop",
        "Manage relics",
        "Change class",
        "Toggle difficulty",
        "Stats",
        "Quit",
    ]
    render.render_menu(
        f"{(engine.selected_class_id or '').title()}  (gems: {progression.gems})", options
    )
    index = _prompt_index("Select an option: ", len(options))
    if index == 0:
        _show(engine.start_new_game(settings["difficulty"]))
    elif index == 1:
        _show(engine.open_relic_shop())
    elif index == 2:
        _manage_relics(engine)
    elif index == 3:
        engine.open_class_selection()
    elif index == 4:
        settings["difficulty"] = "hard" if settings["difficulty"] == "normal" else "normal"
        config.save_config(settings)
    elif index == 5:
        render.render_heading("Stats")
        render.render_bullet_lines(
            [
                f"Games played: {progression.total_games}",
                f"Wins: {progression.total_wins}",
                f"Best wave: {progression.best_wave}",
                f"Best score: {progression.best_score}",
            ]
        )
    else:
        return False
    return True


def _manage_relics(engine: GameEngine) -> None:
    while True:
        progression = engine.progression()
        owned = [relic for relic in engine.relic_catalog() if progression.owns_relic(relic.id)]
        if not owned:
            print("You do not own any relics yet.")
            return
        options = []
        for relic in owned:
            mark = "[E] " if relic.id in progression.equipped_relics else ""
            options.append(mark + render.describe_relic(relic))
        render.render_menu("Relics (select to equip/unequip, blank to go back)", options)
        index = _prompt_index("Select a relic: ", len(options), allow_blank=True)
        if index is None:
            return
        relic = owned[index]
        if relic.id in progression.equipped_relics:
            _show(engine.unequip_relic(relic))
        else:
            _show(engine.equip_relic(relic))


def _relic_shop_loop(engine: GameEngine) -> None:
    snapshot = engine.snapshot()
    options = [render.describe_relic(relic, with_price=True) for relic in snapshot.available_relics]
    render.render_menu(f"Relic shop  (gems: {engine.progression().gems}, blank to leave)", options)
    index = _prompt_index("Buy: ", len(options), allow_blank=True) if options else None
    if index is None:
        engine.close_relic_shop()
        return
    _show(engine.buy_relic(snapshot.available_relics[index]))


# -----------------------
# Combat
# -----------------------
def _player_turn(engine: GameEngine) -> None:
    snapshot = engine.snapshot()
    render.render_combat(snapshot)
    player = engine.session.player
    assert player is not None
    raw = input("Card number, or 'e' to end turn: ").strip().lower()
    if raw == "e":
        _show(engine.end_player_turn())
        return
    try:
        index = int(raw) - 1
    except ValueError:
        print("Please enter a number or 'e'.")
        return
    if not 0 <= index < len(player.hand):
        print("No such card.")
        return
    card = player.hand[index]
    events: List[CombatEvent] = engine.select_card(card)
    _show(events)
    if engine.session.selected_card_id != card.instance_id:
        return
    render.render_enemies(engine.snapshot().enemies)
    target = _prompt_index("Target (blank to cancel): ", len(engine.session.enemies), allow_blank=True)
    if target is None:
        _show(engine.select_card(card))
        return
    _show(engine.select_enemy(engine.session.enemies[target]))


def _paced_enemy_turn(engine: GameEngine) -> None:
    time.sleep(config.ENEMY_TURN_DELAY)
    _show(engine.execute_enemy_turn())
    if engine.session.phase == "enemy_turn":
        time.sleep(config.ENEMY_TURN_DELAY)
        _show(engine.start_player_turn())


def _between_waves_loop(engine: GameEngine) -> None:
    snapshot = engine.snapshot()
    phase = snapshot.phase
    player = snapshot.player
    assert player is not None
    render.render_heading(f"Wave {snapshot.wave} cleared  (gold: {player.gold}, gems to claim: {snapshot.gems_earned})")
    if phase == "boss_reward":
        options = [render.describe_relic(relic) for relic in snapshot.boss_rewards]
        render.render_menu("Choose a boss relic", options)
        index = _prompt_index("Select a relic: ", len(options))
        assert index is not None
        _show(engine.select_boss_reward(snapshot.boss_rewards[index]))
        return

    continue_label = "Next phase" if phase == "phase_complete" else "Next wave"
    options = [f"Buy {render.describe_card_offer(card)}" for card in snapshot.shop_cards]
    options.append(f"Claim {snapshot.gems_earned} gems")
    options.append(continue_label)
    render.render_menu("Shop", options)
    index = _prompt_index("Select an option: ", len(options))
    assert index is not None
    if index < len(snapshot.shop_cards):
        _show(engine.buy_card(snapshot.shop_cards[index]))
    elif index == len(snapshot.shop_cards):
        _show(engine.claim_gems())
    elif phase == "phase_complete":
        _show(engine.complete_phase())
    else:
        _show(engine.start_next_wave())


def _game_over_loop(engine: GameEngine) -> bool:
    snapshot = engine.snapshot()
    render.render_heading("Victory!" if snapshot.game_won else "Game Over")
    render.render_bullet_lines(
        [
            f"Reached wave {snapshot.overall_wave}",
            f"Score {snapshot.score}",
            f"Gems to claim: {snapshot.gems_earned}",
        ]
    )
    if snapshot.gems_earned:
        _show(engine.claim_gems())
        time.sleep(config.MESSAGE_DURATION)
    options = ["Play again", "Back to menu", "Quit"]
    render.render_menu("What next?", options)
    index = _prompt_index("Select an option: ", len(options))
    if index == 0:
        _show(engine.start_new_game(snapshot.difficulty))
    elif index == 1 and engine.selected_class_id is not None:
        _show(engine.select_class(engine.selected_class_id))
    else:
        return False
    return True
