import pytest

from cardsurvivor.data.repositories import CardsRepository, ClassesRepository, RelicsRepository
from cardsurvivor.domain.entities import Enemy
from cardsurvivor.domain.intents import (
    AttackIntent,
    AttackTwiceIntent,
    BuffIntent,
    DebuffIntent,
    DefendIntent,
    HealIntent,
    SummonIntent,
)
from cardsurvivor.domain.progression import PlayerProgression
from cardsurvivor.services import GameEngine, InMemoryProgressionStore
from cardsurvivor.services.events import (
    ActionRejectedEvent,
    EnemyDefeatedEvent,
    GameOverEvent,
    PhaseCompletedEvent,
    WaveCompletedEvent,
)
from cardsurvivor.services.factories import create_card

from tests.helpers.scripted_rng import ScriptedRNG


@pytest.fixture(scope="module")
def repos():
    cards_repo = CardsRepository()
    return cards_repo, RelicsRepository(), ClassesRepository(cards_repo=cards_repo)


def _engine(repos, *, progression=None, auto_resolve=True, rng=None) -> GameEngine:
    cards_repo, relics_repo, classes_repo = repos
    return GameEngine(
        cards_repo,
        relics_repo,
        classes_repo,
        InMemoryProgressionStore(progression),
        rng or ScriptedRNG(),
        auto_resolve_enemy_turn=auto_resolve,
    )


def _started(repos, class_id="warrior", **kwargs) -> GameEngine:
    engine = _engine(repos, **kwargs)
    engine.select_class(class_id)
    engine.start_new_game("normal")
    return engine


def _give(engine: GameEngine, card_id: str):
    """Put a fresh copy of a card into the player's hand."""
    card = create_card(engine._cards_repo.get(card_id), engine._rng)
    engine.session.player.deck.append(card)
    engine.session.player.hand.append(card)
    return card


def _enemy(hp: int, *, defense: int = 0, enemy_type: str = "basic", name: str = "Zombie") -> Enemy:
    return Enemy(
        id=f"enemy_{name}_{hp}",
        name=name,
        enemy_type=enemy_type,
        hp=hp,
        max_hp=hp,
        base_damage=6,
        current_damage=6,
        defense=defense,
    )


def _finish_wave(engine: GameEngine):
    """Leave only the first enemy at 1 hp and kill it with a Strike."""
    target = engine.session.enemies[0]
    target.hp = 1
    engine.session.enemies = [target]
    engine.session.player.energy = 3
    return engine.play_card(_give(engine, "strike"), 0)


def _jump_to_wave(engine: GameEngine, phase: int, wave: int):
    engine.session.current_phase = phase
    engine.session.wave = wave - 1
    engine.session.phase = "wave_complete"
    return engine.start_next_wave()


# -----------------------
# Run setup
# -----------------------
def test_new_warrior_run_starting_state(repos) -> None:
    engine = _started(repos)
    session = engine.session
    player = session.player

    assert session.phase == "player_turn"
    assert player.max_hp == player.hp == 80
    assert player.energy == player.max_energy == 3
    assert len(player.hand) == 4
    assert player.damage_buff == 2
    assert [card.card_id for card in player.hand] == ["strike", "strike", "strike", "slash"]
    assert [(enemy.name, enemy.hp, enemy.current_damage) for enemy in session.enemies] == [
        ("Zombie", 22, 6),
        ("Zombie", 22, 6),
    ]
    assert all(enemy.intent == AttackIntent(6) for enemy in session.enemies)
    assert session.overall_wave == 1


def test_equipped_relics_apply_to_new_run(repos) -> None:
    progression = PlayerProgression(owned_relics=["stone"], equipped_relics=["stone"])
    engine = _started(repos, progression=progression)

    assert engine.session.player.damage_buff == 4


def test_cannot_start_without_class(repos) -> None:
    engine = _engine(repos)

    assert engine.start_new_game() == []
    assert engine.session.phase == "class_selection"


def test_locked_class_is_rejected(repos) -> None:
    engine = _engine(repos)

    events = engine.select_class("mage")

    assert isinstance(events[0], ActionRejectedEvent)
    assert engine.selected_class_id is None
    assert engine.session.phase == "class_selection"


def test_unknown_difficulty_is_rejected(repos) -> None:
    engine = _engine(repos)
    engine.select_class("warrior")

    events = engine.start_new_game("nightmare")

    assert isinstance(events[0], ActionRejectedEvent)
    assert engine.session.phase == "menu"


def test_class_catalog_follows_menu_order(repos) -> None:
    engine = _engine(repos)

    assert [class_def.id for class_def in engine.class_catalog()] == ["warrior", "mage", "rogue", "paladin"]


# -----------------------
# Playing cards
# -----------------------
def test_strike_damages_enemy_and_moves_to_discard(repos) -> None:
    engine = _started(repos)
    session = engine.session
    player = session.player
    player.damage_buff = 0
    session.enemies = [_enemy(20)]
    strike = player.hand[0]

    engine.play_card(strike, 0)

    assert session.enemies[0].hp == 14
    assert player.energy == 2
    assert strike in player.discard_pile
    assert strike not in player.hand
    assert session.score == 0
    assert player.gold == 0
    assert session.phase == "player_turn"


def test_killing_last_enemy_awards_normal_tier_and_completes_wave(repos) -> None:
    engine = _started(repos)
    session = engine.session
    player = session.player
    player.damage_buff = 0
    session.enemies = [_enemy(5)]

    events = engine.play_card(player.hand[0], 0)

    assert session.enemies == []
    defeated = next(event for event in events if isinstance(event, EnemyDefeatedEvent))
    assert (defeated.gold, defeated.experience, defeated.score) == (6, 10, 10)
    assert any(isinstance(event, WaveCompletedEvent) for event in events)
    assert session.phase == "wave_complete"
    assert session.score == 60
    assert player.gold == 21
    assert player.experience == 30
    assert session.gems_earned == 2
    assert [card.id for card in session.shop_cards] == [
        "brawl", "draw", "heal", "parry", "poison", "quick_attack",
    ]


def test_elite_and_boss_kill_tiers(repos) -> None:
    engine = _started(repos)
    session = engine.session
    elite = _enemy(1, name="Scout", enemy_type="scout")
    elite.is_elite = True
    boss = _enemy(1, name="Alpha Demon", enemy_type="boss")
    session.enemies = [elite, boss, _enemy(50)]

    engine.play_card(session.player.hand[0], 0)
    assert session.score == 30
    assert session.player.gold == 21

    engine.play_card(session.player.hand[0], 0)
    assert session.score == 130
    assert session.player.gold == 71


def test_not_enough_energy_is_rejected_without_changes(repos) -> None:
    engine = _started(repos)
    player = engine.session.player
    player.energy = 1
    slash = player.hand[3]

    events = engine.play_card(slash, 0)

    assert isinstance(events[0], ActionRejectedEvent)
    assert engine.session.message == "Not enough energy!"
    assert slash in player.hand
    assert player.energy == 1


def test_attack_without_target_is_rejected(repos) -> None:
    engine = _started(repos)
    player = engine.session.player

    events = engine.play_card(player.hand[0])

    assert isinstance(events[0], ActionRejectedEvent)
    assert engine.session.message == "Select an enemy!"
    assert player.energy == 3


def test_select_card_then_enemy_plays_attack(repos) -> None:
    engine = _started(repos)
    session = engine.session
    strike = session.player.hand[0]

    engine.select_card(strike)
    assert session.selected_card_id == strike.instance_id

    engine.select_enemy(session.enemies[1])

    assert session.enemies[1].hp == 22 - 8
    assert session.selected_card_id is None


def test_selecting_same_card_twice_clears_selection(repos) -> None:
    engine = _started(repos)
    strike = engine.session.player.hand[0]

    engine.select_card(strike)
    engine.select_card(strike)

    assert engine.session.selected_card_id is None


def test_defense_card_plays_immediately_on_select(repos) -> None:
    engine = _started(repos)
    shield = _give(engine, "shield")

    engine.select_card(shield)

    assert engine.session.player_block == 5
    assert engine.session.player.energy == 2


def test_block_relic_adds_to_defense_cards(repos) -> None:
    progression = PlayerProgression(owned_relics=["broken_shield"], equipped_relics=["broken_shield"])
    engine = _started(repos, progression=progression)

    engine.play_card(_give(engine, "wall"))

    assert engine.session.player_block == 13


def test_draw_card_draws_from_pile(repos) -> None:
    engine = _started(repos)
    player = engine.session.player
    draw = _give(engine, "draw")

    engine.play_card(draw)

    assert player.energy == 3
    assert len(player.hand) == 6


def test_spending_last_energy_ends_turn(repos) -> None:
    engine = _started(repos, auto_resolve=False)
    player = engine.session.player
    player.energy = 1

    engine.play_card(player.hand[0], 0)

    assert engine.session.phase == "enemy_turn"


def test_critical_hit_doubles_raw_damage(repos) -> None:
    rng = ScriptedRNG()
    engine = _started(repos, rng=rng)
    player = engine.session.player
    player.crit_chance = 10
    engine.session.enemies = [_enemy(40)]
    rng.queue(10)

    engine.play_card(player.hand[0], 0)

    assert engine.session.enemies[0].hp == 40 - 16


def test_lifesteal_heals_quarter_of_damage(repos) -> None:
    rng = ScriptedRNG()
    engine = _started(repos, rng=rng)
    player = engine.session.player
    player.hp = 50
    player.lifesteal_percent = 20
    engine.session.enemies = [_enemy(40)]
    rng.queue(20)

    engine.play_card(player.hand[3], 0)

    assert engine.session.enemies[0].hp == 28
    assert player.hp == 53


def test_mage_power_discount(repos) -> None:
    progression = PlayerProgression(unlocked_classes=["warrior", "mage"])
    engine = _started(repos, class_id="mage", progression=progression)
    player = engine.session.player
    poison = _give(engine, "poison")

    assert player.max_energy == 4
    assert engine.card_cost(poison) == 0

    engine.play_card(poison)

    assert player.energy == 4
    assert engine.session.enemies[0].poison.active


# -----------------------
# Enemy turn
# -----------------------
def test_enemy_attacks_are_reduced_by_block(repos) -> None:
    engine = _started(repos, auto_resolve=False)
    session = engine.session
    session.enemies[0].intent = AttackIntent(10)
    session.enemies[1].intent = AttackTwiceIntent(4)
    session.player_block = 5

    engine.end_player_turn()
    engine.execute_enemy_turn()

    assert session.player.hp == 80 - 13
    assert session.player_block == 0
    assert session.phase == "enemy_turn"


def test_enemy_defend_block_also_absorbs_incoming(repos) -> None:
    engine = _started(repos, auto_resolve=False)
    session = engine.session
    session.enemies[0].intent = AttackIntent(10)
    session.enemies[1].intent = DefendIntent(4)

    engine.end_player_turn()
    engine.execute_enemy_turn()

    assert session.player.hp == 74
    assert session.enemy_block == 0


def test_debuff_reduces_damage_buff_with_floor(repos) -> None:
    engine = _started(repos, auto_resolve=False)
    session = engine.session
    session.enemies[0].intent = DebuffIntent()
    session.enemies[1].intent = BuffIntent()

    engine.end_player_turn()
    engine.execute_enemy_turn()

    assert session.player.damage_buff == 0
    assert session.player.hp == 80


def test_heal_intent_always_targets_first_enemy(repos) -> None:
    engine = _started(repos, auto_resolve=False)
    session = engine.session
    first, healer = session.enemies
    first.hp = 5
    healer.hp = 10
    healer.intent = HealIntent(20)
    first.intent = SummonIntent()

    engine.end_player_turn()
    engine.execute_enemy_turn()

    assert first.hp == 22
    assert healer.hp == 10
    assert len(session.enemies) == 2


def test_enemy_turn_resolves_once(repos) -> None:
    engine = _started(repos, auto_resolve=False)
    session = engine.session

    engine.end_player_turn()
    assert engine.end_player_turn() == []
    engine.execute_enemy_turn()
    hp_after_first = session.player.hp
    assert engine.execute_enemy_turn() == []

    assert hp_after_first == 68
    assert session.player.hp == 68


def test_player_turn_waits_for_enemy_turn(repos) -> None:
    engine = _started(repos, auto_resolve=False)
    session = engine.session
    for enemy in session.enemies:
        enemy.intent = AttackIntent(20)

    engine.end_player_turn()

    assert engine.start_player_turn() == []
    assert session.phase == "enemy_turn"
    assert session.player.hp == 80

    engine.execute_enemy_turn()
    engine.start_player_turn()

    assert session.phase == "player_turn"
    assert session.player.hp == 40


def test_auto_resolve_returns_to_player_turn(repos) -> None:
    engine = _started(repos)
    session = engine.session

    engine.end_player_turn()

    assert session.phase == "player_turn"
    assert session.player.hp == 68
    assert session.player.energy == 3
    assert len(session.player.hand) == 4


def test_start_player_turn_draws_new_hand(repos) -> None:
    engine = _started(repos, auto_resolve=False)
    player = engine.session.player

    engine.end_player_turn()
    engine.execute_enemy_turn()
    engine.start_player_turn()

    assert engine.session.phase == "player_turn"
    assert len(player.hand) == 4
    assert len(player.draw_pile) + len(player.hand) + len(player.discard_pile) == len(player.deck)


def test_poison_kill_completes_wave_without_loot(repos) -> None:
    engine = _started(repos, auto_resolve=False)
    session = engine.session
    target = _enemy(2)
    target.apply_poison(3, 3)
    session.enemies = [target]

    engine.end_player_turn()
    engine.execute_enemy_turn()

    assert session.enemies == []
    assert session.phase == "wave_complete"
    assert session.score == 50
    assert session.player.gold == 15


def test_player_death_ends_run(repos) -> None:
    engine = _started(repos)
    session = engine.session
    session.player.hp = 1

    events = engine.end_player_turn()

    over = next(event for event in events if isinstance(event, GameOverEvent))
    assert not over.won
    assert session.phase == "game_over"
    assert session.gems_earned == 2
    progression = engine.progression()
    assert progression.total_games == 1
    assert progression.total_wins == 0
    assert progression.best_wave == 1


# -----------------------
# Between waves
# -----------------------
def test_buy_card_adds_copy_to_deck(repos) -> None:
    engine = _started(repos)
    _finish_wave(engine)
    player = engine.session.player
    parry = next(card for card in engine.session.shop_cards if card.id == "parry")
    deck_size = len(player.deck)

    engine.buy_card(parry)

    assert player.gold == 6
    assert len(player.deck) == deck_size + 1
    assert player.discard_pile[-1].card_id == "parry"
    assert "parry" not in [card.id for card in engine.session.shop_cards]


def test_buy_card_without_gold_is_rejected(repos) -> None:
    engine = _started(repos)
    _finish_wave(engine)
    brawl = engine.session.shop_cards[0]
    engine.session.player.gold = 10

    events = engine.buy_card(brawl)

    assert isinstance(events[0], ActionRejectedEvent)
    assert engine.session.message == "You need 30 gold!"
    assert engine.session.player.gold == 10


def test_claim_gems_moves_them_into_progression(repos) -> None:
    engine = _started(repos)
    _finish_wave(engine)

    engine.claim_gems()

    assert engine.progression().gems == 2
    assert engine.session.gems_earned == 0
    assert engine.claim_gems() == []


def test_next_wave_spawns_more_enemies(repos) -> None:
    engine = _started(repos)
    _finish_wave(engine)

    engine.start_next_wave()

    assert engine.session.wave == 2
    assert engine.session.phase == "player_turn"
    assert len(engine.session.enemies) == 3


def test_boss_wave_reward_and_phase_transition(repos) -> None:
    engine = _started(repos)
    session = engine.session

    _jump_to_wave(engine, 1, 5)
    boss = session.enemies[0]
    assert boss.name == "Alpha Demon"
    assert len(session.enemies) == 4
    assert boss.intent == AttackIntent(40)

    _finish_wave(engine)
    assert session.phase == "boss_reward"
    assert session.gems_earned == 10
    assert [relic.id for relic in session.boss_rewards] == ["ancient_tome", "broken_shield", "mage_crown"]

    engine.select_boss_reward(session.boss_rewards[1])
    assert session.phase == "phase_complete"
    assert engine.progression().owned_relics == ["broken_shield"]

    events = engine.complete_phase()
    assert isinstance(events[0], PhaseCompletedEvent)
    assert session.current_phase == 2
    assert session.wave == 1
    assert session.overall_wave == 6
    assert session.phase == "player_turn"


def test_boss_reward_must_be_on_offer(repos) -> None:
    engine = _started(repos)
    _jump_to_wave(engine, 1, 5)
    _finish_wave(engine)

    events = engine.select_boss_reward(engine._relics_repo.get("stone"))

    assert isinstance(events[0], ActionRejectedEvent)
    assert engine.session.phase == "boss_reward"


def test_final_boss_win(repos) -> None:
    engine = _started(repos)
    session = engine.session

    _jump_to_wave(engine, 3, 5)
    assert session.enemies[0].name == "Demon Lord"
    events = _finish_wave(engine)

    over = next(event for event in events if isinstance(event, GameOverEvent))
    assert over.won
    assert session.game_won
    assert session.phase == "game_over"
    assert session.overall_wave == 15
    assert session.gems_earned == 105
    assert over.bonus_relic_ids == ["ancient_tome", "mage_crown"]
    progression = engine.progression()
    assert progression.total_wins == 1
    assert progression.best_wave == 15
    assert progression.owned_relics == ["ancient_tome", "mage_crown"]


def test_play_again_after_game_over(repos) -> None:
    engine = _started(repos)
    engine.session.player.hp = 1
    engine.end_player_turn()
    engine.claim_gems()

    engine.start_new_game("hard")

    assert engine.session.phase == "player_turn"
    assert engine.session.difficulty == "hard"
    assert engine.session.score == 0
    assert engine.session.player.hp == 80
    assert engine.session.enemies[0].hp == 33


# -----------------------
# Menu: relics and classes
# -----------------------
def test_relic_shop_purchase(repos) -> None:
    engine = _engine(repos, progression=PlayerProgression(gems=120))
    engine.select_class("warrior")

    engine.open_relic_shop()
    offers = engine.session.available_relics
    assert engine.session.phase == "relic_shop"
    assert [relic.id for relic in offers] == ["ancient_tome", "broken_shield", "mage_crown", "mage_crystal"]

    engine.buy_relic(offers[1])
    assert engine.progression().gems == 70
    assert engine.progression().owned_relics == ["broken_shield"]
    assert "broken_shield" not in [relic.id for relic in engine.session.available_relics]

    events = engine.buy_relic(engine.session.available_relics[0])
    assert isinstance(events[0], ActionRejectedEvent)
    assert engine.progression().gems == 70

    engine.close_relic_shop()
    assert engine.session.phase == "menu"
    assert engine.session.available_relics == []


def test_equip_cap_and_menu_player_refresh(repos) -> None:
    progression = PlayerProgression(owned_relics=["stone", "rusty_coin", "old_key", "warrior_gloves"])
    engine = _engine(repos, progression=progression)
    engine.select_class("warrior")
    relics = engine._relics_repo

    engine.equip_relic(relics.get("stone"))
    assert engine.session.player.damage_buff == 4
    engine.equip_relic(relics.get("rusty_coin"))
    engine.equip_relic(relics.get("old_key"))

    events = engine.equip_relic(relics.get("warrior_gloves"))
    assert isinstance(events[0], ActionRejectedEvent)
    assert engine.progression().equipped_relics == ["stone", "rusty_coin", "old_key"]

    engine.unequip_relic(relics.get("stone"))
    assert engine.session.player.damage_buff == 2
    engine.equip_relic(relics.get("warrior_gloves"))
    assert engine.session.player.damage_buff == 7


def test_cannot_equip_unowned_relic(repos) -> None:
    engine = _engine(repos)
    engine.select_class("warrior")

    events = engine.equip_relic(engine._relics_repo.get("stone"))

    assert isinstance(events[0], ActionRejectedEvent)
    assert engine.progression().equipped_relics == []


def test_unlock_class_spends_gems(repos) -> None:
    engine = _engine(repos, progression=PlayerProgression(gems=100))

    engine.unlock_class("mage")
    assert engine.progression().gems == 0
    assert engine.progression().is_class_unlocked("mage")

    events = engine.unlock_class("rogue")
    assert isinstance(events[0], ActionRejectedEvent)
    assert not engine.progression().is_class_unlocked("rogue")

    engine.select_class("mage")
    assert engine.selected_class_id == "mage"
    assert engine.session.phase == "menu"


def test_commands_outside_their_phase_are_ignored(repos) -> None:
    engine = _engine(repos)

    assert engine.end_player_turn() == []
    assert engine.execute_enemy_turn() == []
    assert engine.start_next_wave() == []
    assert engine.complete_phase() == []
    assert engine.open_relic_shop() == []
    assert engine.session.phase == "class_selection"


def test_snapshot_reflects_session(repos) -> None:
    engine = _started(repos)

    snapshot = engine.snapshot()

    assert snapshot.phase == "player_turn"
    assert snapshot.selected_class_id == "warrior"
    assert snapshot.player.hp == 80
    assert [card.name for card in snapshot.player.hand] == ["Strike", "Strike", "Strike", "Slash"]
    assert snapshot.player.hand[0].needs_target
    assert snapshot.enemies[0].intent == "Attack 6"
