"""Turn-based combat engine driving a single Card Survivor run."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from cardsurvivor.core.rng import RandomSource
from cardsurvivor.core.types import (
    DIFFICULTIES,
    PLAYER_CLASS_IDS,
    CardType,
    Difficulty,
    EnemyType,
    GamePhase,
    PlayerClassId,
)
from cardsurvivor.data.repositories import CardsRepository, ClassesRepository, RelicsRepository, card_needs_target
from cardsurvivor.domain.defs import CardDef, ClassDef, RelicDef
from cardsurvivor.domain.entities import Card, Enemy, Player
from cardsurvivor.domain.intents import (
    AttackIntent,
    AttackTwiceIntent,
    DebuffIntent,
    DefendIntent,
    HealIntent,
    describe_intent,
)
from cardsurvivor.domain.progression import PlayerProgression
from cardsurvivor.domain.state import GameSession
from cardsurvivor.services.card_effects import apply_card_effect, sweep_dead_enemies
from cardsurvivor.services.events import (
    ActionRejectedEvent,
    BlockGainedEvent,
    BossRewardsOfferedEvent,
    CardBoughtEvent,
    CardPlayedEvent,
    CardSelectedEvent,
    CardsDrawnEvent,
    ClassSelectedEvent,
    ClassUnlockedEvent,
    CombatEvent,
    DamageDealtEvent,
    EnemyDefeatedEvent,
    EnemyHealedEvent,
    EnemyTurnStartedEvent,
    GameOverEvent,
    GemsClaimedEvent,
    LevelUpEvent,
    LifestealEvent,
    PhaseCompletedEvent,
    PlayerDamagedEvent,
    PlayerDebuffedEvent,
    PlayerTurnStartedEvent,
    PoisonTickEvent,
    RelicBoughtEvent,
    RelicEquipChangedEvent,
    RelicGainedEvent,
    RelicShopOpenedEvent,
    RunStartedEvent,
    WaveCompletedEvent,
    WaveStartedEvent,
    format_event,
)
from cardsurvivor.services.factories import (
    create_card,
    create_player_from_class_id,
    generate_boss,
    generate_intent,
    generate_wave,
)
from cardsurvivor.services.factories.enemy_factory import wave_enemy_count
from cardsurvivor.services.progression_store import ProgressionStore
from cardsurvivor.services.reward_service import RewardService, run_end_gems
from cardsurvivor.services.shop_service import ShopService, card_price, relic_price

logger = logging.getLogger(__name__)

DEBUFF_AMOUNT = 3
LIFESTEAL_DIVISOR = 4
CRIT_MULTIPLIER = 2

BOSS_KILL_REWARD = (50, 50, 100)
ELITE_KILL_REWARD = (20, 25, 30)
NORMAL_KILL_REWARD = (5, 10, 10)

WAVE_SCORE_PER_WAVE = 50
WAVE_GOLD_PER_WAVE = 15
WAVE_EXP_PER_WAVE = 20
WAVE_GEMS_PER_WAVE = 2

_CLASS_SETUP_PHASES: tuple[GamePhase, ...] = ("class_selection", "menu", "game_over")
_OUT_OF_COMBAT_PHASES: tuple[GamePhase, ...] = ("class_selection", "menu", "relic_shop", "game_over")
_SHOP_PHASES: tuple[GamePhase, ...] = ("wave_complete", "boss_reward", "phase_complete")


@dataclass(slots=True)
class CardView:
    instance_id: str
    card_id: str
    name: str
    description: str
    card_type: CardType
    cost: int
    value: int
    needs_target: bool


@dataclass(slots=True)
class EnemyView:
    enemy_id: str
    name: str
    enemy_type: EnemyType
    hp: int
    max_hp: int
    defense: int
    is_elite: bool
    intent: str
    poison_turns: int


@dataclass(slots=True)
class PlayerView:
    player_class: PlayerClassId
    hp: int
    max_hp: int
    energy: int
    max_energy: int
    gold: int
    level: int
    experience: int
    experience_progress: float
    damage_buff: int
    hand: List[CardView]
    draw_pile_count: int
    discard_pile_count: int
    deck_count: int


@dataclass(slots=True)
class GameSnapshot:
    """Read-only picture of the session for the presentation layer."""

    phase: GamePhase
    wave: int
    current_phase: int
    overall_wave: int
    difficulty: Difficulty
    score: int
    player_block: int
    enemy_block: int
    message: str
    gems_earned: int
    game_won: bool
    selected_card_id: str | None
    selected_class_id: PlayerClassId | None
    player: PlayerView | None
    enemies: List[EnemyView] = field(default_factory=list)
    shop_cards: List[CardDef] = field(default_factory=list)
    available_relics: List[RelicDef] = field(default_factory=list)
    boss_rewards: List[RelicDef] = field(default_factory=list)


class GameEngine:
    """
    Owns the run state machine.

    Commands return the events they produced. A command issued in the wrong
    phase, or without the resources it needs, leaves the session untouched and
    returns either nothing or a single ActionRejectedEvent.
    """

    def __init__(
        self,
        cards_repo: CardsRepository,
        relics_repo: RelicsRepository,
        classes_repo: ClassesRepository,
        store: ProgressionStore,
        rng: RandomSource,
        auto_resolve_enemy_turn: bool = True,
    ) -> None:
        self._cards_repo = cards_repo
        self._relics_repo = relics_repo
        self._classes_repo = classes_repo
        self._store = store
        self._rng = rng
        self._shop = ShopService(cards_repo=cards_repo, relics_repo=relics_repo)
        self._rewards = RewardService(relics_repo=relics_repo, store=store)
        self.auto_resolve_enemy_turn = auto_resolve_enemy_turn
        self.session = GameSession()
        self._selected_class_id: PlayerClassId | None = None
        self._enemy_turn_resolved = False

    # -----------------------
    # Queries
    # -----------------------
    @property
    def selected_class_id(self) -> PlayerClassId | None:
        return self._selected_class_id

    def progression(self) -> PlayerProgression:
        return self._store.load()

    def class_catalog(self) -> List[ClassDef]:
        """Playable classes in menu order."""
        return [
            class_def
            for class_def in (self._classes_repo.find(class_id) for class_id in PLAYER_CLASS_IDS)
            if class_def is not None
        ]

    def relic_catalog(self) -> List[RelicDef]:
        return self._relics_repo.all()

    def card_cost(self, card: Card) -> int:
        """Energy needed to play ``card`` after class discounts."""
        player = self.session.player
        if player is not None and card.card_type == "power":
            return max(0, card.cost - player.power_discount)
        return card.cost

    def snapshot(self) -> GameSnapshot:
        session = self.session
        return GameSnapshot(
            phase=session.phase,
            wave=session.wave,
            current_phase=session.current_phase,
            overall_wave=session.overall_wave,
            difficulty=session.difficulty,
            score=session.score,
            player_block=session.player_block,
            enemy_block=session.enemy_block,
            message=session.message,
            gems_earned=session.gems_earned,
            game_won=session.game_won,
            selected_card_id=session.selected_card_id,
            selected_class_id=self._selected_class_id,
            player=self._player_view(session.player) if session.player is not None else None,
            enemies=[self._enemy_view(enemy) for enemy in session.enemies],
            shop_cards=list(session.shop_cards),
            available_relics=list(session.available_relics),
            boss_rewards=list(session.boss_rewards),
        )

    # -----------------------
    # Run setup
    # -----------------------
    def select_class(self, class_id: str) -> List[CombatEvent]:
        if self.session.phase not in _CLASS_SETUP_PHASES:
            return []
        class_def = self._classes_repo.find(class_id)
        if class_def is None:
            return self._reject(f"Unknown class '{class_id}'.")
        if not self._store.load().is_class_unlocked(class_def.id):
            return self._reject(f"{class_def.name} is locked.")
        self._selected_class_id = class_def.id
        self.session.player = self._build_player()
        self._set_phase("menu")
        return self._publish([ClassSelectedEvent(class_def.id, class_def.name)])

    def open_class_selection(self) -> List[CombatEvent]:
        if self.session.phase not in ("menu", "game_over"):
            return []
        self._set_phase("class_selection")
        return []

    def start_new_game(self, difficulty: str = "normal") -> List[CombatEvent]:
        session = self.session
        if session.phase not in ("menu", "game_over") or self._selected_class_id is None:
            return []
        if difficulty not in DIFFICULTIES:
            return self._reject(f"Unknown difficulty '{difficulty}'.")

        session.player = self._build_player()
        session.difficulty = difficulty  # type: ignore[assignment]
        session.current_phase = 1
        session.wave = 1
        session.score = 0
        session.player_block = 0
        session.enemy_block = 0
        session.gems_earned = 0
        session.game_won = False
        session.selected_card_id = None
        session.selected_enemy_id = None
        session.shop_cards = []
        session.available_relics = []
        session.boss_rewards = []
        logger.info("Starting %s run as %s", difficulty, self._selected_class_id)

        events: List[CombatEvent] = [RunStartedEvent(self._selected_class_id, difficulty)]
        events.extend(self._begin_wave())
        return self._publish(events)

    def start_next_wave(self) -> List[CombatEvent]:
        session = self.session
        if session.phase != "wave_complete" or session.player is None:
            return []
        session.wave += 1
        session.player.end_turn()
        return self._publish(self._begin_wave())

    def complete_phase(self) -> List[CombatEvent]:
        session = self.session
        if session.phase != "phase_complete" or session.player is None:
            return []
        finished = session.current_phase
        session.current_phase += 1
        session.wave = 1
        session.player.end_turn()
        logger.info("Phase %s cleared; entering phase %s", finished, session.current_phase)
        events: List[CombatEvent] = [PhaseCompletedEvent(finished)]
        events.extend(self._begin_wave())
        return self._publish(events)

    # -----------------------
    # Player turn
    # -----------------------
    def select_card(self, card: Card) -> List[CombatEvent]:
        session = self.session
        player = session.player
        if session.phase != "player_turn" or player is None or not player.holds(card):
            return []
        if not card_needs_target(card.definition):
            return self.play_card(card)
        if session.selected_card_id == card.instance_id:
            session.selected_card_id = None
            return self._publish([CardSelectedEvent(card.card_id, card.name, selected=False)])
        session.selected_card_id = card.instance_id
        return self._publish([CardSelectedEvent(card.card_id, card.name, selected=True)])

    def select_enemy(self, enemy: Enemy) -> List[CombatEvent]:
        session = self.session
        player = session.player
        if session.phase != "player_turn" or player is None or session.selected_card_id is None:
            return []
        card = next((held for held in player.hand if held.instance_id == session.selected_card_id), None)
        if card is None:
            session.selected_card_id = None
            return []
        index = next((i for i, live in enumerate(session.enemies) if live.id == enemy.id), None)
        if index is None:
            return []
        session.selected_enemy_id = enemy.id
        return self.play_card(card, index)

    def play_card(self, card: Card, target_index: int | None = None) -> List[CombatEvent]:
        session = self.session
        player = session.player
        if session.phase != "player_turn" or player is None:
            return []
        if not player.holds(card):
            return []
        cost = self.card_cost(card)
        if player.energy < cost:
            return self._reject("Not enough energy!")
        if card_needs_target(card.definition) and (
            target_index is None or not 0 <= target_index < len(session.enemies)
        ):
            return self._reject("Select an enemy!")

        player.energy -= cost
        player.discard_from_hand(card)
        events: List[CombatEvent] = [CardPlayedEvent(card.card_id, card.name, cost, player.energy)]

        if card.card_type == "attack":
            assert target_index is not None
            events.extend(self._resolve_attack(player, card, target_index))
        elif card.card_type == "defense":
            block = card.value + player.relic_bonus_block
            session.player_block += block
            events.append(BlockGainedEvent(block, session.player_block))
        elif card.card_type == "draw":
            drawn = player.draw_cards(card.value, self._rng)
            events.append(CardsDrawnEvent(card.value, drawn))
        else:
            events.extend(apply_card_effect(session, card, target_index))

        session.selected_card_id = None
        session.selected_enemy_id = None
        events.extend(self._check_turn_end())
        return self._publish(events)

    def end_player_turn(self) -> List[CombatEvent]:
        session = self.session
        if session.phase != "player_turn":
            return []
        session.selected_card_id = None
        session.selected_enemy_id = None
        self._set_phase("enemy_turn")
        self._enemy_turn_resolved = False
        events: List[CombatEvent] = [EnemyTurnStartedEvent(len(session.enemies))]
        if self.auto_resolve_enemy_turn:
            events.extend(self.execute_enemy_turn())
            if session.phase == "enemy_turn":
                events.extend(self.start_player_turn())
        return self._publish(events)

    # -----------------------
    # Enemy turn
    # -----------------------
    def execute_enemy_turn(self) -> List[CombatEvent]:
        session = self.session
        player = session.player
        if session.phase != "enemy_turn" or player is None or self._enemy_turn_resolved:
            return []
        self._enemy_turn_resolved = True
        events: List[CombatEvent] = []

        for enemy in session.enemies:
            dealt = enemy.process_poison()
            if dealt:
                events.append(PoisonTickEvent(enemy.id, enemy.name, dealt, enemy.hp))
        events.extend(sweep_dead_enemies(session))
        if not session.enemies:
            events.extend(self._complete_wave())
            return self._publish(events)

        incoming = 0
        for enemy in session.enemies:
            intent = enemy.intent
            if isinstance(intent, AttackIntent):
                incoming += intent.damage
            elif isinstance(intent, AttackTwiceIntent):
                incoming += intent.damage * 2
            elif isinstance(intent, DefendIntent):
                session.enemy_block += intent.block
            elif isinstance(intent, DebuffIntent):
                player.damage_buff = max(0, player.damage_buff - DEBUFF_AMOUNT)
                events.append(PlayerDebuffedEvent(enemy.name, player.damage_buff))
            elif isinstance(intent, HealIntent):
                # Heals always land on the first enemy in the roster.
                target = session.enemies[0]
                target.heal(intent.amount)
                events.append(EnemyHealedEvent(enemy.name, target.id, target.name, target.hp))
            # Buff and Summon resolve to nothing.

        shield = session.player_block + session.enemy_block
        damage = max(0, incoming - shield)
        if damage > 0:
            player.take_damage(damage)
        if incoming > 0:
            events.append(PlayerDamagedEvent(incoming, min(incoming, shield), damage, player.hp))
        session.player_block = 0
        session.enemy_block = 0

        if player.is_dead:
            events.extend(self._finish_run(won=False))
            return self._publish(events)

        self._refresh_intents()
        return self._publish(events)

    def start_player_turn(self) -> List[CombatEvent]:
        session = self.session
        player = session.player
        if session.phase != "enemy_turn" or player is None or not self._enemy_turn_resolved:
            return []
        player.end_turn()
        session.player_block = 0
        session.enemy_block = 0
        player.start_turn(self._rng)
        self._set_phase("player_turn")
        return self._publish([PlayerTurnStartedEvent(player.energy, len(player.hand), player.level)])

    # -----------------------
    # Rewards and shops
    # -----------------------
    def claim_gems(self) -> List[CombatEvent]:
        amount = self.session.gems_earned
        if amount <= 0:
            return []

        def add(progression: PlayerProgression) -> int:
            progression.add_gems(amount)
            return progression.gems

        total = self._store.update(add)
        self.session.gems_earned = 0
        return self._publish([GemsClaimedEvent(amount, total)])

    def select_boss_reward(self, relic: RelicDef) -> List[CombatEvent]:
        session = self.session
        if session.phase != "boss_reward":
            return []
        if relic.id not in {offer.id for offer in session.boss_rewards}:
            return self._reject("That relic is not on offer.")
        self._store.update(lambda progression: progression.add_relic(relic.id))
        session.boss_rewards = []
        self._set_phase("phase_complete")
        return self._publish([RelicGainedEvent(relic.id, relic.name)])

    def buy_card(self, card_def: CardDef) -> List[CombatEvent]:
        session = self.session
        player = session.player
        if session.phase not in _SHOP_PHASES or player is None:
            return []
        index = next((i for i, offer in enumerate(session.shop_cards) if offer.id == card_def.id), None)
        if index is None:
            return self._reject("That card is not on offer.")
        price = card_price(card_def)
        if player.gold < price:
            return self._reject(f"You need {price} gold!")
        player.gold -= price
        player.add_card(create_card(card_def, self._rng))
        session.shop_cards.pop(index)
        return self._publish([CardBoughtEvent(card_def.id, card_def.name, price, player.gold)])

    def open_relic_shop(self) -> List[CombatEvent]:
        session = self.session
        if session.phase != "menu":
            return []
        session.available_relics = self._shop.relic_offers(self._store.load().owned_relics, self._rng)
        self._set_phase("relic_shop")
        return self._publish([RelicShopOpenedEvent([relic.id for relic in session.available_relics])])

    def close_relic_shop(self) -> List[CombatEvent]:
        if self.session.phase != "relic_shop":
            return []
        self.session.available_relics = []
        self._set_phase("menu")
        return []

    def buy_relic(self, relic: RelicDef) -> List[CombatEvent]:
        session = self.session
        if session.phase != "relic_shop":
            return []
        if relic.id not in {offer.id for offer in session.available_relics}:
            return self._reject("That relic is not on offer.")
        price = relic_price(relic)

        def purchase(progression: PlayerProgression) -> int | None:
            if progression.owns_relic(relic.id) or not progression.spend_gems(price):
                return None
            progression.add_relic(relic.id)
            return progression.gems

        gems_left = self._store.update(purchase)
        if gems_left is None:
            return self._reject(f"You need {price} gems!")
        session.available_relics = [offer for offer in session.available_relics if offer.id != relic.id]
        return self._publish([RelicBoughtEvent(relic.id, relic.name, price, gems_left)])

    def equip_relic(self, relic: RelicDef) -> List[CombatEvent]:
        if self.session.phase not in _OUT_OF_COMBAT_PHASES:
            return []
        if not self._store.update(lambda progression: progression.equip_relic(relic.id)):
            return self._reject(f"Cannot equip {relic.name}.")
        self._refresh_menu_player()
        return self._publish([RelicEquipChangedEvent(relic.id, relic.name, equipped=True)])

    def unequip_relic(self, relic: RelicDef) -> List[CombatEvent]:
        if self.session.phase not in _OUT_OF_COMBAT_PHASES:
            return []
        if not self._store.update(lambda progression: progression.unequip_relic(relic.id)):
            return []
        self._refresh_menu_player()
        return self._publish([RelicEquipChangedEvent(relic.id, relic.name, equipped=False)])

    def unlock_class(self, class_id: str) -> List[CombatEvent]:
        if self.session.phase not in _OUT_OF_COMBAT_PHASES:
            return []
        class_def = self._classes_repo.find(class_id)
        if class_def is None:
            return self._reject(f"Unknown class '{class_id}'.")

        def unlock(progression: PlayerProgression) -> bool:
            if progression.is_class_unlocked(class_def.id):
                return False
            if not progression.spend_gems(class_def.unlock_cost):
                return False
            return progression.unlock_class(class_def.id)

        if not self._store.update(unlock):
            return self._reject(f"Cannot unlock {class_def.name} (costs {class_def.unlock_cost} gems).")
        return self._publish([ClassUnlockedEvent(class_def.id, class_def.name, class_def.unlock_cost)])

    # -----------------------
    # Internals
    # -----------------------
    def _build_player(self) -> Player:
        assert self._selected_class_id is not None
        progression = self._store.load()
        relics = [
            relic
            for relic in (self._relics_repo.find(relic_id) for relic_id in progression.equipped_relics)
            if relic is not None
        ]
        return create_player_from_class_id(
            self._selected_class_id, relics, self._classes_repo, self._cards_repo, self._rng
        )

    def _refresh_menu_player(self) -> None:
        if self.session.phase == "menu" and self._selected_class_id is not None:
            self.session.player = self._build_player()

    def _begin_wave(self) -> List[CombatEvent]:
        session = self.session
        player = session.player
        assert player is not None
        if session.is_boss_wave:
            boss = generate_boss(session.current_phase, session.difficulty, self._rng)
            escorts = generate_wave(session.wave, session.current_phase, session.difficulty, self._rng)
            session.enemies = [boss] + escorts[: wave_enemy_count(session.wave) - 1]
        else:
            session.enemies = generate_wave(session.wave, session.current_phase, session.difficulty, self._rng)
        session.player_block = 0
        session.enemy_block = 0
        session.selected_card_id = None
        session.selected_enemy_id = None
        self._refresh_intents()
        player.start_turn(self._rng)
        self._set_phase("player_turn")
        logger.info(
            "Phase %s wave %s: %s",
            session.current_phase,
            session.wave,
            [enemy.name for enemy in session.enemies],
        )
        return [
            WaveStartedEvent(
                phase=session.current_phase,
                wave=session.wave,
                enemy_names=[enemy.name for enemy in session.enemies],
                is_boss_wave=session.is_boss_wave,
            ),
            PlayerTurnStartedEvent(player.energy, len(player.hand), player.level),
        ]

    def _refresh_intents(self) -> None:
        session = self.session
        player = session.player
        assert player is not None
        for enemy in session.enemies:
            enemy.intent = generate_intent(
                enemy,
                player_hp=player.hp,
                player_block=session.player_block,
                other_enemies=len(session.enemies) - 1,
                rng=self._rng,
            )

    def _resolve_attack(self, player: Player, card: Card, target_index: int) -> List[CombatEvent]:
        session = self.session
        target = session.enemies[target_index]
        raw = card.value + player.damage_buff
        critical = player.crit_chance > 0 and self._rng.randint(1, 100) <= player.crit_chance
        if critical:
            raw *= CRIT_MULTIPLIER
        dealt = target.take_damage(raw)
        events: List[CombatEvent] = [DamageDealtEvent(target.id, target.name, dealt, target.hp, critical)]

        if player.lifesteal_percent > 0 and self._rng.randint(1, 100) <= player.lifesteal_percent:
            stolen = max(1, dealt // LIFESTEAL_DIVISOR)
            player.heal(stolen)
            events.append(LifestealEvent(stolen, player.hp))

        if target.is_dead:
            session.enemies.pop(target_index)
            events.extend(self._grant_kill_rewards(player, target))
        return events

    def _grant_kill_rewards(self, player: Player, enemy: Enemy) -> List[CombatEvent]:
        session = self.session
        if enemy.is_boss:
            gold, experience, score = BOSS_KILL_REWARD
        elif enemy.is_elite:
            gold, experience, score = ELITE_KILL_REWARD
            gold += session.wave
        else:
            gold, experience, score = NORMAL_KILL_REWARD
            gold += session.wave
        session.score += score
        credited = player.add_gold(gold)
        events: List[CombatEvent] = [EnemyDefeatedEvent(enemy.id, enemy.name, credited, experience, score)]
        events.extend(self._add_experience(player, experience))
        return events

    def _add_experience(self, player: Player, amount: int) -> List[CombatEvent]:
        levels = player.add_experience(amount)
        if levels:
            logger.debug("Player reached level %s", player.level)
        return [LevelUpEvent(player.level - levels + step, player.max_hp) for step in range(1, levels + 1)]

    def _check_turn_end(self) -> List[CombatEvent]:
        session = self.session
        player = session.player
        assert player is not None
        if not session.enemies:
            return self._complete_wave()
        if player.energy <= 0 or not player.hand:
            return self.end_player_turn()
        return []

    def _complete_wave(self) -> List[CombatEvent]:
        session = self.session
        player = session.player
        assert player is not None
        wave = session.wave
        score_bonus = wave * WAVE_SCORE_PER_WAVE
        session.score += score_bonus
        gold = player.add_gold(wave * WAVE_GOLD_PER_WAVE)
        events: List[CombatEvent] = []
        level_events = self._add_experience(player, wave * WAVE_EXP_PER_WAVE)
        # Unclaimed gems from an earlier wave are replaced, not accumulated.
        session.gems_earned = wave * WAVE_GEMS_PER_WAVE
        session.shop_cards = self._shop.card_offers(player.level, self._rng)
        events.append(
            WaveCompletedEvent(wave, score_bonus, gold, wave * WAVE_EXP_PER_WAVE, session.gems_earned)
        )
        events.extend(level_events)

        if session.is_boss_wave and session.is_final_phase:
            session.game_won = True
            events.extend(self._finish_run(won=True))
        elif session.is_boss_wave:
            session.boss_rewards = self._rewards.boss_reward_offers(self._store.load().owned_relics, self._rng)
            self._set_phase("boss_reward")
            events.append(BossRewardsOfferedEvent([relic.id for relic in session.boss_rewards]))
        else:
            self._set_phase("wave_complete")
        return events

    def _finish_run(self, *, won: bool) -> List[CombatEvent]:
        session = self.session
        overall_wave = session.overall_wave
        session.gems_earned = run_end_gems(overall_wave, won)
        granted = self._rewards.complete_game(
            overall_wave=overall_wave, score=session.score, won=won, rng=self._rng
        )
        self._set_phase("game_over")
        logger.info("Run over: won=%s wave=%s score=%s", won, overall_wave, session.score)
        return [
            GameOverEvent(
                won=won,
                overall_wave=overall_wave,
                score=session.score,
                gems_earned=session.gems_earned,
                bonus_relic_ids=[relic.id for relic in granted],
            )
        ]

    def _set_phase(self, phase: GamePhase) -> None:
        if self.session.phase != phase:
            logger.debug("Phase %s -> %s", self.session.phase, phase)
        self.session.phase = phase

    def _reject(self, reason: str) -> List[CombatEvent]:
        return self._publish([ActionRejectedEvent(reason)])

    def _publish(self, events: Sequence[CombatEvent]) -> List[CombatEvent]:
        if events:
            self.session.message = format_event(events[-1])
        return list(events)

    def _player_view(self, player: Player) -> PlayerView:
        return PlayerView(
            player_class=player.player_class,
            hp=player.hp,
            max_hp=player.max_hp,
            energy=player.energy,
            max_energy=player.max_energy,
            gold=player.gold,
            level=player.level,
            experience=player.experience,
            experience_progress=player.experience_progress,
            damage_buff=player.damage_buff,
            hand=[
                CardView(
                    instance_id=card.instance_id,
                    card_id=card.card_id,
                    name=card.name,
                    description=card.definition.description,
                    card_type=card.card_type,
                    cost=self.card_cost(card),
                    value=card.value,
                    needs_target=card_needs_target(card.definition),
                )
                for card in player.hand
            ],
            draw_pile_count=len(player.draw_pile),
            discard_pile_count=len(player.discard_pile),
            deck_count=len(player.deck),
        )

    @staticmethod
    def _enemy_view(enemy: Enemy) -> EnemyView:
        return EnemyView(
            enemy_id=enemy.id,
            name=enemy.name,
            enemy_type=enemy.enemy_type,
            hp=enemy.hp,
            max_hp=enemy.max_hp,
            defense=enemy.defense,
            is_elite=enemy.is_elite,
            intent=describe_intent(enemy.intent) if enemy.intent is not None else "",
            poison_turns=enemy.poison.turns_remaining if enemy.poison.active else 0,
        )
