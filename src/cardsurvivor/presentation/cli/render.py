"""Shared CLI rendering helpers."""
from __future__ import annotations

import os
from typing import Iterable, Sequence

from cardsurvivor.domain.defs import CardDef, RelicDef
from cardsurvivor.domain.state import WAVES_PER_PHASE
from cardsurvivor.services.combat_engine import EnemyView, GameSnapshot, PlayerView
from cardsurvivor.services.events import CombatEvent, format_event
from cardsurvivor.services.shop_service import card_price, relic_price


def debug_enabled() -> bool:
    """Return True only when CARDSURVIVOR_DEBUG is explicitly set to '1'."""
    return os.getenv("CARDSURVIVOR_DEBUG") == "1"


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def render_menu(title: str, options: Sequence[str]) -> None:
    """Display a menu section with numbered options."""
    render_heading(title)
    for idx, label in enumerate(options, start=1):
        print(f"{idx}. {label}")


def render_bullet_lines(lines: Iterable[str]) -> None:
    """Print bullet-prefixed lines."""
    for line in lines:
        print(f"- {line}")


def render_events(events: Sequence[CombatEvent]) -> None:
    if not events:
        return
    render_bullet_lines(format_event(event) for event in events)


def hp_bar(current: int, maximum: int, width: int = 20) -> str:
    if maximum <= 0:
        return "[" + " " * width + "]"
    filled = round(width * max(0, current) / maximum)
    return "[" + "#" * filled + "-" * (width - filled) + "]"


def render_player(player: PlayerView, block: int) -> None:
    print(
        f"{player.player_class.title()} Lv{player.level} ({round(player.experience_progress * 100)}% XP)  "
        f"HP {player.hp}/{player.max_hp} {hp_bar(player.hp, player.max_hp)}  "
        f"Energy {player.energy}/{player.max_energy}  Block {block}  Gold {player.gold}"
    )
    if player.damage_buff:
        print(f"Damage bonus +{player.damage_buff}")
    print(f"Draw {player.draw_pile_count} | Discard {player.discard_pile_count} | Deck {player.deck_count}")


def render_enemies(enemies: Sequence[EnemyView]) -> None:
    for idx, enemy in enumerate(enemies, start=1):
        tags = []
        if enemy.is_elite:
            tags.append("elite")
        if enemy.defense:
            tags.append(f"def {enemy.defense}")
        if enemy.poison_turns:
            tags.append(f"poisoned {enemy.poison_turns}")
        suffix = f" ({', '.join(tags)})" if tags else ""
        print(
            f"{idx}. {enemy.name}{suffix}  HP {enemy.hp}/{enemy.max_hp} "
            f"{hp_bar(enemy.hp, enemy.max_hp, 10)}  Intent: {enemy.intent}"
        )


def render_combat(snapshot: GameSnapshot) -> None:
    """Draw the battlefield for the current player turn."""
    boss = " (BOSS)" if snapshot.wave == WAVES_PER_PHASE else ""
    render_heading(f"Phase {snapshot.current_phase} - Wave {snapshot.wave}{boss}  Score {snapshot.score}")
    render_enemies(snapshot.enemies)
    print()
    if snapshot.player is None:
        return
    render_player(snapshot.player, snapshot.player_block)
    print("Hand:")
    for idx, card in enumerate(snapshot.player.hand, start=1):
        marker = "*" if card.instance_id == snapshot.selected_card_id else " "
        print(f" {marker}{idx}. {card.name} [{card.card_type}, {card.cost}E] {card.description}")
    if debug_enabled():
        print(f"[debug] phase={snapshot.phase} message={snapshot.message!r}")


def describe_card_offer(card: CardDef) -> str:
    return f"{card.name} ({card.rarity}, {card.cost}E) - {card.description} - {card_price(card)} gold"


def describe_relic(relic: RelicDef, *, with_price: bool = False) -> str:
    target = f" [{relic.target_class}]" if relic.target_class else ""
    price = f" - {relic_price(relic)} gems" if with_price else ""
    return f"{relic.name}{target} ({relic.rarity}) - {relic.description}{price}"
