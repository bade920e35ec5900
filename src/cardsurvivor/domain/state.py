"""Live-run session state."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from cardsurvivor.core.types import Difficulty, GamePhase
from cardsurvivor.domain.defs import CardDef, RelicDef
from cardsurvivor.domain.entities import Enemy, Player

WAVES_PER_PHASE = 5
TOTAL_PHASES = 3


@dataclass
class GameSession:
    """Everything the combat engine mutates during a run."""

    phase: GamePhase = "class_selection"
    player: Player | None = None
    enemies: List[Enemy] = field(default_factory=list)
    wave: int = 1
    current_phase: int = 1
    difficulty: Difficulty = "normal"
    score: int = 0
    player_block: int = 0
    enemy_block: int = 0
    message: str = ""
    gems_earned: int = 0
    game_won: bool = False
    selected_card_id: str | None = None
    selected_enemy_id: str | None = None
    shop_cards: List[CardDef] = field(default_factory=list)
    available_relics: List[RelicDef] = field(default_factory=list)
    boss_rewards: List[RelicDef] = field(default_factory=list)

    @property
    def overall_wave(self) -> int:
        return (self.current_phase - 1) * WAVES_PER_PHASE + self.wave

    @property
    def is_boss_wave(self) -> bool:
        return self.wave == WAVES_PER_PHASE

    @property
    def is_final_phase(self) -> bool:
        return self.current_phase >= TOTAL_PHASES
