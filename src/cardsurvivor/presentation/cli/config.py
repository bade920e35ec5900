"""CLI configuration helpers for options persistence."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict

from cardsurvivor.core.types import DIFFICULTIES

_DEFAULT_DIFFICULTY = "normal"
_DEFAULT_AUTO_RESOLVE = True
PROGRESSION_FILENAME = "player_progression.json"

# Presentation pacing in seconds; the engine itself never waits.
ENEMY_TURN_DELAY = 0.5
MESSAGE_DURATION = 1.5


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    override = os.environ.get("CARDSURVIVOR_DATA_DIR")
    if override:
        return Path(override)
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "CardSurvivor"
        return Path.home() / "CardSurvivor"
    return Path.home() / ".config" / "card_survivor"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def get_progression_path() -> Path:
    """Return where cross-run progression is stored."""
    return get_user_data_dir() / PROGRESSION_FILENAME


def _normalize_difficulty(value: object) -> str:
    return value if value in DIFFICULTIES else _DEFAULT_DIFFICULTY  # type: ignore[return-value]


def _normalize_auto_resolve(value: object) -> bool:
    return value if isinstance(value, bool) else _DEFAULT_AUTO_RESOLVE


def default_config() -> Dict[str, Any]:
    return {"difficulty": _DEFAULT_DIFFICULTY, "auto_resolve_enemy_turn": _DEFAULT_AUTO_RESOLVE}


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return default_config()
    if not isinstance(raw, dict):
        return default_config()
    return {
        "difficulty": _normalize_difficulty(raw.get("difficulty")),
        "auto_resolve_enemy_turn": _normalize_auto_resolve(raw.get("auto_resolve_enemy_turn")),
    }


def save_config(config: Dict[str, Any], path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "difficulty": _normalize_difficulty(config.get("difficulty")),
        "auto_resolve_enemy_turn": _normalize_auto_resolve(config.get("auto_resolve_enemy_turn")),
    }
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
