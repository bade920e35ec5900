"""Versioned persistence for cross-run player progression."""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, TypeVar

from cardsurvivor.core.types import PLAYER_CLASS_IDS, PlayerClassId
from cardsurvivor.domain.progression import (
    DEFAULT_UNLOCKED_CLASS,
    MAX_EQUIPPED_RELICS,
    PlayerProgression,
)
from cardsurvivor.services.errors import SaveLoadError

logger = logging.getLogger(__name__)

ProgressionPayload = Dict[str, Any]
T = TypeVar("T")

PROGRESSION_KEY = "player_progression"


class ProgressionSerializer:
    """Converts PlayerProgression to/from a validated, versioned payload."""

    SAVE_VERSION = 1

    def serialize(self, progression: PlayerProgression) -> ProgressionPayload:
        return {
            "save_version": self.SAVE_VERSION,
            "key": PROGRESSION_KEY,
            "progression": {
                "gems": progression.gems,
                "total_wins": progression.total_wins,
                "total_games": progression.total_games,
                "best_wave": progression.best_wave,
                "best_score": progression.best_score,
                "unlocked_classes": list(progression.unlocked_classes),
                "owned_relics": list(progression.owned_relics),
                "equipped_relics": list(progression.equipped_relics),
            },
        }

    def deserialize(self, payload: Mapping[str, Any]) -> PlayerProgression:
        """Rebuild progression, repairing anything that would break its invariants."""
        if not isinstance(payload, Mapping):
            raise SaveLoadError("Progression data must be a JSON object.")
        if payload.get("save_version") != self.SAVE_VERSION:
            raise SaveLoadError(f"Unsupported progression version: {payload.get('save_version')!r}")
        if payload.get("key") != PROGRESSION_KEY:
            raise SaveLoadError("Progression data has an unexpected storage key.")
        body = payload.get("progression")
        if not isinstance(body, Mapping):
            raise SaveLoadError("Progression data is missing its body.")

        owned = self._unique(self._require_str_list(body.get("owned_relics", []), "owned_relics"))
        equipped = [
            relic_id
            for relic_id in self._unique(
                self._require_str_list(body.get("equipped_relics", []), "equipped_relics")
            )
            if relic_id in owned
        ][:MAX_EQUIPPED_RELICS]
        unlocked: List[PlayerClassId] = [
            class_id
            for class_id in self._unique(
                self._require_str_list(body.get("unlocked_classes", []), "unlocked_classes")
            )
            if class_id in PLAYER_CLASS_IDS
        ]
        if not unlocked:
            unlocked = [DEFAULT_UNLOCKED_CLASS]

        return PlayerProgression(
            gems=self._require_int(body.get("gems", 0), "gems"),
            total_wins=self._require_int(body.get("total_wins", 0), "total_wins"),
            total_games=self._require_int(body.get("total_games", 0), "total_games"),
            best_wave=self._require_int(body.get("best_wave", 0), "best_wave"),
            best_score=self._require_int(body.get("best_score", 0), "best_score"),
            unlocked_classes=unlocked,
            owned_relics=owned,
            equipped_relics=equipped,
        )

    @staticmethod
    def _require_int(value: Any, context: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise SaveLoadError(f"{context} must be a non-negative integer.")
        return value

    @staticmethod
    def _require_str_list(value: Any, context: str) -> List[str]:
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise SaveLoadError(f"{context} must be a list of strings.")
        return list(value)

    @staticmethod
    def _unique(values: List[str]) -> List[str]:
        seen: List[str] = []
        for value in values:
            if value not in seen:
                seen.append(value)
        return seen


class ProgressionStore:
    """Load/save contract for the persisted progression record."""

    def load(self) -> PlayerProgression:
        raise NotImplementedError

    def save(self, progression: PlayerProgression) -> None:
        raise NotImplementedError

    def update(self, mutate: Callable[[PlayerProgression], T]) -> T:
        """Read the current record, apply ``mutate`` and write it back."""
        progression = self.load()
        result = mutate(progression)
        self.save(progression)
        return result


class InMemoryProgressionStore(ProgressionStore):
    """Keeps the serialized record in memory; used by tests and headless runs."""

    def __init__(self, progression: PlayerProgression | None = None) -> None:
        self._serializer = ProgressionSerializer()
        self._payload = self._serializer.serialize(progression or PlayerProgression())

    def load(self) -> PlayerProgression:
        return self._serializer.deserialize(self._payload)

    def save(self, progression: PlayerProgression) -> None:
        self._payload = self._serializer.serialize(progression)


class JsonProgressionStore(ProgressionStore):
    """Stores progression as a JSON file, replaced atomically on every save."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._serializer = ProgressionSerializer()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> PlayerProgression:
        if not self._path.exists():
            logger.debug("No progression at %s; starting fresh", self._path)
            return PlayerProgression()
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
            return self._serializer.deserialize(payload)
        except (OSError, ValueError, SaveLoadError) as exc:
            logger.warning("Could not read progression from %s (%s); using defaults", self._path, exc)
            return PlayerProgression()

    def save(self, progression: PlayerProgression) -> None:
        payload = self._serializer.serialize(progression)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".progression_", suffix=".tmp")
        except OSError as exc:
            raise SaveLoadError(f"Could not write progression to {self._path}: {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, sort_keys=True)
            os.replace(temp_name, self._path)
        except (OSError, TypeError, ValueError) as exc:
            self._discard_temp(temp_name)
            raise SaveLoadError(f"Could not write progression to {self._path}: {exc}") from exc
        logger.debug("Saved progression to %s", self._path)

    @staticmethod
    def _discard_temp(temp_name: str) -> None:
        try:
            os.unlink(temp_name)
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Could not remove temporary progression file %s (%s)", temp_name, exc)
