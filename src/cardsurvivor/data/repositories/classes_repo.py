"""Player classes repository."""
from __future__ import annotations

from typing import Dict

from cardsurvivor.core.types import PLAYER_CLASS_IDS
from cardsurvivor.data.errors import DataReferenceError, DataValidationError
from cardsurvivor.data.repositories.base import RepositoryBase
from cardsurvivor.data.repositories.cards_repo import CardsRepository
from cardsurvivor.domain.defs import ClassDef, LevelUpStep

_LEVEL_UP_FIELDS = ("max_hp", "damage_buff", "extra_card_draw", "lifesteal_percent", "regeneration")


class ClassesRepository(RepositoryBase[ClassDef]):
    """Loads class definitions and validates starter decks against the card catalog."""

    def __init__(self, base_path=None, cards_repo: CardsRepository | None = None) -> None:
        super().__init__("classes.json", base_path)
        self._cards_repo = cards_repo or CardsRepository(base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, ClassDef]:
        classes: Dict[str, ClassDef] = {}
        required = {
            "name",
            "description",
            "passive",
            "base_hp",
            "base_energy",
            "base_damage",
            "unlock_cost",
            "level_up",
            "starting_deck",
        }
        for raw_id, payload in raw.items():
            context = f"class '{raw_id}'"
            class_id = self._require_choice(raw_id, PLAYER_CLASS_IDS, f"{context} id")
            class_data = self._require_mapping(payload, context)
            self._assert_required(class_data, required, context)
            deck = self._require_str_list(class_data["starting_deck"], f"{context} starting_deck")
            if not deck:
                raise DataValidationError(f"{context} starting_deck must not be empty.")
            for card_id in deck:
                if self._cards_repo.find(card_id) is None:
                    raise DataReferenceError(f"{context} references unknown card '{card_id}'.")
            classes[raw_id] = ClassDef(
                id=class_id,
                name=self._require_str(class_data["name"], f"{context} name"),
                description=self._require_str(class_data["description"], f"{context} description"),
                passive=self._require_str(class_data["passive"], f"{context} passive"),
                base_hp=self._require_int(class_data["base_hp"], f"{context} base_hp", minimum=1),
                base_energy=self._require_int(class_data["base_energy"], f"{context} base_energy", minimum=0),
                base_damage=self._require_int(class_data["base_damage"], f"{context} base_damage", minimum=0),
                hp_bonus=self._optional_int(class_data, "hp_bonus", context),
                energy_bonus=self._optional_int(class_data, "energy_bonus", context),
                damage_bonus_percent=self._optional_int(class_data, "damage_bonus_percent", context),
                flat_damage_bonus=self._optional_int(class_data, "flat_damage_bonus", context),
                lifesteal_percent=self._optional_int(class_data, "lifesteal_percent", context),
                regeneration=self._optional_int(class_data, "regeneration", context),
                power_discount=self._optional_int(class_data, "power_discount", context),
                unlock_cost=self._require_int(class_data["unlock_cost"], f"{context} unlock_cost", minimum=0),
                level_up=self._build_level_up(class_data["level_up"], context),
                starting_deck=tuple(deck),
            )
        return classes

    def _optional_int(self, payload: dict[str, object], key: str, context: str) -> int:
        return self._require_int(payload.get(key, 0), f"{context} {key}", minimum=0)

    def _build_level_up(self, value: object, context: str) -> LevelUpStep:
        step_data = self._require_mapping(value, f"{context} level_up")
        unknown = set(step_data) - set(_LEVEL_UP_FIELDS)
        if unknown:
            raise DataValidationError(f"{context} level_up has unknown fields: {sorted(unknown)}")
        return LevelUpStep(
            **{key: self._optional_int(step_data, key, f"{context} level_up") for key in _LEVEL_UP_FIELDS}
        )
