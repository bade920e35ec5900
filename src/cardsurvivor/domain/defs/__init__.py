"""Domain definition exports."""

from .card_def import CardDef
from .class_def import ClassDef, LevelUpStep
from .relic_def import RelicDef

__all__ = [
    "CardDef",
    "ClassDef",
    "LevelUpStep",
    "RelicDef",
]
