"""Repository exports."""

from .cards_repo import CardsRepository, card_needs_target
from .classes_repo import ClassesRepository
from .relics_repo import RelicsRepository

__all__ = [
    "CardsRepository",
    "ClassesRepository",
    "RelicsRepository",
    "card_needs_target",
]
