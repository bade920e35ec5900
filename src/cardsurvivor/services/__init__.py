"""Service layer exports."""

from .combat_engine import GameEngine, GameSnapshot
from .errors import FactoryError, SaveLoadError
from .progression_store import (
    InMemoryProgressionStore,
    JsonProgressionStore,
    ProgressionSerializer,
    ProgressionStore,
)
from .reward_service import RewardService
from .shop_service import ShopService

__all__ = [
    "FactoryError",
    "GameEngine",
    "GameSnapshot",
    "InMemoryProgressionStore",
    "JsonProgressionStore",
    "ProgressionSerializer",
    "ProgressionStore",
    "RewardService",
    "SaveLoadError",
    "ShopService",
]
