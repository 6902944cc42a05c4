#!filepath: game_dataset/__init__.py

from .utils.logger import Logging, logs
from .config.app_config import AppConfig
from .compute import ComputeContext, PartitionedKeyedCollection, StorageLevel
from .data import (
    CoordinateDataScores,
    FixedEffectDataSet,
    FixedEffectDataSetBuilder,
    GameDatum,
    LabeledPoint,
)

__version__ = "0.1.0"

__all__ = [
    "logs", "Logging",
    "AppConfig",
    "ComputeContext",
    "PartitionedKeyedCollection",
    "StorageLevel",
    "LabeledPoint",
    "GameDatum",
    "CoordinateDataScores",
    "FixedEffectDataSet",
    "FixedEffectDataSetBuilder",
]
