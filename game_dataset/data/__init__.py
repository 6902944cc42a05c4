from .labeled_point import LabeledPoint
from .game_datum import GameDatum
from .scores import CoordinateDataScores
from .fixed_effect_dataset import DatasetSummary, FixedEffectDataSet
from .dataset_builder import FixedEffectDataSetBuilder

__all__ = [
    "LabeledPoint",
    "GameDatum",
    "CoordinateDataScores",
    "DatasetSummary",
    "FixedEffectDataSet",
    "FixedEffectDataSetBuilder",
]
