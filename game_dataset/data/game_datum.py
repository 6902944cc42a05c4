# game_dataset/data/game_datum.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional

from game_dataset.data.labeled_point import FeatureVector, LabeledPoint
from game_dataset.utils.errors import FeatureShardNotFoundError


@dataclass(frozen=True)
class GameDatum:
    """
    Raw per-entity training record as produced by the feature-join stage.

    - feature_shard_container : shard id → feature vector
    - id_tag_to_value_map     : id tag → entity id (e.g. "userId" → "42"),
                                used by random-effect coordinates
    """

    response: float
    offset: float = 0.0
    weight: float = 1.0
    feature_shard_container: Mapping[str, FeatureVector] = field(default_factory=dict)
    id_tag_to_value_map: Mapping[str, str] = field(default_factory=dict)

    def feature_shard_ids(self) -> list[str]:
        return list(self.feature_shard_container)

    def id_value(self, id_tag: str) -> Optional[str]:
        return self.id_tag_to_value_map.get(id_tag)

    def generate_labeled_point_with_feature_shard_id(self, feature_shard_id: str) -> LabeledPoint:
        """
        Project this datum onto one feature shard.

        Raises FeatureShardNotFoundError if the shard is absent.
        """
        if feature_shard_id not in self.feature_shard_container:
            raise FeatureShardNotFoundError(feature_shard_id, list(self.feature_shard_container))

        return LabeledPoint(
            label=self.response,
            features=self.feature_shard_container[feature_shard_id],
            offset=self.offset,
            weight=self.weight,
        )
