# game_dataset/config/data_config.py
from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class FixedEffectDataConfiguration(BaseModel):
    """
    Data configuration for one fixed-effect coordinate.

    feature_shard_id is the only field the dataset itself depends on;
    the rest tune how the dataset is built.
    """

    feature_shard_id: str
    min_num_partitions: int = Field(default=1, ge=1)
    validate_feature_dimension: bool = True

    @field_validator("feature_shard_id")
    @classmethod
    def _strip_shard_id(cls, v: str) -> str:
        return v.strip()
