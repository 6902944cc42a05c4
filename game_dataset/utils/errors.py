# game_dataset/utils/errors.py


class GameDatasetError(RuntimeError):
    """Base class for every error raised by the dataset layer."""


class ConfigurationError(GameDatasetError):
    """
    Raised for invalid user-provided configuration (feature shard ids,
    partition counts, executor modes).
    Should NOT print traceback.
    """


class FeatureShardNotFoundError(ConfigurationError, KeyError):
    """A datum has no feature vector for the requested shard id."""

    def __init__(self, feature_shard_id: str, available: list[str] | None = None):
        self.feature_shard_id = feature_shard_id
        self.available = sorted(available or [])
        super().__init__(
            f"feature shard '{feature_shard_id}' not found, "
            f"available shards: {self.available}"
        )

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class FeatureDimensionMismatchError(GameDatasetError):
    """Records of one feature shard do not share a single vector length."""


class StorageLevelError(GameDatasetError):
    """A persisted collection was asked to switch to a different storage level."""


class SchemaValidationError(GameDatasetError, ValueError):
    """A scoring result violates the interchange schema."""
