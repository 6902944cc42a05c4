# game_dataset/data/labeled_point.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence, Union

import numpy as np
import scipy.sparse as sp

FeatureVector = Union[np.ndarray, sp.spmatrix, sp.sparray]


# ============================================================
# Feature vector helpers
# ============================================================
def as_feature_vector(features: FeatureVector | Sequence[float]) -> FeatureVector:
    """
    Normalize input into a dense 1-D float64 array or a sparse CSR row.
    """
    if sp.issparse(features):
        csr = sp.csr_matrix(features, dtype=np.float64)
        if csr.shape[0] != 1:
            raise ValueError(f"sparse features must be a single row, got shape={csr.shape}")
        return csr

    arr = np.asarray(features, dtype=np.float64)
    if arr.ndim != 1:
        raise ValueError(f"dense features must be 1-D, got shape={arr.shape}")
    return arr


def vector_length(features: FeatureVector) -> int:
    return int(features.shape[-1])


def active_size(features: FeatureVector) -> int:
    """
    Number of explicitly stored entries: nnz for sparse rows, full length
    for dense arrays.
    """
    if sp.issparse(features):
        return int(features.nnz)
    return int(features.shape[-1])


def vectors_equal(a: FeatureVector, b: FeatureVector) -> bool:
    if vector_length(a) != vector_length(b):
        return False
    if sp.issparse(a) or sp.issparse(b):
        return (sp.csr_matrix(a) != sp.csr_matrix(b)).nnz == 0
    return bool(np.array_equal(a, b))


# ============================================================
# LabeledPoint (IMMUTABLE)
# ============================================================
@dataclass(frozen=True, eq=False)
class LabeledPoint:
    """
    One training example.

    Immutable: an "updated" point is a new value built with
    ``dataclasses.replace``. ``weight`` is expected to be non-negative but
    is not checked here.
    """

    label: float
    features: FeatureVector
    offset: float = 0.0
    weight: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, "label", float(self.label))
        object.__setattr__(self, "features", as_feature_vector(self.features))
        object.__setattr__(self, "offset", float(self.offset))
        object.__setattr__(self, "weight", float(self.weight))

    # --------------------------------------------------
    @property
    def num_features(self) -> int:
        return vector_length(self.features)

    @property
    def active_size(self) -> int:
        return active_size(self.features)

    def with_offset(self, offset: float) -> "LabeledPoint":
        return replace(self, offset=offset)

    def add_to_offset(self, delta: float) -> "LabeledPoint":
        return replace(self, offset=self.offset + delta)

    # --------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LabeledPoint):
            return NotImplemented
        return (
            self.label == other.label
            and self.offset == other.offset
            and self.weight == other.weight
            and vectors_equal(self.features, other.features)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        kind = "sparse" if sp.issparse(self.features) else "dense"
        return (
            f"LabeledPoint(label={self.label}, features=<{kind} len={self.num_features}>, "
            f"offset={self.offset}, weight={self.weight})"
        )
