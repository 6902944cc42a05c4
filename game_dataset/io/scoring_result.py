# game_dataset/io/scoring_result.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Optional

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from game_dataset import logs
from game_dataset.utils.errors import SchemaValidationError

# ============================================================
# Interchange schema (FROZEN: downstream consumers read these names)
# ============================================================
SCORING_RESULT_SCHEMA = pa.schema(
    [
        pa.field("uid", pa.string(), nullable=True),
        pa.field("label", pa.float64(), nullable=True),
        pa.field("modelId", pa.string(), nullable=False),
        pa.field("predictionScore", pa.float64(), nullable=False),
        pa.field("weight", pa.float64(), nullable=True),
        pa.field("metadataMap", pa.map_(pa.string(), pa.string()), nullable=True),
    ]
)

REQUIRED_FIELDS = tuple(f.name for f in SCORING_RESULT_SCHEMA if not f.nullable)


@dataclass(frozen=True)
class ScoringResult:
    """One scored record, as persisted for downstream consumers."""

    model_id: str
    prediction_score: float
    uid: Optional[str] = None
    label: Optional[float] = None
    weight: Optional[float] = None
    metadata_map: Optional[Mapping[str, str]] = None

    def to_record(self) -> dict:
        return {
            "uid": self.uid,
            "label": self.label,
            "modelId": self.model_id,
            "predictionScore": self.prediction_score,
            "weight": self.weight,
            "metadataMap": dict(self.metadata_map) if self.metadata_map is not None else None,
        }


def validate_record(record: Mapping) -> None:
    unknown = set(record) - set(SCORING_RESULT_SCHEMA.names)
    if unknown:
        raise SchemaValidationError(f"[ScoringResult] unknown fields: {sorted(unknown)}")

    for name in REQUIRED_FIELDS:
        if record.get(name) is None:
            raise SchemaValidationError(f"[ScoringResult] required field '{name}' is missing")


def to_table(results: Iterable[ScoringResult | Mapping]) -> pa.Table:
    records = []
    for r in results:
        record = r.to_record() if isinstance(r, ScoringResult) else dict(r)
        validate_record(record)
        if record.get("metadataMap") is not None:
            record["metadataMap"] = list(record["metadataMap"].items())
        records.append(record)

    return pa.Table.from_pylist(records, schema=SCORING_RESULT_SCHEMA)


def write_scoring_results(results: Iterable[ScoringResult | Mapping], path: Path | str) -> Path:
    """
    Write scoring results to a parquet file with the interchange schema.
    Optional fields absent from a record are written as null.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    table = to_table(results)
    pq.write_table(table, path)

    logs.info(f"[ScoringResult] wrote rows={table.num_rows} → {path}")
    return path


def read_scoring_results(path: Path | str) -> pd.DataFrame:
    table = pq.read_table(path)
    missing = set(SCORING_RESULT_SCHEMA.names) - set(table.column_names)
    if missing:
        raise SchemaValidationError(f"[ScoringResult] {path} missing columns: {sorted(missing)}")
    return table.select(SCORING_RESULT_SCHEMA.names).to_pandas()


def _to_scoring_result(model_id: str, key: int, pair) -> ScoringResult:
    score, point = pair
    return ScoringResult(
        model_id=model_id,
        prediction_score=float(score),
        uid=str(key),
        label=point.label if point is not None else None,
        weight=point.weight if point is not None else None,
    )


def build_scoring_results(scores, labeled_points, model_id: str) -> list[ScoringResult]:
    """
    Pair every scored key with its labeled point (when known) and build the
    records to persist. Keys without a labeled point get null label/weight.

    ``scores`` is a CoordinateDataScores, ``labeled_points`` the collection
    of a FixedEffectDataSet.
    """
    joined = scores.scores.left_outer_join(labeled_points)
    return [_to_scoring_result(model_id, key, pair) for key, pair in joined.collect()]
