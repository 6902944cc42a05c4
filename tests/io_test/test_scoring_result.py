# tests/io/test_scoring_result.py
from __future__ import annotations

import pandas as pd
import pyarrow.parquet as pq
import pytest

from game_dataset.data.scores import CoordinateDataScores
from game_dataset.io.scoring_result import (
    SCORING_RESULT_SCHEMA,
    ScoringResult,
    build_scoring_results,
    read_scoring_results,
    to_table,
    write_scoring_results,
)
from game_dataset.utils.errors import SchemaValidationError


def test_schema_field_names_and_nullability():
    fields = {f.name: f.nullable for f in SCORING_RESULT_SCHEMA}
    assert fields == {
        "uid": True,
        "label": True,
        "modelId": False,
        "predictionScore": False,
        "weight": True,
        "metadataMap": True,
    }


def test_write_and_read_back(tmp_path):
    path = write_scoring_results(
        [
            ScoringResult(model_id="fixed", prediction_score=0.7, uid="a", label=1.0,
                          weight=2.0, metadata_map={"shard": "global"}),
            ScoringResult(model_id="fixed", prediction_score=-0.1),
        ],
        tmp_path / "out" / "scores.parquet",
    )

    assert pq.read_schema(path).names == SCORING_RESULT_SCHEMA.names

    df = read_scoring_results(path)
    assert list(df["modelId"]) == ["fixed", "fixed"]
    assert df["predictionScore"].tolist() == pytest.approx([0.7, -0.1])
    assert df.loc[0, "uid"] == "a"
    assert pd.isna(df.loc[1, "uid"])
    assert df["weight"].isna().tolist() == [False, True]
    assert dict(df.loc[0, "metadataMap"]) == {"shard": "global"}
    assert df.loc[1, "metadataMap"] is None


def test_mapping_records_default_optional_fields_to_null():
    table = to_table([{"modelId": "m", "predictionScore": 1.5}])
    row = table.to_pylist()[0]

    assert row["uid"] is None
    assert row["weight"] is None
    assert row["metadataMap"] is None


@pytest.mark.parametrize(
    "record",
    [
        {"predictionScore": 1.0},
        {"modelId": "m"},
        {"modelId": "m", "predictionScore": None},
        {"modelId": "m", "predictionScore": 1.0, "extra": 1},
    ],
)
def test_invalid_records_rejected(record):
    with pytest.raises(SchemaValidationError):
        to_table([record])


def test_build_scoring_results_from_dataset(ctx, two_point_dataset):
    scores = CoordinateDataScores.from_mapping(ctx, {1: 0.9, 7: 0.3})

    results = {r.uid: r for r in build_scoring_results(scores, two_point_dataset.labeled_points, "fixed")}

    assert set(results) == {"1", "7"}
    assert results["1"].label == 1.0
    assert results["1"].weight == 1.0
    assert results["1"].prediction_score == pytest.approx(0.9)
    assert results["7"].label is None
    assert results["7"].weight is None
