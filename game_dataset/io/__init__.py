from .scoring_result import (
    SCORING_RESULT_SCHEMA,
    ScoringResult,
    build_scoring_results,
    read_scoring_results,
    write_scoring_results,
)

__all__ = [
    "SCORING_RESULT_SCHEMA",
    "ScoringResult",
    "build_scoring_results",
    "read_scoring_results",
    "write_scoring_results",
]
