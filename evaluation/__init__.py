"""
Evaluation layer: exercise statistics and batch scoring of finished dictations.
"""
from evaluation.stats import (
    aggregate_stats,
    count_strict_matches,
    sentence_is_correct,
    ExerciseStats,
    SentenceStats,
)
from evaluation.batch_runner import run_batch, write_report

__all__ = [
    "aggregate_stats",
    "count_strict_matches",
    "sentence_is_correct",
    "ExerciseStats",
    "SentenceStats",
    "run_batch",
    "write_report",
]
