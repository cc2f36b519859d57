"""
Batch scoring: run exercise statistics over a dataset of finished dictations and
write a structured JSON report.

Dataset JSON is a list of exercises:
  {"exercise_id": "...", "sentences": ["...", ...], "transcripts": ["..." | null, ...],
   "preserve_case": false}
"""
import json
import logging
from typing import Any, Dict, List, Optional

from core.metrics import wer_cer
from evaluation.stats import aggregate_stats

logger = logging.getLogger(__name__)

# Exercises at or above this word error rate are listed in the report
HIGH_WER_THRESHOLD = 0.5


def _get_sentences(item: Dict[str, Any]) -> List[str]:
    return item.get("sentences") or item.get("reference_sentences") or []


def _get_transcripts(item: Dict[str, Any]) -> List[Optional[str]]:
    return item.get("transcripts") or item.get("candidates") or []


def load_dataset(dataset_path: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    with open(dataset_path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError("Dataset must be a list of exercises")
    return data[:limit] if limit else data


def score_exercise(item: Dict[str, Any], index: int, preserve_case: bool = False) -> Dict[str, Any]:
    sentences = _get_sentences(item)
    transcripts = _get_transcripts(item)
    preserve_case = bool(item.get("preserve_case", preserve_case))
    stats = aggregate_stats(sentences, transcripts, preserve_case)
    full_ref = " ".join(sentences)
    full_hyp = " ".join(t for t in transcripts if t)
    w, c = wer_cer(full_ref, full_hyp, preserve_case=preserve_case)
    return {
        "exercise_id": item.get("exercise_id") or str(index),
        "preserve_case": preserve_case,
        "stats": stats.to_dict(),
        "normalized_wer": round(w, 4),
        "normalized_cer": round(c, 4),
    }


def run_batch(dataset_path: str, limit: Optional[int] = None, preserve_case: bool = False) -> Dict[str, Any]:
    """
    Score every exercise in the dataset. Exercises that violate the input contract
    (more transcripts than sentences) are reported under "skipped" with the reason.
    """
    items = load_dataset(dataset_path, limit)
    exercises: List[Dict[str, Any]] = []
    skipped: List[Dict[str, Any]] = []
    for i, item in enumerate(items):
        if not _get_sentences(item):
            skipped.append({"exercise_id": item.get("exercise_id") or str(i), "reason": "no sentences"})
            continue
        try:
            exercises.append(score_exercise(item, i, preserve_case))
        except ValueError as e:
            logger.warning("Skipping exercise %s: %s", item.get("exercise_id", i), e)
            skipped.append({"exercise_id": item.get("exercise_id") or str(i), "reason": str(e)})

    n = len(exercises)
    mean_accuracy = sum(e["stats"]["accuracy_percentage"] for e in exercises) / n if n else 0.0
    mean_completion = sum(e["stats"]["completion_percentage"] for e in exercises) / n if n else 0.0
    high_wer = [
        {"exercise_id": e["exercise_id"], "word_error_rate": e["stats"]["word_error_rate"]}
        for e in exercises
        if e["stats"]["word_error_rate"] >= HIGH_WER_THRESHOLD
    ]
    if high_wer:
        logger.warning("%d exercises with WER >= %.2f", len(high_wer), HIGH_WER_THRESHOLD)
    logger.info("Scored %d exercises (%d skipped)", n, len(skipped))
    return {
        "n_exercises": n,
        "mean_accuracy_percentage": round(mean_accuracy, 2),
        "mean_completion_percentage": round(mean_completion, 2),
        "high_wer_exercises": high_wer,
        "skipped": skipped,
        "exercises": exercises,
    }


def write_report(report: Dict[str, Any], output_path: str) -> None:
    """Write batch report to JSON file."""
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(report, f, ensure_ascii=False, indent=2)
    logger.info("Wrote dictation report to %s", output_path)
