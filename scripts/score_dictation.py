#!/usr/bin/env python3
"""
Score finished dictation exercises offline.

Usage:
  # Score a dataset and print per-exercise accuracy
  python scripts/score_dictation.py dataset/exercises.json

  # Check capitalization too, and write the full JSON report
  python scripts/score_dictation.py dataset/exercises.json --preserve-case --output report.json

  # Sanity check: use the reference sentences as transcripts (expect 100% accuracy)
  python scripts/score_dictation.py dataset/exercises.json --self-test

Expects JSON: a list of {"exercise_id": "...", "sentences": [...], "transcripts": [... or null]}.
"""
import argparse
import logging
import os
import sys

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from evaluation.batch_runner import load_dataset, run_batch, score_exercise, write_report


def main():
    parser = argparse.ArgumentParser(description="Score German dictation exercises")
    parser.add_argument("dataset", help="Path to dataset JSON (list of {exercise_id, sentences, transcripts})")
    parser.add_argument("--preserve-case", action="store_true", help="Treat capitalization mistakes as errors")
    parser.add_argument("--limit", type=int, default=None, help="Max number of exercises to process")
    parser.add_argument("--output", default=None, help="Write the full JSON report here")
    parser.add_argument("--self-test", action="store_true", help="Use the references as transcripts (expect 100%%)")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.self_test:
        exercises = []
        for i, item in enumerate(load_dataset(args.dataset, args.limit)):
            item = dict(item, transcripts=list(item.get("sentences") or []))
            exercises.append(score_exercise(item, i, args.preserve_case))
        report = {"n_exercises": len(exercises), "exercises": exercises}
    else:
        report = run_batch(args.dataset, limit=args.limit, preserve_case=args.preserve_case)

    for ex in report["exercises"]:
        s = ex["stats"]
        print(
            f"  {ex['exercise_id']}: accuracy={s['accuracy_percentage']:.1f}% "
            f"completion={s['completion_percentage']:.1f}% WER={s['word_error_rate']:.4f}"
        )
    if not report["exercises"]:
        print("No exercises with sentences found.")
        return 1
    print(f"\nProcessed {len(report['exercises'])} exercises.")
    if "mean_accuracy_percentage" in report:
        print(f"Mean accuracy: {report['mean_accuracy_percentage']:.1f}%")
    if args.output:
        write_report(report, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
