"""
Exercise statistics: completion, strict accuracy and global edit-op counts.

Strict correctness only ever uses are_exactly_equal, so the numbers agree with
what the live view marks as correct. Edit-op counts come from one global
alignment of all reference words against all typed words.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from alignment.word_alignment import align_words, count_ops
from core.normalization import normalize
from core.similarity import are_exactly_equal
from core.tokenizer import split_words

logger = logging.getLogger(__name__)


def _percent(part: int, whole: int) -> float:
    return part / whole * 100.0 if whole else 0.0


@dataclass(frozen=True)
class SentenceStats:
    """Counts for one reference sentence and what was typed for it."""
    index: int
    reference: str
    candidate: Optional[str]
    total_words: int
    attempted_words: int
    correct_words: int
    is_correct: bool

    @property
    def attempted(self) -> bool:
        return self.candidate is not None

    @property
    def incorrect_words(self) -> int:
        return self.attempted_words - self.correct_words

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "reference": self.reference,
            "candidate": self.candidate,
            "attempted": self.attempted,
            "total_words": self.total_words,
            "attempted_words": self.attempted_words,
            "correct_words": self.correct_words,
            "incorrect_words": self.incorrect_words,
            "is_correct": self.is_correct,
        }


@dataclass(frozen=True)
class ExerciseStats:
    """Aggregate over all sentences of an exercise. Recomputed, never updated."""
    total_words: int = 0
    attempted_words: int = 0
    correct_words: int = 0
    matches: int = 0
    substitutions: int = 0
    insertions: int = 0
    deletions: int = 0
    total_sentences: int = 0
    completed_sentences: int = 0
    correct_sentences: int = 0
    sentences: Tuple[SentenceStats, ...] = field(default_factory=tuple)

    @property
    def incorrect_words(self) -> int:
        return self.attempted_words - self.correct_words

    @property
    def completion_percentage(self) -> float:
        return _percent(self.attempted_words, self.total_words)

    @property
    def accuracy_percentage(self) -> float:
        """Strictly correct words over all reference words."""
        return _percent(self.correct_words, self.total_words)

    @property
    def attempted_accuracy_percentage(self) -> float:
        """Strictly correct words over the words actually typed."""
        return _percent(self.correct_words, self.attempted_words)

    @property
    def mistakes(self) -> int:
        return self.substitutions + self.insertions + self.deletions

    @property
    def word_error_rate(self) -> float:
        if not self.total_words:
            return 0.0 if not self.insertions else 1.0
        return self.mistakes / self.total_words

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_words": self.total_words,
            "attempted_words": self.attempted_words,
            "correct_words": self.correct_words,
            "incorrect_words": self.incorrect_words,
            "completion_percentage": round(self.completion_percentage, 2),
            "accuracy_percentage": round(self.accuracy_percentage, 2),
            "attempted_accuracy_percentage": round(self.attempted_accuracy_percentage, 2),
            "matches": self.matches,
            "substitutions": self.substitutions,
            "insertions": self.insertions,
            "deletions": self.deletions,
            "mistakes": self.mistakes,
            "word_error_rate": round(self.word_error_rate, 4),
            "total_sentences": self.total_sentences,
            "completed_sentences": self.completed_sentences,
            "correct_sentences": self.correct_sentences,
            "sentences": [s.to_dict() for s in self.sentences],
        }


def count_strict_matches(reference_words: Sequence[str], candidate_words: Sequence[str], preserve_case: bool = False) -> int:
    """
    Greedy one-to-one matching: each typed word claims the first unclaimed
    reference word it is exactly equal to.
    """
    claimed = [False] * len(reference_words)
    correct = 0
    for cand in candidate_words:
        for i, ref in enumerate(reference_words):
            if not claimed[i] and are_exactly_equal(ref, cand, preserve_case):
                claimed[i] = True
                correct += 1
                break
    return correct


def sentence_is_correct(reference: str, candidate: Optional[str], preserve_case: bool = False) -> bool:
    """Whole-sentence check: identical after normalization, and something was typed."""
    if not candidate or not candidate.strip():
        return False
    return normalize(reference, preserve_case=preserve_case) == normalize(candidate, preserve_case=preserve_case)


def _clean_candidate(candidate: Optional[str]) -> Optional[str]:
    if candidate is None or not candidate.strip():
        return None
    return candidate


def aggregate_stats(
    reference_sentences: Sequence[str],
    candidates: Sequence[Optional[str]],
    preserve_case: bool = False,
) -> ExerciseStats:
    """
    Fold per-sentence results into exercise statistics.

    candidates[i] is what was typed for reference_sentences[i]; None or blank means
    not attempted. A shorter candidates list leaves the trailing sentences
    unattempted; a longer one is a caller error (ValueError).
    """
    if len(candidates) > len(reference_sentences):
        raise ValueError(
            "Got %d candidate results for %d reference sentences" % (len(candidates), len(reference_sentences))
        )

    sentences: List[SentenceStats] = []
    all_ref_words: List[str] = []
    all_cand_words: List[str] = []

    for idx, reference in enumerate(reference_sentences):
        candidate = _clean_candidate(candidates[idx]) if idx < len(candidates) else None
        ref_words = split_words(reference)
        cand_words = split_words(candidate)
        all_ref_words.extend(ref_words)
        all_cand_words.extend(cand_words)
        sentences.append(SentenceStats(
            index=idx,
            reference=reference,
            candidate=candidate,
            total_words=len(ref_words),
            attempted_words=len(cand_words),
            correct_words=count_strict_matches(ref_words, cand_words, preserve_case),
            is_correct=sentence_is_correct(reference, candidate, preserve_case),
        ))

    ops = count_ops(align_words(all_ref_words, all_cand_words, preserve_case))
    stats = ExerciseStats(
        total_words=len(all_ref_words),
        attempted_words=len(all_cand_words),
        correct_words=sum(s.correct_words for s in sentences),
        matches=ops["match"],
        substitutions=ops["substitute"],
        insertions=ops["insert"],
        deletions=ops["delete"],
        total_sentences=len(sentences),
        completed_sentences=sum(1 for s in sentences if s.attempted),
        correct_sentences=sum(1 for s in sentences if s.is_correct),
        sentences=tuple(sentences),
    )
    logger.info(
        "Exercise stats: %d/%d words attempted, %d strictly correct, %d mistakes",
        stats.attempted_words, stats.total_words, stats.correct_words, stats.mistakes,
    )
    return stats
