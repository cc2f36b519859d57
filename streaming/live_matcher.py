"""
Per-keystroke word matching for live dictation feedback.

Walks the reference words left to right. For each one it looks at the next few
unconsumed typed words (a bounded window), scores them, and accepts the best
if it clears a fixed threshold. Typed words skipped over to reach the match are
reported as extra; a reference word with no acceptable match is missing and
consumes nothing, so its typed word can still match the next reference word.

Cost per reference word is bounded by the window, never by sentence length;
there is no backtracking, so judgments of earlier words never depend on words
typed later. Final scoring uses alignment.word_alignment instead.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from alignment.char_diff import diff_chars
from core.keyboard import detect_typo_patterns
from core.models import JudgmentKind, ScoredMatch, WordJudgment
from core.normalization import normalize
from core.similarity import are_exactly_equal, are_similar, distance, is_compound_part

logger = logging.getLogger(__name__)

# Short function words: typing them right regardless of case is nearly perfect.
FUNCTION_WORDS = frozenset(["in", "ihr", "ist", "es", "der", "die", "das"])
FUNCTION_WORD_SCORE = 0.95

EXACT_SCORE = 1.0
CASE_ONLY_SCORE = 0.95
LOST_CAPITAL_SCORE = 0.75
# Scores above this end the window search early.
EARLY_EXIT_SCORE = 0.95
# Candidates scoring above this pay the position penalty (floored at it).
PENALTY_FLOOR = 0.4


@dataclass(frozen=True)
class LiveMatchConfig:
    """Tuning of the live matcher. Defaults are the empirically tuned values."""
    window: int = 5
    threshold: float = 0.38
    position_penalty: float = 0.03
    position_penalty_case_sensitive: float = 0.01
    compound_score: float = 0.85

    def __post_init__(self):
        if self.window < 1:
            raise ValueError("window must be >= 1, got %r" % self.window)
        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError("threshold must be in [0, 1], got %r" % self.threshold)
        if self.position_penalty < 0 or self.position_penalty_case_sensitive < 0:
            raise ValueError("position penalties must be >= 0")
        if not 0.0 <= self.compound_score <= 1.0:
            raise ValueError("compound_score must be in [0, 1], got %r" % self.compound_score)

    def penalty(self, preserve_case: bool) -> float:
        return self.position_penalty_case_sensitive if preserve_case else self.position_penalty


DEFAULT_CONFIG = LiveMatchConfig()


def _similarity_score(ref: str, cand: str, base: float, span: float) -> float:
    longer = max(len(ref), len(cand))
    if not longer:
        return base + span
    return base + span * (1.0 - distance(ref, cand) / longer)


def _positional_overlap(ref: str, cand: str) -> float:
    longer = max(len(ref), len(cand))
    if not longer:
        return 0.0
    same = sum(1 for r, c in zip(ref, cand) if r == c)
    return same / longer


def score_candidate(
    ref_word: str,
    cand_word: str,
    offset: int,
    preserve_case: bool = False,
    config: LiveMatchConfig = DEFAULT_CONFIG,
) -> float:
    """
    Fitness of one typed word for one reference word, `offset` positions
    ahead of the first unconsumed typed word. Value in [0, 1].
    """
    ref_norm = normalize(ref_word, preserve_case=preserve_case)
    cand_norm = normalize(cand_word, preserve_case=preserve_case)
    score = 0.0

    if ref_norm == cand_norm:
        score = EXACT_SCORE
    elif preserve_case:
        ref_fold, cand_fold = ref_norm.lower(), cand_norm.lower()
        if ref_fold == cand_fold:
            lost_capital = ref_word[:1].isupper() and not cand_word[:1].isupper()
            score = LOST_CAPITAL_SCORE if lost_capital else CASE_ONLY_SCORE
        elif are_similar(ref_fold, cand_fold):
            score = _similarity_score(ref_fold, cand_fold, 0.6, 0.3)

    if score < 0.9 and is_compound_part(cand_word, ref_word):
        score = config.compound_score

    if score < 0.8 and are_similar(ref_norm, cand_norm):
        score = _similarity_score(ref_norm, cand_norm, 0.5, 0.4)
    elif score < 0.5:
        score = _positional_overlap(ref_norm, cand_norm)

    if score < 0.8 and ref_word.lower() in FUNCTION_WORDS and cand_word.lower() == ref_word.lower():
        score = FUNCTION_WORD_SCORE

    if score > PENALTY_FLOOR:
        score = max(PENALTY_FLOOR, score - offset * config.penalty(preserve_case))
    return score


def _best_in_window(
    ref_word: str,
    cand_words: Sequence[str],
    start: int,
    preserve_case: bool,
    config: LiveMatchConfig,
) -> Tuple[Optional[ScoredMatch], bool]:
    """
    Best-scoring typed word in the window starting at `start`.
    Returns (best, decided): decided means more typing cannot change the outcome,
    either because the search stopped on a near-perfect score or because the
    window was already full.
    """
    size = min(config.window, len(cand_words) - start)
    best: Optional[ScoredMatch] = None
    for offset in range(size):
        score = score_candidate(ref_word, cand_words[start + offset], offset, preserve_case, config)
        if best is None or score > best.score:
            best = ScoredMatch(candidate_index=start + offset, score=score)
        if score > EARLY_EXIT_SCORE:
            return best, True
    return best, size == config.window


def _judge_match(ref_word: str, ref_index: int, cand_word: str, match: ScoredMatch, preserve_case: bool, settled: bool) -> WordJudgment:
    if are_exactly_equal(ref_word, cand_word, preserve_case):
        return WordJudgment(
            JudgmentKind.CORRECT,
            ref_word=ref_word,
            cand_word=cand_word,
            ref_index=ref_index,
            cand_index=match.candidate_index,
            score=match.score,
            char_segments=diff_chars(ref_word, cand_word, preserve_case),
            settled=settled,
        )
    return WordJudgment(
        JudgmentKind.PARTIAL,
        ref_word=ref_word,
        cand_word=cand_word,
        ref_index=ref_index,
        cand_index=match.candidate_index,
        score=match.score,
        char_segments=diff_chars(ref_word, cand_word, preserve_case),
        typo_patterns=detect_typo_patterns(cand_word, ref_word),
        settled=settled,
    )


def match_live(
    reference_words: Sequence[str],
    candidate_words: Sequence[str],
    preserve_case: bool = False,
    config: Optional[LiveMatchConfig] = None,
) -> Tuple[WordJudgment, ...]:
    """
    Judge the words typed so far against the reference sentence.

    Every reference word yields exactly one CORRECT, PARTIAL or MISSING judgment,
    in reference order; EXTRA judgments for unmatched typed words are interleaved
    where they were typed. A judgment is `settled` once appending typed words can
    no longer change it (and everything before it is settled too).
    """
    config = config or DEFAULT_CONFIG
    ref = list(reference_words or [])
    cand = list(candidate_words or [])
    out: List[WordJudgment] = []
    pos = 0
    prefix_settled = True

    for ref_index, ref_word in enumerate(ref):
        if pos >= len(cand):
            out.append(WordJudgment(JudgmentKind.MISSING, ref_word=ref_word, ref_index=ref_index))
            prefix_settled = False
            continue

        best, decided = _best_in_window(ref_word, cand, pos, preserve_case, config)
        prefix_settled = prefix_settled and decided

        if best is not None and best.score > config.threshold:
            for skipped in range(pos, best.candidate_index):
                out.append(WordJudgment(
                    JudgmentKind.EXTRA,
                    cand_word=cand[skipped],
                    cand_index=skipped,
                    settled=prefix_settled,
                ))
            out.append(_judge_match(ref_word, ref_index, cand[best.candidate_index], best, preserve_case, prefix_settled))
            pos = best.candidate_index + 1
        else:
            out.append(WordJudgment(
                JudgmentKind.MISSING,
                ref_word=ref_word,
                ref_index=ref_index,
                score=best.score if best else 0.0,
                settled=prefix_settled,
            ))

    for extra_index in range(pos, len(cand)):
        out.append(WordJudgment(JudgmentKind.EXTRA, cand_word=cand[extra_index], cand_index=extra_index))

    logger.debug("match_live: %d reference words, %d typed, %d judgments", len(ref), len(cand), len(out))
    return tuple(out)


def summarize_judgments(judgments: Sequence[WordJudgment]) -> dict:
    """Counts per judgment kind, for live progress displays."""
    counts = {kind.value: 0 for kind in JudgmentKind}
    for j in judgments:
        counts[j.kind.value] += 1
    return counts
