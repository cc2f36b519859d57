"""
Result types shared by the aligners, the live matcher and the character differ.
All of them are frozen; every comparison call builds new ones.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from core.normalization import normalize

PLACEHOLDER_GLYPH = "_"


@dataclass(frozen=True)
class NormalizationOptions:
    preserve_case: bool = False
    strip_punctuation: bool = True

    def apply(self, text: Optional[str]) -> str:
        return normalize(text, preserve_case=self.preserve_case, strip_punctuation=self.strip_punctuation)


@dataclass(frozen=True)
class Token:
    """One whitespace-delimited word with its offsets in the source text."""
    text: str
    index: int
    start: int
    end: int

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "index": self.index, "start": self.start, "end": self.end}


class OpKind(str, Enum):
    MATCH = "match"
    SUBSTITUTE = "substitute"
    INSERT = "insert"
    DELETE = "delete"


@dataclass(frozen=True)
class AlignmentOp:
    """
    One step of a word-level edit script.
    INSERT carries only cand_index (word typed but not in the reference),
    DELETE only ref_index (reference word never typed).
    """
    kind: OpKind
    ref_index: Optional[int] = None
    cand_index: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind.value, "ref_index": self.ref_index, "cand_index": self.cand_index}


@dataclass(frozen=True)
class ScoredMatch:
    candidate_index: int
    score: float


class SegmentKind(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    PLACEHOLDER = "placeholder"
    EXTRA = "extra"


@dataclass(frozen=True)
class CharSegment:
    kind: SegmentKind
    char: str
    hint: Optional[str] = None  # capitalization | initial_capital | adjacent_key

    def to_dict(self) -> Dict[str, Any]:
        out = {"type": self.kind.value, "char": self.char}
        if self.hint:
            out["hint"] = self.hint
        return out


class JudgmentKind(str, Enum):
    CORRECT = "correct"
    PARTIAL = "partial"
    MISSING = "missing"
    EXTRA = "extra"


@dataclass(frozen=True)
class WordJudgment:
    """Live verdict for one reference word (or one unmatched typed word)."""
    kind: JudgmentKind
    ref_word: Optional[str] = None
    cand_word: Optional[str] = None
    ref_index: Optional[int] = None
    cand_index: Optional[int] = None
    score: float = 0.0
    char_segments: Tuple[CharSegment, ...] = field(default_factory=tuple)
    typo_patterns: Tuple[str, ...] = field(default_factory=tuple)
    settled: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind.value,
            "ref_word": self.ref_word,
            "cand_word": self.cand_word,
            "ref_index": self.ref_index,
            "cand_index": self.cand_index,
            "score": round(self.score, 4),
            "chars": [s.to_dict() for s in self.char_segments],
            "typo_patterns": list(self.typo_patterns),
            "settled": self.settled,
        }


def segments_text(segments: Tuple[CharSegment, ...]) -> str:
    """Display text of a character diff, placeholders included."""
    return "".join(s.char for s in segments)


def typed_text(segments: Tuple[CharSegment, ...]) -> str:
    """The candidate characters of a diff, in order (placeholders dropped)."""
    return "".join(s.char for s in segments if s.kind is not SegmentKind.PLACEHOLDER)
