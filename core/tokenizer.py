import re
from typing import List, Optional, Tuple

from core.models import Token

_WORD_RE = re.compile(r"\S+")


def tokenize(text: Optional[str]) -> Tuple[Token, ...]:
    """Split text on whitespace, keeping each word's character offsets."""
    if not text:
        return ()
    return tuple(
        Token(text=m.group(0), index=i, start=m.start(), end=m.end())
        for i, m in enumerate(_WORD_RE.finditer(text))
    )


def split_words(text: Optional[str]) -> List[str]:
    return [t.text for t in tokenize(text)]
