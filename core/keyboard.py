"""
Keyboard proximity for typo explanations.

Adjacency maps for German QWERTZ, US QWERTY and French AZERTY: each key maps to
the keys physically next to it. A wrong character that sits next to the intended
key is very likely a slip of the finger rather than a spelling mistake.
"""
from typing import Dict, Tuple

QWERTZ: Dict[str, str] = {
    # Number row
    "1": "2q", "2": "13qw", "3": "24we", "4": "35er", "5": "46rt", "6": "57tz",
    "7": "68zu", "8": "79ui", "9": "80io", "0": "9ßop", "ß": "0´pü", "´": "ßü+",
    # Top row
    "q": "12wa", "w": "23qeas", "e": "34wrsd", "r": "45etdf", "t": "56rzfg",
    "z": "67tugh", "u": "78zihj", "i": "89uojk", "o": "90ipkl", "p": "0ßoülö",
    "ü": "ßpöä", "+": "´",
    # Home row
    "a": "qwsy", "s": "weadyx", "d": "ersfxc", "f": "rtdgcv", "g": "tzfhvb",
    "h": "zugjbn", "j": "uihknm", "k": "iojlm,", "l": "opkö,.", "ö": "püla.-",
    "ä": "üö-", "#": "+ä",
    # Bottom row
    "y": "asx<", "x": "sdyc<", "c": "dfxv", "v": "fgcb", "b": "ghvn", "n": "hjbm",
    "m": "jkn,", ",": "klm.", ".": "lö,-", "-": "öä.",
}

QWERTY: Dict[str, str] = {
    "1": "2q", "2": "13qw", "3": "24we", "4": "35er", "5": "46rt", "6": "57ty",
    "7": "68yu", "8": "79ui", "9": "80io", "0": "9-op", "-": "0=p[", "=": "-[]",
    "q": "12wa", "w": "23qeas", "e": "34wrsd", "r": "45etdf", "t": "56ryfg",
    "y": "67tugh", "u": "78yihj", "i": "89uojk", "o": "90ipkl", "p": "0-o[l;",
    "[": "-=p];'", "]": "=['\\",
    "a": "qwsz", "s": "weadzx", "d": "ersfxc", "f": "rtdgcv", "g": "tyfhvb",
    "h": "yugjbn", "j": "uihknm", "k": "iojlm,", "l": "opk;,.", ";": "p[l'./",
    "'": "[];\\/.", "\\": "]'/",
    "z": "asx", "x": "sdzc", "c": "dfxv", "v": "fgcb", "b": "ghvn", "n": "hjbm",
    "m": "jkn,", ",": "klm.", ".": "l;,/", "/": ";'.\\",
}

AZERTY: Dict[str, str] = {
    "&": "éa", "é": "&\"az", "\"": "é'ze", "'": "\"(er", "(": "'-rt", "-": "(èty",
    "è": "-_yu", "_": "èçui", "ç": "_àio", "à": "ç)op", ")": "à=p",
    "a": "&ézq", "z": "é\"aeqs", "e": "\"'zrsd", "r": "'(etdf", "t": "(-ryfg",
    "y": "-ètugh", "u": "è_yihj", "i": "_çuojk", "o": "çàipkl", "p": "à)olm",
    "q": "azsw", "s": "zeqdwx", "d": "ersfxc", "f": "rtdgcv", "g": "tyfhvb",
    "h": "yugjbn", "j": "uihkn,", "k": "iojl,;", "l": "opkm;:", "m": "pl:!",
    "w": "qsx", "x": "sdwc", "c": "dfxv", "v": "fgcb", "b": "ghvn", "n": "hjb,",
    ",": "jkn;", ";": "kl,:", ":": "lm;!", "!": "m:",
}

LAYOUTS: Dict[str, Dict[str, str]] = {
    "qwertz": QWERTZ,
    "qwerty": QWERTY,
    "azerty": AZERTY,
}

_UMLAUT_BASE = (("ä", "a"), ("ö", "o"), ("ü", "u"))
_DOUBLE_VOWELS = ("ee", "aa", "oo")


def _adjacent_in(layout_map: Dict[str, str], a: str, b: str) -> bool:
    return b in layout_map.get(a, "") or a in layout_map.get(b, "")


def is_keyboard_adjacent(a: str, b: str, layout: str = "auto") -> bool:
    """
    True if the two keys are neighbours. layout "auto" accepts a neighbour on any
    known layout. Raises ValueError for an unknown layout name.
    """
    if not a or not b:
        return False
    a, b = a.lower(), b.lower()
    if a == b:
        return False
    if layout == "auto":
        return any(_adjacent_in(m, a, b) for m in LAYOUTS.values())
    if layout not in LAYOUTS:
        raise ValueError("Unknown keyboard layout: %s" % layout)
    return _adjacent_in(LAYOUTS[layout], a, b)


def detect_typo_patterns(candidate: str, reference: str) -> Tuple[str, ...]:
    """Names of common German typo patterns that explain candidate vs reference."""
    cand = (candidate or "").lower()
    ref = (reference or "").lower()
    if not cand or not ref:
        return ()
    found = []
    if "sh" in cand and "sch" in ref and "sch" not in cand:
        found.append("sch_as_sh")
    for umlaut, base in _UMLAUT_BASE:
        if umlaut not in ref:
            continue
        pos = ref.index(umlaut)
        near = cand.find(base, max(0, pos - 2))
        if near != -1 and near - pos <= 2:
            found.append("umlaut_as_base_vowel")
            break
    if "ß" in ref and "s" in cand and "ß" not in cand:
        found.append("sharp_s_as_s")
    if any(d in ref and d not in cand for d in _DOUBLE_VOWELS):
        found.append("double_vowel_as_single")
    return tuple(found)

