"""
Unit tests for German text normalization (umlaut notations, case, punctuation).
Run: python -m pytest tests/test_normalization.py -v   or   python -m unittest tests.test_normalization
"""

import unittest

from core.normalization import has_umlaut_notation, is_punctuation, normalize, replace_notations


class TestNotationReplacement(unittest.TestCase):
    def test_digraphs(self):
        self.assertEqual(normalize("schoen"), "schön")
        self.assertEqual(normalize("Maedchen"), "mädchen")
        self.assertEqual(normalize("muede"), "müde")

    def test_slash_and_colon_notations(self):
        self.assertEqual(normalize("scho/n"), "schön")
        self.assertEqual(normalize("Gru:s/e"), "grüße")
        self.assertEqual(normalize("Stras/e"), "straße")

    def test_uppercase_vowel_keeps_case(self):
        self.assertEqual(normalize("AErger", preserve_case=True), "Ärger")
        self.assertEqual(normalize("Uebung", preserve_case=True), "Übung")
        self.assertEqual(replace_notations("O:l"), "Öl")

    def test_notation_case_insensitive(self):
        self.assertEqual(normalize("SCHOEN", preserve_case=True), "SCHÖN")

    def test_canonical_letters_unchanged(self):
        self.assertEqual(normalize("schön"), "schön")
        self.assertEqual(normalize("Straße"), "straße")


class TestCaseAndPunctuation(unittest.TestCase):
    def test_lowercase_by_default(self):
        self.assertEqual(normalize("Berlin"), "berlin")

    def test_preserve_case(self):
        self.assertEqual(normalize("Berlin", preserve_case=True), "Berlin")

    def test_strip_punctuation_and_whitespace(self):
        self.assertEqual(normalize("  Hallo,   Welt! "), "hallo welt")
        self.assertEqual(normalize("z.B."), "zb")

    def test_keep_punctuation(self):
        self.assertEqual(normalize("Hallo, Welt!", strip_punctuation=False), "hallo, welt!")

    def test_digits_kept(self):
        self.assertEqual(normalize("Seite 42."), "seite 42")

    def test_empty(self):
        self.assertEqual(normalize(""), "")
        self.assertEqual(normalize(None), "")
        self.assertEqual(normalize("?!"), "")


class TestIdempotence(unittest.TestCase):
    SAMPLES = [
        "Schoen, dass du da bist!",
        "a-e",
        "Gru:s/e aus Koeln",
        "  Der   Hund.  ",
        "ÄÖÜ äöü ß",
        "Aeoeue",
    ]

    def test_normalize_twice(self):
        for text in self.SAMPLES:
            for preserve_case in (False, True):
                once = normalize(text, preserve_case=preserve_case)
                self.assertEqual(normalize(once, preserve_case=preserve_case), once, text)

    def test_joined_notation_after_punctuation_removal(self):
        self.assertEqual(normalize("a-e"), "ä")


class TestHelpers(unittest.TestCase):
    def test_is_punctuation(self):
        for ch in ".,;:!?-'\"()":
            self.assertTrue(is_punctuation(ch), ch)
        for ch in ("a", "ß", "Ü", "1", " ", ""):
            self.assertFalse(is_punctuation(ch), repr(ch))

    def test_has_umlaut_notation(self):
        self.assertTrue(has_umlaut_notation("schön"))
        self.assertTrue(has_umlaut_notation("schoen"))
        self.assertTrue(has_umlaut_notation("Straße"))
        self.assertTrue(has_umlaut_notation("s/"))
        self.assertFalse(has_umlaut_notation("Haus"))
        self.assertFalse(has_umlaut_notation(""))
        self.assertFalse(has_umlaut_notation(None))


if __name__ == "__main__":
    unittest.main()
