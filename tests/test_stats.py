"""
Unit tests for exercise statistics: completion, strict accuracy, op counts, sentence correctness.
Run: python -m pytest tests/test_stats.py -v
"""

import unittest

from evaluation.stats import aggregate_stats, count_strict_matches, sentence_is_correct

SENTENCES = [
    "Der Hund läuft schnell über die Straße.",
    "Er ist müde.",
]


class TestAggregateStats(unittest.TestCase):
    def test_seventy_percent(self):
        stats = aggregate_stats(SENTENCES, ["Der Hund lauft schnel über die Strase", "er ist muede"])
        self.assertEqual(stats.total_words, 10)
        self.assertEqual(stats.attempted_words, 10)
        self.assertEqual(stats.correct_words, 7)
        self.assertEqual(stats.incorrect_words, 3)
        self.assertAlmostEqual(stats.accuracy_percentage, 70.0)
        self.assertAlmostEqual(stats.completion_percentage, 100.0)

    def test_op_counts(self):
        stats = aggregate_stats(SENTENCES, ["Der Hund lauft schnel über die Strase", "er ist muede"])
        self.assertEqual(stats.matches, 7)
        self.assertEqual(stats.substitutions, 3)
        self.assertEqual(stats.insertions, 0)
        self.assertEqual(stats.deletions, 0)
        self.assertEqual(stats.mistakes, 3)
        self.assertAlmostEqual(stats.word_error_rate, 0.3)

    def test_unattempted_sentence(self):
        stats = aggregate_stats(["Guten Morgen", "Wie geht es"], ["Guten Morgen", None])
        self.assertEqual(stats.total_words, 5)
        self.assertEqual(stats.attempted_words, 2)
        self.assertEqual(stats.correct_words, 2)
        self.assertAlmostEqual(stats.completion_percentage, 40.0)
        self.assertAlmostEqual(stats.accuracy_percentage, 40.0)
        self.assertAlmostEqual(stats.attempted_accuracy_percentage, 100.0)
        self.assertEqual(stats.matches, 2)
        self.assertEqual(stats.deletions, 3)
        self.assertEqual(stats.completed_sentences, 1)
        self.assertEqual(stats.correct_sentences, 1)

    def test_short_candidate_list_and_blank(self):
        a = aggregate_stats(["Guten Morgen", "Wie geht es"], ["Guten Morgen"])
        b = aggregate_stats(["Guten Morgen", "Wie geht es"], ["Guten Morgen", "   "])
        self.assertEqual(a.to_dict(), b.to_dict())
        self.assertFalse(b.sentences[1].attempted)

    def test_too_many_candidates(self):
        with self.assertRaises(ValueError):
            aggregate_stats(["Hallo"], ["Hallo", "Welt"])

    def test_word_order_slip(self):
        stats = aggregate_stats(["Ich habe Hunger"], ["Hunger habe ich"])
        self.assertEqual(stats.correct_words, 3)
        self.assertGreater(stats.mistakes, 0)

    def test_case_sensitive(self):
        stats = aggregate_stats(["Er ist in Berlin"], ["er ist in berlin"], preserve_case=True)
        self.assertEqual(stats.correct_words, 2)
        self.assertEqual(stats.correct_sentences, 0)

    def test_empty_exercise(self):
        stats = aggregate_stats([], [])
        self.assertEqual(stats.total_words, 0)
        self.assertEqual(stats.accuracy_percentage, 0.0)
        self.assertEqual(stats.completion_percentage, 0.0)
        self.assertEqual(stats.word_error_rate, 0.0)

    def test_deterministic_and_fresh(self):
        cands = ["Der Hund", None]
        self.assertEqual(aggregate_stats(SENTENCES, cands), aggregate_stats(SENTENCES, cands))

    def test_to_dict(self):
        d = aggregate_stats(SENTENCES, ["Der Hund läuft schnell über die Straße.", None]).to_dict()
        for key in (
            "total_words", "attempted_words", "correct_words", "incorrect_words",
            "completion_percentage", "accuracy_percentage", "attempted_accuracy_percentage",
            "matches", "substitutions", "insertions", "deletions", "mistakes", "word_error_rate",
            "total_sentences", "completed_sentences", "correct_sentences", "sentences",
        ):
            self.assertIn(key, d)
        self.assertEqual(d["accuracy_percentage"], 70.0)
        self.assertTrue(d["sentences"][0]["is_correct"])
        self.assertIsNone(d["sentences"][1]["candidate"])


class TestStrictMatching(unittest.TestCase):
    def test_one_to_one(self):
        self.assertEqual(count_strict_matches(["die", "Katze", "die"], ["die", "die", "die"]), 2)

    def test_any_order(self):
        self.assertEqual(count_strict_matches(["a", "b", "c"], ["c", "b", "a"]), 3)

    def test_no_leniency(self):
        self.assertEqual(count_strict_matches(["schön"], ["schon"]), 0)
        self.assertEqual(count_strict_matches(["schön"], ["schoen"]), 1)


class TestSentenceIsCorrect(unittest.TestCase):
    def test_normalized_equal(self):
        self.assertTrue(sentence_is_correct("Es ist schön.", "es ist schoen"))

    def test_case_flag(self):
        self.assertFalse(sentence_is_correct("Es ist schön.", "es ist schön", preserve_case=True))

    def test_nothing_typed(self):
        self.assertFalse(sentence_is_correct("Es ist schön.", None))
        self.assertFalse(sentence_is_correct("Es ist schön.", ""))


if __name__ == "__main__":
    unittest.main()
