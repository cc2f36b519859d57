"""
Unit tests for WER and CER metrics and the live metrics snapshot.
No server required.
"""
import unittest

import metrics.live_metrics as live_metrics
from core.metrics import cer, edit_counts, wer, wer_cer


class TestWER(unittest.TestCase):
    def test_perfect_match(self):
        self.assertEqual(wer("Der Hund läuft", "Der Hund läuft"), 0.0)

    def test_normalized_match(self):
        self.assertEqual(wer("Der Hund läuft.", "der hund laeuft"), 0.0)

    def test_case_sensitive(self):
        self.assertAlmostEqual(wer("Der Hund", "der Hund", preserve_case=True), 0.5)

    def test_one_word_wrong(self):
        self.assertAlmostEqual(wer("Der Hund läuft schnell", "Der Hund rennt schnell"), 0.25)

    def test_one_word_deletion(self):
        self.assertAlmostEqual(wer("Ich gehe nach Hause", "Ich gehe Hause"), 0.25)

    def test_empty_reference(self):
        self.assertEqual(wer("", "irgendwas"), 1.0)
        self.assertEqual(wer("", ""), 0.0)

    def test_empty_hypothesis(self):
        self.assertEqual(wer("Guten Morgen", ""), 1.0)


class TestCER(unittest.TestCase):
    def test_perfect_match(self):
        self.assertEqual(cer("Guten Morgen", "guten morgen"), 0.0)

    def test_one_char_missing(self):
        self.assertAlmostEqual(cer("Haus", "Hau"), 0.25)

    def test_remove_spaces(self):
        self.assertEqual(cer("Montag morgen", "Montagmorgen", remove_spaces=True), 0.0)
        self.assertGreater(cer("Montag morgen", "Montagmorgen"), 0.0)


class TestEditCounts(unittest.TestCase):
    def test_counts(self):
        counts = edit_counts(["a", "b", "c"], ["a", "x", "c", "d"])
        self.assertEqual(counts, {"substitutions": 1, "deletions": 0, "insertions": 1})

    def test_wer_cer_both(self):
        w, c = wer_cer("Es ist schön", "Es ist schön")
        self.assertEqual(w, 0.0)
        self.assertEqual(c, 0.0)


class TestLiveMetrics(unittest.TestCase):
    def setUp(self):
        live_metrics.reset()

    def tearDown(self):
        live_metrics.reset()

    def test_empty_snapshot(self):
        snap = live_metrics.get_snapshot()
        self.assertEqual(snap["active_connections"], 0)
        self.assertIsNone(snap["avg_latency_ms"])
        self.assertEqual(snap["latency_sample_count"], 0)

    def test_connections(self):
        live_metrics.record_connection_open()
        live_metrics.record_connection_open()
        live_metrics.record_connection_close()
        self.assertEqual(live_metrics.get_snapshot()["active_connections"], 1)
        live_metrics.record_connection_close()
        live_metrics.record_connection_close()
        self.assertEqual(live_metrics.get_snapshot()["active_connections"], 0)

    def test_latency_and_budget(self):
        for ms in (1.0, 2.0, 3.0, 30.0):
            live_metrics.record_match_latency_ms(ms, budget_ms=16.0)
        snap = live_metrics.get_snapshot()
        self.assertEqual(snap["match_count"], 4)
        self.assertEqual(snap["over_budget_count"], 1)
        self.assertAlmostEqual(snap["avg_latency_ms"], 9.0)
        self.assertEqual(snap["latency_sample_count"], 4)

    def test_malformed(self):
        live_metrics.record_malformed_message()
        self.assertEqual(live_metrics.get_snapshot()["malformed_messages"], 1)


if __name__ == "__main__":
    unittest.main()
