"""
API tests via FastAPI TestClient: REST endpoints and the /ws/dictation WebSocket.
Run: python -m pytest tests/test_api.py -v
"""
import unittest
from urllib.parse import quote

from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

import metrics.live_metrics as live_metrics
from main import app


class TestRestEndpoints(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def test_health(self):
        r = self.client.get("/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["status"], "ok")

    def test_normalize(self):
        r = self.client.post("/normalize", json={"text": "Gru:s/e aus Koeln!"})
        self.assertEqual(r.json()["normalized"], "grüße aus köln")

    def test_compare_live(self):
        r = self.client.post("/compare/live", json={"reference": "Ich gehe nach Hause", "candidate": "Ich gehe Hause"})
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["type"], "live_result")
        self.assertEqual([j["type"] for j in body["judgments"]], ["correct", "correct", "missing", "correct"])
        self.assertIn("match_ms", body["latency_ms"])

    def test_compare_align(self):
        r = self.client.post(
            "/compare/align",
            json={"reference": "Der Hund läuft schnell", "candidate": "Der Hund rennt schnell"},
        )
        body = r.json()
        self.assertEqual([op["type"] for op in body["alignment"]], ["match", "match", "substitute", "match"])
        self.assertEqual(body["op_counts"]["substitute"], 1)

    def test_compare_diff(self):
        r = self.client.post("/compare/diff", json={"reference_word": "Montagmorgen", "candidate_word": "morgen"})
        body = r.json()
        self.assertEqual(body["display"], "______morgen")
        self.assertFalse(body["exactly_equal"])

    def test_compare_diff_typo_patterns(self):
        r = self.client.post("/compare/diff", json={"reference_word": "Schule", "candidate_word": "Shule"})
        self.assertEqual(r.json()["typo_patterns"], ["sch_as_sh"])

    def test_compare_diff_rejects_phrases(self):
        r = self.client.post("/compare/diff", json={"reference_word": "Guten Morgen", "candidate_word": "Morgen"})
        self.assertEqual(r.status_code, 400)

    def test_stats(self):
        r = self.client.post("/stats", json={"sentences": ["Guten Morgen", "Wie geht es"], "transcripts": ["Guten Morgen"]})
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["accuracy_percentage"], 40.0)
        self.assertEqual(body["completed_sentences"], 1)

    def test_stats_contract_violation(self):
        r = self.client.post("/stats", json={"sentences": ["Hallo"], "transcripts": ["Hallo", "Welt"]})
        self.assertEqual(r.status_code, 400)

    def test_stats_requires_sentences(self):
        r = self.client.post("/stats", json={"sentences": []})
        self.assertEqual(r.status_code, 422)

    def test_metrics(self):
        r = self.client.get("/metrics/live")
        self.assertEqual(r.status_code, 200)
        self.assertIn("p95_latency_ms", r.json())


class TestDictationWebSocket(unittest.TestCase):
    def setUp(self):
        live_metrics.reset()
        self.client = TestClient(app)

    def test_live_then_final(self):
        url = "/ws/dictation?reference=" + quote("Es ist schön")
        with self.client.websocket_connect(url) as ws:
            ws.send_text("Es ist")
            first = ws.receive_json()
            self.assertEqual(first["type"], "live_result")
            self.assertEqual([j["type"] for j in first["judgments"]], ["correct", "correct", "missing"])

            ws.send_text('{"candidate": "Es ist schoen"}')
            second = ws.receive_json()
            self.assertEqual([j["type"] for j in second["judgments"]], ["correct"] * 3)
            self.assertEqual(first["judgments"][:2], second["judgments"][:2])

            ws.send_text("end")
            final = ws.receive_json()
            self.assertEqual(final["type"], "final_result")
            self.assertEqual(final["op_counts"]["match"], 3)
            self.assertEqual(final["stats"]["accuracy_percentage"], 100.0)
        self.assertEqual(live_metrics.get_snapshot()["match_count"], 2)

    def test_malformed_json_keeps_connection(self):
        url = "/ws/dictation?reference=Hallo"
        with self.client.websocket_connect(url) as ws:
            ws.send_text("{not json")
            err = ws.receive_json()
            self.assertEqual(err["type"], "error")
            ws.send_text("Hallo")
            self.assertEqual(ws.receive_json()["judgments"][0]["type"], "correct")
            ws.send_text("end")
            ws.receive_json()
        self.assertEqual(live_metrics.get_snapshot()["malformed_messages"], 1)

    def test_non_string_fields_keep_connection(self):
        url = "/ws/dictation?reference=Hallo"
        with self.client.websocket_connect(url) as ws:
            ws.send_text('{"candidate": 5}')
            self.assertEqual(ws.receive_json()["type"], "error")
            ws.send_text('{"reference": ["x"], "candidate": "Hallo"}')
            self.assertEqual(ws.receive_json()["type"], "error")
            ws.send_text("Hallo")
            live = ws.receive_json()
            self.assertEqual(live["type"], "live_result")
            self.assertEqual(live["judgments"][0]["type"], "correct")
            ws.send_text("end")
            ws.receive_json()
        self.assertEqual(live_metrics.get_snapshot()["malformed_messages"], 2)

    def test_case_sensitive_session(self):
        url = "/ws/dictation?reference=Berlin&preserve_case=true"
        with self.client.websocket_connect(url) as ws:
            ws.send_text("berlin")
            judgment = ws.receive_json()["judgments"][0]
            self.assertEqual(judgment["type"], "partial")
            self.assertEqual(judgment["chars"][0]["hint"], "initial_capital")
            ws.send_text("end")
            ws.receive_json()

    def test_missing_reference_rejected(self):
        with self.assertRaises(WebSocketDisconnect):
            with self.client.websocket_connect("/ws/dictation") as ws:
                ws.receive_json()


if __name__ == "__main__":
    unittest.main()
