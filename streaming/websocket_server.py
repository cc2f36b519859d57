"""
WebSocket server for /ws/dictation: live per-keystroke feedback.

- Query params: reference (sentence text, required), preserve_case (optional bool).
- Each text message is the learner's current input, either raw text or JSON
  {"candidate": "...", "reference": "..."} (reference switches the sentence).
- Reply per message: live_result with word judgments and latency_ms.
- Message "end" (or "stop"/"final"): final_result with the global alignment and
  sentence statistics, then the connection closes.
- Malformed JSON gets an error payload; the connection stays open.
"""

import asyncio
import json
import logging
import time
from typing import Any, Callable, Dict, Optional

from fastapi import WebSocket, WebSocketDisconnect

from alignment.word_alignment import align_words, count_ops, describe_alignment
from core.tokenizer import split_words
from evaluation.stats import aggregate_stats
from streaming.live_matcher import LiveMatchConfig, match_live, summarize_judgments

logger = logging.getLogger(__name__)

END_MESSAGES = ("end", "stop", "final")


def _parse_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes")


def build_live_payload(
    reference: str,
    candidate: str,
    preserve_case: bool,
    config: Optional[LiveMatchConfig] = None,
) -> Dict[str, Any]:
    """Run the live matcher once and shape the JSON reply (latency included)."""
    t0 = time.perf_counter()
    judgments = match_live(split_words(reference), split_words(candidate), preserve_case, config)
    match_ms = (time.perf_counter() - t0) * 1000
    return {
        "type": "live_result",
        "judgments": [j.to_dict() for j in judgments],
        "summary": summarize_judgments(judgments),
        "latency_ms": {"match_ms": round(match_ms, 3)},
    }


def build_final_payload(reference: str, candidate: str, preserve_case: bool) -> Dict[str, Any]:
    ref_words, cand_words = split_words(reference), split_words(candidate)
    ops = align_words(ref_words, cand_words, preserve_case)
    stats = aggregate_stats([reference], [candidate], preserve_case)
    return {
        "type": "final_result",
        "alignment": describe_alignment(ref_words, cand_words, ops),
        "op_counts": count_ops(ops),
        "stats": stats.to_dict(),
    }


def build_ws_dictation_handler(
    get_match_config: Optional[Callable[[], LiveMatchConfig]] = None,
    default_preserve_case: bool = False,
    frame_budget_ms: float = 16.0,
    idle_timeout_seconds: float = 300.0,
    get_metrics: Optional[Any] = None,
) -> Callable:
    """
    Build the async WebSocket handler for /ws/dictation.

    Args:
        get_match_config: Callable returning the LiveMatchConfig (defaults when None).
        default_preserve_case: Used when the client does not pass preserve_case.
        frame_budget_ms: Live matches slower than this are logged as over budget.
        idle_timeout_seconds: Close the session after this long without a message.
        get_metrics: Optional module with record_connection_open/close,
            record_match_latency_ms, record_malformed_message.

    Returns:
        Async function (websocket: WebSocket) -> None for use with FastAPI.
    """
    metrics = get_metrics

    async def handle_ws_dictation(websocket: WebSocket) -> None:
        params = websocket.query_params
        reference = (params.get("reference") or "").strip()
        if not reference:
            await websocket.close(code=1008, reason="Missing reference")
            return
        preserve_case = _parse_bool(params.get("preserve_case"), default_preserve_case)
        config = get_match_config() if get_match_config else None

        await websocket.accept()
        if metrics:
            metrics.record_connection_open()

        candidate = ""
        try:
            while True:
                try:
                    data = await asyncio.wait_for(websocket.receive_text(), timeout=idle_timeout_seconds)
                except asyncio.TimeoutError:
                    logger.info("Closing idle dictation session after %.0f s", idle_timeout_seconds)
                    break
                if data.strip().lower() in END_MESSAGES:
                    await websocket.send_json(build_final_payload(reference, candidate, preserve_case))
                    break

                if data.lstrip().startswith("{"):
                    try:
                        msg = json.loads(data)
                    except ValueError as e:
                        if metrics:
                            metrics.record_malformed_message()
                        await websocket.send_json({"type": "error", "message": "Malformed JSON: %s" % e})
                        continue
                    if not isinstance(msg, dict):
                        if metrics:
                            metrics.record_malformed_message()
                        await websocket.send_json({"type": "error", "message": "Expected a JSON object"})
                        continue
                    new_reference = msg.get("reference") or reference
                    new_candidate = msg.get("candidate") or ""
                    if not isinstance(new_reference, str) or not isinstance(new_candidate, str):
                        if metrics:
                            metrics.record_malformed_message()
                        await websocket.send_json(
                            {"type": "error", "message": "reference and candidate must be strings"}
                        )
                        continue
                    reference = new_reference.strip()
                    candidate = new_candidate
                else:
                    candidate = data

                payload = build_live_payload(reference, candidate, preserve_case, config)
                match_ms = payload["latency_ms"]["match_ms"]
                if match_ms > frame_budget_ms:
                    logger.warning("Live match took %.1f ms (budget %.1f ms)", match_ms, frame_budget_ms)
                if metrics:
                    metrics.record_match_latency_ms(match_ms, frame_budget_ms)
                await websocket.send_json(payload)
            await websocket.close()
        except WebSocketDisconnect:
            logger.debug("Dictation client disconnected")
        finally:
            if metrics:
                metrics.record_connection_close()

    return handle_ws_dictation
