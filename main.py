"""
German dictation checking API.
Live feedback: per-keystroke word judgments (POST /compare/live, WS /ws/dictation).
Final scoring: global word alignment, character diffs and exercise statistics.
"""
import logging
from typing import List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

import config
import metrics.live_metrics as live_metrics
from alignment.char_diff import diff_chars
from alignment.word_alignment import align_words, count_ops, describe_alignment
from core.keyboard import detect_typo_patterns
from core.models import NormalizationOptions, segments_text
from core.similarity import are_exactly_equal, similarity
from core.tokenizer import split_words
from evaluation.stats import aggregate_stats
from streaming.websocket_server import build_live_payload, build_ws_dictation_handler

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Dictation Checker API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

try:
    _live_config = config.get_live_match_config()
except ValueError as e:
    logger.error("Invalid live matcher settings, using defaults: %s", e)
    _live_config = None


class NormalizeRequest(BaseModel):
    text: str
    preserve_case: bool = config.DEFAULT_PRESERVE_CASE
    strip_punctuation: bool = True


class CompareRequest(BaseModel):
    reference: str
    candidate: str = ""
    preserve_case: bool = config.DEFAULT_PRESERVE_CASE


class WordDiffRequest(BaseModel):
    reference_word: str
    candidate_word: str
    preserve_case: bool = config.DEFAULT_PRESERVE_CASE


class StatsRequest(BaseModel):
    sentences: List[str] = Field(..., min_length=1)
    transcripts: List[Optional[str]] = Field(default_factory=list)
    preserve_case: bool = config.DEFAULT_PRESERVE_CASE


@app.get("/")
def health_check():
    return {
        "status": "ok",
        "message": "Dictation Checker API is running",
    }


@app.post("/normalize")
def normalize_text(req: NormalizeRequest):
    options = NormalizationOptions(preserve_case=req.preserve_case, strip_punctuation=req.strip_punctuation)
    return {"text": req.text, "normalized": options.apply(req.text)}


@app.post("/compare/live")
def compare_live(req: CompareRequest):
    """Same payload as one /ws/dictation reply, for clients without WebSocket."""
    payload = build_live_payload(req.reference, req.candidate, req.preserve_case, _live_config)
    live_metrics.record_match_latency_ms(payload["latency_ms"]["match_ms"], config.LIVE_FRAME_BUDGET_MS)
    return payload


@app.post("/compare/align")
def compare_align(req: CompareRequest):
    ref_words, cand_words = split_words(req.reference), split_words(req.candidate)
    ops = align_words(ref_words, cand_words, req.preserve_case)
    return {
        "alignment": describe_alignment(ref_words, cand_words, ops),
        "op_counts": count_ops(ops),
    }


@app.post("/compare/diff")
def compare_diff(req: WordDiffRequest):
    if len(req.reference_word.split()) > 1 or len(req.candidate_word.split()) > 1:
        raise HTTPException(status_code=400, detail="reference_word and candidate_word must be single words")
    segments = diff_chars(req.reference_word, req.candidate_word, req.preserve_case)
    return {
        "exactly_equal": are_exactly_equal(req.reference_word, req.candidate_word, req.preserve_case),
        "similarity": round(similarity(req.reference_word, req.candidate_word), 4),
        "display": segments_text(segments),
        "chars": [s.to_dict() for s in segments],
        "typo_patterns": list(detect_typo_patterns(req.candidate_word, req.reference_word)),
    }


@app.post("/stats")
def exercise_stats(req: StatsRequest):
    try:
        stats = aggregate_stats(req.sentences, req.transcripts, req.preserve_case)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return stats.to_dict()


@app.get("/metrics/live", include_in_schema=False)
def metrics_live():
    """JSON snapshot of live feedback metrics: connections, match latency avg/p95, over-budget count."""
    return live_metrics.get_snapshot()


_ws_dictation_handler = build_ws_dictation_handler(
    get_match_config=lambda: _live_config,
    default_preserve_case=config.DEFAULT_PRESERVE_CASE,
    frame_budget_ms=config.LIVE_FRAME_BUDGET_MS,
    idle_timeout_seconds=config.WS_IDLE_TIMEOUT_SECONDS,
    get_metrics=live_metrics,
)
app.websocket("/ws/dictation")(_ws_dictation_handler)


if __name__ == "__main__":
    uvicorn.run(app, host=config.HOST, port=config.PORT)
