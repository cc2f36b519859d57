"""
Live feedback layer.

- live_matcher: causal, bounded-window word matching while the learner types.
- websocket_server: WebSocket handler for /ws/dictation (import separately to avoid pulling FastAPI).
"""

from streaming.live_matcher import LiveMatchConfig, match_live, score_candidate, summarize_judgments

__all__ = [
    "LiveMatchConfig",
    "match_live",
    "score_candidate",
    "summarize_judgments",
]
