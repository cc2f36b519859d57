"""
Observability for live feedback.
"""

from metrics.live_metrics import (
    get_snapshot,
    record_connection_open,
    record_connection_close,
    record_match_latency_ms,
    record_malformed_message,
    reset,
)

__all__ = [
    "get_snapshot",
    "record_connection_open",
    "record_connection_close",
    "record_match_latency_ms",
    "record_malformed_message",
    "reset",
]
