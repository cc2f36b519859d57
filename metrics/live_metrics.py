"""
Live feedback observability metrics.

Thread-safe counters and latency samples for /ws/dictation and POST /compare/live.
Exposed via GET /metrics/live (JSON snapshot).
"""

import threading
from collections import deque
from typing import Any, Dict

# ----- Shared state (module-level for singleton behavior) -----
_lock = threading.Lock()
_active_connections = 0
_latency_samples: deque = deque(maxlen=1000)  # last N match_ms values for avg/p95
_match_count = 0
_over_budget_count = 0
_malformed_messages = 0


def record_connection_open() -> None:
    """Call when a WebSocket connection is accepted."""
    global _active_connections
    with _lock:
        _active_connections += 1


def record_connection_close() -> None:
    """Call when a WebSocket connection closes."""
    global _active_connections
    with _lock:
        _active_connections = max(0, _active_connections - 1)


def record_match_latency_ms(match_ms: float, budget_ms: float) -> None:
    """Record one live-match duration; counts it as over budget when slower than one frame."""
    global _match_count, _over_budget_count
    with _lock:
        _latency_samples.append(match_ms)
        _match_count += 1
        if match_ms > budget_ms:
            _over_budget_count += 1


def record_malformed_message() -> None:
    global _malformed_messages
    with _lock:
        _malformed_messages += 1


def reset() -> None:
    """Clear all counters (tests, or an operator restarting measurement)."""
    global _active_connections, _match_count, _over_budget_count, _malformed_messages
    with _lock:
        _active_connections = 0
        _match_count = 0
        _over_budget_count = 0
        _malformed_messages = 0
        _latency_samples.clear()


def get_snapshot() -> Dict[str, Any]:
    """
    Return a JSON-serializable snapshot of live metrics.
    Used by GET /metrics/live.
    """
    with _lock:
        samples = list(_latency_samples)
        snapshot = {
            "active_connections": _active_connections,
            "match_count": _match_count,
            "over_budget_count": _over_budget_count,
            "malformed_messages": _malformed_messages,
        }
    n = len(samples)
    if n == 0:
        avg_latency_ms = None
        p95_latency_ms = None
    else:
        avg_latency_ms = round(sum(samples) / n, 3)
        sorted_s = sorted(samples)
        idx = max(0, int(0.95 * n) - 1)
        p95_latency_ms = round(sorted_s[idx], 3)
    snapshot.update({
        "avg_latency_ms": avg_latency_ms,
        "p95_latency_ms": p95_latency_ms,
        "latency_sample_count": n,
    })
    return snapshot
