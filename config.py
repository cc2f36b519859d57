"""
Service configuration via environment variables.
Load with python-dotenv; the comparison engine itself never reads the environment.
"""
import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


# ----- Server -----
PORT = int(os.environ.get("PORT", "8001"))
HOST = os.environ.get("HOST", "0.0.0.0")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# ----- Comparison defaults -----
# Capitalization checking for requests that do not set preserve_case
DEFAULT_PRESERVE_CASE = _env_bool("DEFAULT_PRESERVE_CASE")

# ----- Live matcher tuning (empirical; see streaming.live_matcher.LiveMatchConfig) -----
LIVE_MATCH_WINDOW = int(os.environ.get("LIVE_MATCH_WINDOW", "5"))
LIVE_MATCH_THRESHOLD = float(os.environ.get("LIVE_MATCH_THRESHOLD", "0.38"))
LIVE_POSITION_PENALTY = float(os.environ.get("LIVE_POSITION_PENALTY", "0.03"))
LIVE_POSITION_PENALTY_CASE_SENSITIVE = float(os.environ.get("LIVE_POSITION_PENALTY_CASE_SENSITIVE", "0.01"))
LIVE_COMPOUND_SCORE = float(os.environ.get("LIVE_COMPOUND_SCORE", "0.85"))


def get_live_match_config():
    """Build the live matcher config from env. Raises ValueError on out-of-range values."""
    from streaming.live_matcher import LiveMatchConfig
    return LiveMatchConfig(
        window=LIVE_MATCH_WINDOW,
        threshold=LIVE_MATCH_THRESHOLD,
        position_penalty=LIVE_POSITION_PENALTY,
        position_penalty_case_sensitive=LIVE_POSITION_PENALTY_CASE_SENSITIVE,
        compound_score=LIVE_COMPOUND_SCORE,
    )


# ----- WebSocket live feedback -----
WS_IDLE_TIMEOUT_SECONDS = float(os.environ.get("WS_IDLE_TIMEOUT_SECONDS", "300"))
# One UI frame; live matches slower than this are logged and counted
LIVE_FRAME_BUDGET_MS = float(os.environ.get("LIVE_FRAME_BUDGET_MS", "16"))

# ----- CORS (production: set to specific origins) -----
CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")


def get_cors_origins() -> list:
    """Return list of allowed CORS origins from env."""
    if CORS_ORIGINS == "*":
        return ["*"]
    return [o.strip() for o in CORS_ORIGINS.split(",") if o.strip()]
