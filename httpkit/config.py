"""Configuration for the HTTP helpers (environment variables, typed defaults)."""

import os
from typing import Optional

VERSION = "0.1.0"


def _optional_float(name: str) -> Optional[float]:
    raw = os.environ.get(name, "").strip()
    return float(raw) if raw else None


# Seconds per round trip; unset means no deadline (default transport behaviour).
REQUEST_TIMEOUT: Optional[float] = _optional_float("HTTPKIT_TIMEOUT")
USER_AGENT: str = os.environ.get("HTTPKIT_USER_AGENT", f"httpkit/{VERSION}")

# If set, JSON serialization failures are logged and an empty body is used instead of raising.
LENIENT_JSON: bool = os.environ.get("HTTPKIT_LENIENT_JSON", "0").lower() in {"1", "true", "yes", "on"}

LOG_LEVEL: str = os.environ.get("HTTPKIT_LOG_LEVEL", "INFO").upper()
