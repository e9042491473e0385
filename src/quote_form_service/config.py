from __future__ import annotations

import os

DEFAULT_AUTO_ADVANCE_MS = 300
POSTCODE_ANSWER_KEY = "postcode"


def env_bool(name: str, default: bool = False) -> bool:
    v = (os.getenv(name) or "").strip().lower()
    if not v:
        return default
    return v in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def auto_advance_delay_ms() -> int:
    """
    Delay before a single-choice selection moves the wizard forward.

    Env override: `QUOTE_FORM_AUTO_ADVANCE_MS` (clamped to 0..5000).
    """
    return max(0, min(5000, env_int("QUOTE_FORM_AUTO_ADVANCE_MS", DEFAULT_AUTO_ADVANCE_MS)))


def validate_conditions_enabled() -> bool:
    return env_bool("QUOTE_FORM_VALIDATE_CONDITIONS", default=False)
