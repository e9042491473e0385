from __future__ import annotations

import time
from typing import Any, Dict

from fastapi import APIRouter

from api.supabase_client import supabase_configured
from quote_form_service.config import auto_advance_delay_ms, validate_conditions_enabled

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> Dict[str, Any]:
    """Liveness plus the settings a deploy is most likely to get wrong."""
    return {
        "ok": True,
        "service": "quote-form-service",
        "ts": int(time.time() * 1000),
        "store": "configured" if supabase_configured() else "missing_credentials",
        "autoAdvanceMs": auto_advance_delay_ms(),
        "validateConditions": validate_conditions_enabled(),
    }
