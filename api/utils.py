from __future__ import annotations

import time
import uuid
from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse


def request_id(prefix: str) -> str:
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


def error_response(
    status_code: int,
    error: str,
    message: str,
    *,
    prefix: str = "err",
    details: Optional[Any] = None,
) -> JSONResponse:
    content: Dict[str, Any] = {
        "ok": False,
        "error": error,
        "message": message,
        "requestId": request_id(prefix),
    }
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def client_ip(headers: Any, fallback: Optional[str] = None) -> Optional[str]:
    """First address of `x-forwarded-for`, else the socket peer."""
    forwarded = str(headers.get("x-forwarded-for") or "").strip()
    if forwarded:
        return forwarded.split(",")[0].strip() or fallback
    return fallback
