from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Any, Dict, Iterable, List, Optional, Tuple

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from quote_form_service.config import env_bool, env_int

logger = logging.getLogger("api.http")

Headers = Iterable[Tuple[bytes, bytes]]

# Secrets plus the customer PII carried by quote submissions.
_REDACTED_KEYS = {
    "authorization",
    "cookie",
    "set-cookie",
    "x-api-key",
    "apikey",
    "access_token",
    "refresh_token",
    "password",
    "supabase_service_role_key",
    "email",
    "phone",
    "firstname",
    "lastname",
    "first_name",
    "last_name",
    "ip_address",
    "x-forwarded-for",
}


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: ("***" if str(k).lower() in _REDACTED_KEYS else _redact(v)) for k, v in value.items()}
    if isinstance(value, list):
        return [_redact(v) for v in value]
    return value


def _header_map(headers: Optional[Headers]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for k, v in headers or []:
        name = k.decode("latin-1").lower()
        out[name] = "***" if name in _REDACTED_KEYS else v.decode("latin-1")
    return out


def _header(headers: Optional[Headers], name: bytes) -> str:
    for k, v in headers or []:
        if k.lower() == name:
            return v.decode("latin-1")
    return ""


def _describe_body(content_type: str, body: bytes) -> Any:
    ct = (content_type or "").lower()
    if "application/json" in ct:
        text = body.decode("utf-8", errors="replace")
        try:
            return _redact(json.loads(text))
        except ValueError:
            return text
    if ct.startswith("text/"):
        return body.decode("utf-8", errors="replace")
    if "multipart/form-data" in ct:
        return "<multipart>"
    return "<binary>" if body else ""


class _BodyCapture:
    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.buf = bytearray()
        self.truncated = False

    def feed(self, chunk: bytes) -> None:
        if not chunk or self.limit <= 0 or self.truncated:
            return
        room = self.limit - len(self.buf)
        self.buf.extend(chunk[: max(room, 0)])
        if len(chunk) > room:
            self.truncated = True


class HttpLoggingMiddleware:
    """One JSON log line per HTTP exchange, with secrets and PII redacted."""

    def __init__(self, app: ASGIApp, *, log_headers: bool, max_body_bytes: int) -> None:
        self.app = app
        self.log_headers = log_headers
        self.max_body_bytes = max(0, max_body_bytes)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        started_at = time.perf_counter()
        req_headers: List[Tuple[bytes, bytes]] = list(scope.get("headers") or [])
        request_id = _header(req_headers, b"x-request-id") or uuid.uuid4().hex[:12]
        req_body = _BodyCapture(self.max_body_bytes)
        res_body = _BodyCapture(self.max_body_bytes)
        res_headers: List[Tuple[bytes, bytes]] = []
        status: Optional[int] = None

        async def receive_wrapped() -> Message:
            message = await receive()
            if message.get("type") == "http.request":
                req_body.feed(message.get("body") or b"")
            return message

        async def send_wrapped(message: Message) -> None:
            nonlocal status, res_headers
            if message.get("type") == "http.response.start":
                status = int(message.get("status") or 0)
                res_headers = list(message.get("headers") or [])
            elif message.get("type") == "http.response.body":
                res_body.feed(message.get("body") or b"")
            await send(message)

        err: Optional[BaseException] = None
        try:
            await self.app(scope, receive_wrapped, send_wrapped)
        except BaseException as e:  # noqa: BLE001 - logged below, then re-raised
            err = e
            raise
        finally:
            record: Dict[str, Any] = {
                "id": request_id,
                "method": str(scope.get("method") or "").upper(),
                "path": str(scope.get("path") or ""),
                "query": (scope.get("query_string") or b"").decode("latin-1", errors="ignore"),
                "status": status,
                "dur_ms": int((time.perf_counter() - started_at) * 1000),
                "request": {
                    "headers": _header_map(req_headers) if self.log_headers else {},
                    "body": _describe_body(_header(req_headers, b"content-type"), bytes(req_body.buf)),
                    "body_truncated": req_body.truncated,
                },
                "response": {
                    "headers": _header_map(res_headers) if self.log_headers else {},
                    "body": _describe_body(_header(res_headers, b"content-type"), bytes(res_body.buf)),
                    "body_truncated": res_body.truncated,
                },
            }
            if err is not None:
                record["error"] = {"type": type(err).__name__, "message": str(err)}
            logger.info(json.dumps(record, ensure_ascii=False, separators=(",", ":"), default=str))


def install_http_logging(app: Any) -> None:
    """
    Enable request/response logging via env vars.

    - `QUOTE_FORM_HTTP_LOG=1` enables middleware
    - `QUOTE_FORM_HTTP_LOG_HEADERS=1` logs request/response headers (redacted)
    - `QUOTE_FORM_HTTP_LOG_BODY_MAX_BYTES=4096` caps body bytes captured per request/response
    """
    if not env_bool("QUOTE_FORM_HTTP_LOG", default=False):
        return
    app.add_middleware(
        HttpLoggingMiddleware,
        log_headers=env_bool("QUOTE_FORM_HTTP_LOG_HEADERS", default=False),
        max_body_bytes=env_int("QUOTE_FORM_HTTP_LOG_BODY_MAX_BYTES", default=4096),
    )
