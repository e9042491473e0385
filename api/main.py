from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import HTTP_422_UNPROCESSABLE_ENTITY, HTTP_500_INTERNAL_SERVER_ERROR

logger = logging.getLogger("api")


def _repo_root() -> Path:
    # `api/main.py` lives at `<repo>/api/main.py`
    return Path(__file__).resolve().parents[1]


def _ensure_src_on_path() -> None:
    src = _repo_root() / "src"
    if not src.is_dir():
        return
    s = str(src)
    if s not in sys.path:
        sys.path.insert(0, s)


_ensure_src_on_path()

from api.http_logging import install_http_logging  # noqa: E402
from api.routes import conditions, form, health, submissions  # noqa: E402
from api.utils import error_response  # noqa: E402


def _configure_logging() -> None:
    level = (os.getenv("QUOTE_FORM_LOG_LEVEL") or "INFO").strip().upper()
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    else:
        root.setLevel(level)


def _jsonable_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    return [{k: v for k, v in err.items() if k in {"type", "loc", "msg"}} for err in exc.errors()]


def create_app() -> FastAPI:
    # Load `.env` + `.env.local` when present (local dev convenience).
    load_dotenv(_repo_root() / ".env", override=False)
    load_dotenv(_repo_root() / ".env.local", override=False)
    _configure_logging()

    app = FastAPI(title="quote-form-service", version="0.1.0")

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Keep server logs useful without dumping full bodies.
        logger.warning("[api] 422 validation_error path=%s errors=%s", request.url.path, exc.errors())
        return error_response(
            HTTP_422_UNPROCESSABLE_ENTITY,
            "validation_error",
            "Request body did not match expected schema.",
            prefix="val",
            details=_jsonable_errors(exc),
        )

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("[api] 500 internal_error path=%s err=%r", request.url.path, exc)
        return error_response(
            HTTP_500_INTERNAL_SERVER_ERROR,
            "internal_error",
            "Unhandled server error.",
        )

    app.include_router(health.router)
    app.include_router(form.router)
    app.include_router(conditions.router)
    app.include_router(submissions.router)
    install_http_logging(app)
    return app


app = create_app()
