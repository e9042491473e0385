from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import anyio
from fastapi import APIRouter, Body, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from api.supabase_client import fetch_question_texts, insert_quote_submission
from api.utils import client_ip, error_response
from quote_form_service.schemas import QuoteSubmissionRequest
from quote_form_service.submissions import build_submission_row, format_form_answers, missing_required_field

logger = logging.getLogger("api.submissions")

router = APIRouter(prefix="/api", tags=["submissions"])


@router.post("/quote-submissions")
async def create_quote_submission(
    request: Request,
    partner_id: Optional[str] = None,
    body: Dict[str, Any] = Body(...),
) -> JSONResponse:
    """
    Persist a completed quote wizard.

    Answers are stored as `{question_id, question_text, answer}` entries; ids
    without a stored question are kept with the text "Unknown Question".
    """
    missing = missing_required_field(body)
    if missing:
        return error_response(400, "missing_field", f"Missing required field: {missing}", prefix="sub")

    try:
        parsed = QuoteSubmissionRequest.model_validate(body)
    except ValidationError as e:
        return error_response(
            422,
            "validation_error",
            "Request body did not match expected schema.",
            prefix="val",
            details=e.errors(include_url=False, include_context=False),
        )

    answers = parsed.answers or {}
    texts = await anyio.to_thread.run_sync(lambda: fetch_question_texts(list(answers.keys())))
    row = build_submission_row(
        parsed,
        format_form_answers(answers, texts),
        partner_id=partner_id,
        ip_address=client_ip(request.headers, request.client.host if request.client else None),
        user_agent=request.headers.get("user-agent"),
        referral_source=request.headers.get("referer"),
    )

    stored = await anyio.to_thread.run_sync(lambda: insert_quote_submission(row))
    if stored is None:
        logger.error("[submissions] insert failed category=%s", parsed.service_category)
        return error_response(500, "store_error", "Failed to submit quote request", prefix="sub")

    logger.info(
        "[submissions] stored submission_id=%s category=%s answers=%d",
        stored.get("submission_id"),
        parsed.service_category,
        len(row["form_answers"]),
    )
    return JSONResponse({"success": True, "data": stored}, status_code=201)
