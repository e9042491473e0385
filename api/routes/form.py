from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import anyio
from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from api.models import VisibilityRequest, WizardStateRequest
from api.supabase_client import fetch_form_questions, fetch_service_category_id
from api.utils import error_response
from quote_form_service.authoring import validate_condition_payload
from quote_form_service.config import validate_conditions_enabled
from quote_form_service.schemas import Question
from quote_form_service.visibility import compute_visible_questions, visible_step_numbers
from quote_form_service.wizard import QuoteWizard

logger = logging.getLogger("api.form")

router = APIRouter(prefix="/api/form", tags=["form"])


def _parse_stored_rows(rows: List[Dict[str, Any]]) -> List[Question]:
    """Stored rows that fail validation are skipped (and logged) rather than failing the form."""
    out: List[Question] = []
    for row in rows:
        try:
            out.append(Question.model_validate(row))
        except ValidationError as e:
            logger.warning("[form] skipping invalid question row id=%s: %s", row.get("question_id"), e)
    return out


async def _load_category_questions(category_slug: str) -> Tuple[Optional[str], Optional[List[Question]], Optional[JSONResponse]]:
    category_id = await anyio.to_thread.run_sync(lambda: fetch_service_category_id(category_slug))
    if not category_id:
        return None, None, error_response(
            404,
            "category_not_found",
            f"No active service category for slug: {category_slug}",
            prefix="cat",
        )
    rows = await anyio.to_thread.run_sync(lambda: fetch_form_questions(category_id))
    if rows is None:
        return category_id, None, error_response(500, "store_error", "Failed to load form questions", prefix="q")
    return category_id, _parse_stored_rows(rows), None


@router.get("/{category_slug}/questions")
async def category_questions(category_slug: str) -> JSONResponse:
    category_id, questions, err = await _load_category_questions(category_slug)
    if err is not None:
        return err
    return JSONResponse(
        {
            "ok": True,
            "categoryId": category_id,
            "questions": [q.to_row() for q in questions or []],
        }
    )


@router.post("/visibility")
async def visibility(body: Dict[str, Any] = Body(...)) -> JSONResponse:
    """
    Visible questions for an inline question list and answer set.

    Does not touch the store; used by the admin form preview.
    """
    try:
        parsed = VisibilityRequest.model_validate(body)
        questions = [Question.model_validate(row) for row in parsed.questions]
    except ValidationError as e:
        return error_response(
            422,
            "validation_error",
            "Request body did not match expected schema.",
            prefix="val",
            details=e.errors(include_url=False, include_context=False),
        )

    if validate_conditions_enabled():
        condition_errors: Dict[str, List[str]] = {}
        for row in parsed.questions:
            raw = row.get("conditional_display")
            if raw is None:
                continue
            errs = validate_condition_payload(raw)
            if errs:
                condition_errors[str(row.get("question_id") or "")] = errs
        if condition_errors:
            return error_response(
                422,
                "invalid_condition",
                "One or more conditional_display values did not match the condition schema.",
                prefix="val",
                details=condition_errors,
            )

    visible = compute_visible_questions(questions, parsed.answers)
    return JSONResponse(
        {
            "ok": True,
            "visibleQuestionIds": [q.id for q in visible],
            "stepNumbers": visible_step_numbers(visible),
        }
    )


@router.post("/{category_slug}/state")
async def wizard_state(category_slug: str, body: Dict[str, Any] = Body(default_factory=dict)) -> JSONResponse:
    """
    Wizard snapshot for a stored category form.

    Optional `action` moves the wizard first: `next` is refused (with
    `errors`) while a required question on the current step is unanswered.
    """
    try:
        parsed = WizardStateRequest.model_validate(body)
    except ValidationError as e:
        return error_response(
            422,
            "validation_error",
            "Request body did not match expected schema.",
            prefix="val",
            details=e.errors(include_url=False, include_context=False),
        )

    _, questions, err = await _load_category_questions(category_slug)
    if err is not None:
        return err

    wizard = QuoteWizard(questions or [], answers=parsed.answers, current_step=parsed.current_step)
    errors: Dict[str, str] = {}
    action = (parsed.action or "").strip().lower()
    if action == "next":
        errors = wizard.next_step()
    elif action == "previous":
        wizard.previous_step()

    return JSONResponse(
        {
            "ok": True,
            **wizard.snapshot(),
            "errors": errors,
            "autoAdvanceMs": wizard.auto_advance_delay_ms(),
        }
    )
