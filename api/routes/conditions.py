from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from api.models import ConditionCheckRequest
from api.utils import error_response
from quote_form_service.authoring import find_condition_issues, validate_condition_payload
from quote_form_service.schemas import Question

router = APIRouter(prefix="/api/form/conditions", tags=["conditions"])


@router.post("/check")
async def check_conditions(body: Dict[str, Any] = Body(...)) -> JSONResponse:
    """
    Authoring checks for the admin question editor.

    - `condition`: a raw `conditional_display` value, checked against the JSON Schema
    - `questions`: the full question list, checked for dangling or non-backward references
    """
    try:
        parsed = ConditionCheckRequest.model_validate(body)
    except ValidationError as e:
        return error_response(
            422,
            "validation_error",
            "Request body did not match expected schema.",
            prefix="val",
            details=e.errors(include_url=False, include_context=False),
        )

    schema_errors: List[str] = []
    if "condition" in parsed.model_fields_set:
        schema_errors = validate_condition_payload(parsed.condition)

    row_errors: Dict[str, List[str]] = {}
    questions: List[Question] = []
    for row in parsed.questions or []:
        qid = str(row.get("question_id") or "")
        raw_condition = row.get("conditional_display")
        if raw_condition is not None:
            errs = validate_condition_payload(raw_condition)
            if errs:
                row_errors[qid] = errs
        try:
            questions.append(Question.model_validate(row))
        except ValidationError as e:
            row_errors.setdefault(qid, []).extend(err.get("msg", "") for err in e.errors())
    issues = [issue.to_dict() for issue in find_condition_issues(questions)]

    valid = not schema_errors and not row_errors and not issues
    return JSONResponse(
        {
            "ok": True,
            "valid": valid,
            "schemaErrors": schema_errors,
            "questionErrors": row_errors,
            "issues": issues,
        }
    )
