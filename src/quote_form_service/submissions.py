"""
Quote submission shaping.

The wizard posts its raw answer set together with the contact details. Before
the row reaches `QuoteSubmissions` the answers are narrowed to real question
ids and paired with their question texts.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from quote_form_service.config import POSTCODE_ANSWER_KEY
from quote_form_service.schemas.questions import Question
from quote_form_service.schemas.submissions import FormAnswer, QuoteSubmissionRequest

UNKNOWN_QUESTION_TEXT = "Unknown Question"

REQUIRED_FIELDS = ("serviceCategory", "firstName", "lastName", "email", "postcode", "answers")


def filter_answers(answers: Mapping[str, Any], questions: Iterable[Question]) -> Dict[str, Any]:
    """Drop the postcode entry, empty values and ids that are not questions of the form."""
    known = {q.id for q in questions}
    out: Dict[str, Any] = {}
    for key, value in (answers or {}).items():
        if key == POSTCODE_ANSWER_KEY or not value:
            continue
        if key in known:
            out[key] = value
    return out


def _is_missing(value: Any) -> bool:
    # Empty containers count as present; only scalar blanks are missing.
    if value is None or value is False or value == "":
        return True
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0


def missing_required_field(body: Mapping[str, Any]) -> Optional[str]:
    """Name of the first required field that is absent or blank, else None."""
    if not isinstance(body, Mapping):
        return REQUIRED_FIELDS[0]
    for name in REQUIRED_FIELDS:
        if _is_missing(body.get(name)):
            return name
    return None


def format_form_answers(answers: Mapping[str, Any], question_texts: Mapping[str, str]) -> List[Dict[str, Any]]:
    return [
        FormAnswer(
            question_id=question_id,
            question_text=question_texts.get(question_id) or UNKNOWN_QUESTION_TEXT,
            answer=answer,
        ).model_dump()
        for question_id, answer in (answers or {}).items()
    ]


def build_submission_row(
    request: QuoteSubmissionRequest,
    form_answers: List[Dict[str, Any]],
    *,
    partner_id: Optional[str] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
    referral_source: Optional[str] = None,
) -> Dict[str, Any]:
    return {
        "service_category_id": request.service_category,
        "first_name": request.first_name,
        "last_name": request.last_name,
        "email": request.email,
        "phone": request.phone or None,
        "city": request.city or None,
        "postcode": request.postcode,
        "ip_address": ip_address or None,
        "user_agent": user_agent or None,
        "referral_source": referral_source or None,
        "assigned_partner_id": partner_id or request.assigned_partner_id or None,
        "status": "new",
        "form_answers": form_answers,
    }
