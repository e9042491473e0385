from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping

from quote_form_service.schemas.questions import Question

REQUIRED_MESSAGE = "This field is required"


def is_answered(value: Any) -> bool:
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return bool(value)


def validate_required(questions: Iterable[Question], answers: Mapping[str, Any]) -> Dict[str, str]:
    """Map each required-but-unanswered question id to an error message."""
    errors: Dict[str, str] = {}
    for question in questions:
        if question.is_required and not is_answered(answers.get(question.id)):
            errors[question.id] = REQUIRED_MESSAGE
    return errors
