"""
Authoring-time checks for stored question conditions.

The visibility evaluator trusts its input and fails closed; these checks are
for the admin side, where a broken condition can still be fixed before a
customer ever sees the form.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List

import jsonschema

from quote_form_service.schemas.questions import Question

_SCHEMA_PATH = Path(__file__).resolve().parent / "condition.schema.json"

UNKNOWN_QUESTION = "unknown_question"
NOT_EARLIER_STEP = "not_earlier_step"


@dataclass(frozen=True)
class ConditionIssue:
    question_id: str
    depends_on_question_id: str
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@lru_cache(maxsize=1)
def condition_schema() -> Dict[str, Any]:
    return json.loads(_SCHEMA_PATH.read_text(encoding="utf-8"))


def validate_condition_payload(raw: Any) -> List[str]:
    """Return schema violations for a raw `conditional_display` value (empty when valid)."""
    validator = jsonschema.Draft7Validator(condition_schema())
    errors = sorted(validator.iter_errors(raw), key=lambda e: list(e.absolute_path))
    out: List[str] = []
    for err in errors:
        where = "/".join(str(p) for p in err.absolute_path)
        out.append(f"{where}: {err.message}" if where else err.message)
    return out


def find_condition_issues(questions: Iterable[Question]) -> List[ConditionIssue]:
    """
    Report conditions that point at missing questions or at questions that
    are not on an earlier step.
    """
    questions = list(questions)
    steps = {q.id: q.step_number for q in questions}
    issues: List[ConditionIssue] = []
    for question in questions:
        if question.condition is None:
            continue
        conditions, _ = question.condition.normalized()
        for cond in conditions:
            target = cond.depends_on_question_id
            if target not in steps:
                issues.append(ConditionIssue(question.id, target, UNKNOWN_QUESTION))
            elif steps[target] >= question.step_number:
                issues.append(ConditionIssue(question.id, target, NOT_EARLIER_STEP))
    return issues
