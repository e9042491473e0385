from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _normalize_answer(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None]
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value


class AnswersMixin(BaseModel):
    answers: Dict[str, Any] = Field(
        default_factory=dict,
        description="Answers collected so far, keyed by question id (string or list of strings)",
    )

    @field_validator("answers", mode="before")
    @classmethod
    def _answers(cls, v: Any) -> Dict[str, Any]:
        if not isinstance(v, dict):
            return {}
        return {str(k): _normalize_answer(val) for k, val in v.items()}


class VisibilityRequest(AnswersMixin):
    """Evaluate visibility for an inline question list (admin preview)."""

    model_config = ConfigDict(populate_by_name=True)

    questions: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="FormQuestions rows (question_id, step_number, conditional_display, ...)",
    )


class WizardStateRequest(AnswersMixin):
    """Current wizard position for a stored category form."""

    model_config = ConfigDict(populate_by_name=True)

    current_step: int = Field(default=1, alias="currentStep", description="1-based wizard step")
    action: Optional[str] = Field(
        default=None,
        description="Optional navigation to apply: 'next' (validated) or 'previous'",
    )


class ConditionCheckRequest(BaseModel):
    """Authoring checks for one raw condition and/or a whole question list."""

    model_config = ConfigDict(populate_by_name=True)

    questions: Optional[List[Dict[str, Any]]] = None
    condition: Optional[Any] = Field(default=None, description="Raw conditional_display value")
