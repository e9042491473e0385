from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class QuoteSubmissionRequest(BaseModel):
    """
    Body posted by the quote wizard once the contact step is complete.

    Every field is optional at the schema level: missing required fields are
    reported by name (HTTP 400) rather than as a generic validation error.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    service_category: Optional[str] = Field(default=None, alias="serviceCategory")
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    email: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    postcode: Optional[str] = None
    answers: Optional[Dict[str, Any]] = None
    assigned_partner_id: Optional[str] = Field(default=None, alias="assignedPartnerId")

    @field_validator("answers", mode="before")
    @classmethod
    def _answers(cls, v: Any) -> Any:
        # A list posted as answers is keyed by position.
        if isinstance(v, (list, tuple)):
            return {str(i): item for i, item in enumerate(v)}
        return v


class FormAnswer(BaseModel):
    """One entry of `QuoteSubmissions.form_answers`."""

    question_id: str
    question_text: str
    answer: Any = None
