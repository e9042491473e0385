from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LogicalOperator(str, Enum):
    AND = "AND"
    OR = "OR"


def _coerce_operator(value: Any) -> LogicalOperator:
    # Single conditions branch on exactly "OR"; anything else takes the AND rule.
    if isinstance(value, LogicalOperator):
        return value
    return LogicalOperator.OR if value == "OR" else LogicalOperator.AND


def _coerce_group_operator(value: Any) -> LogicalOperator:
    # Groups branch on exactly "AND"; any other non-empty value combines with OR.
    if isinstance(value, LogicalOperator):
        return value
    if value is None or value == "" or value == "AND":
        return LogicalOperator.AND
    return LogicalOperator.OR


def _coerce_values(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (str, int, float, bool)):
        return (str(value),)
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(str(v) for v in value if v is not None)
    return ()


class SingleCondition(BaseModel):
    """Show a question when an earlier answer matches `match_values`."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    depends_on_question_id: str = Field(default="", alias="dependent_on_question_id")
    match_values: Tuple[str, ...] = Field(default=(), alias="show_when_answer_equals")
    operator: LogicalOperator = Field(default=LogicalOperator.AND, alias="logical_operator")

    @field_validator("depends_on_question_id", mode="before")
    @classmethod
    def _question_id(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("match_values", mode="before")
    @classmethod
    def _values(cls, v: Any) -> Tuple[str, ...]:
        return _coerce_values(v)

    @field_validator("operator", mode="before")
    @classmethod
    def _operator(cls, v: Any) -> LogicalOperator:
        return _coerce_operator(v)

    def normalized(self) -> Tuple[Tuple["SingleCondition", ...], LogicalOperator]:
        # A group of one reduces to this condition's own result under either operator.
        return (self,), LogicalOperator.OR


class ConditionGroup(BaseModel):
    """Several single conditions combined with `group_operator`."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    conditions: Tuple[SingleCondition, ...] = Field(default=())
    group_operator: LogicalOperator = Field(default=LogicalOperator.AND, alias="group_logical_operator")

    @field_validator("conditions", mode="before")
    @classmethod
    def _conditions(cls, v: Any) -> Tuple[Any, ...]:
        if not isinstance(v, (list, tuple)):
            return ()
        # Non-object entries never match.
        return tuple(item if isinstance(item, (dict, SingleCondition)) else SingleCondition() for item in v)

    @field_validator("group_operator", mode="before")
    @classmethod
    def _group_operator(cls, v: Any) -> LogicalOperator:
        return _coerce_group_operator(v)

    def normalized(self) -> Tuple[Tuple[SingleCondition, ...], LogicalOperator]:
        return self.conditions, self.group_operator


Condition = Union[SingleCondition, ConditionGroup]


def parse_condition(raw: Any) -> Optional[Condition]:
    """
    Normalize a stored `conditional_display` value into a typed condition.

    - `None` => no condition
    - object with a `conditions` list => `ConditionGroup`
    - any other object => `SingleCondition` (legacy single-condition rows)
    - anything else => a `SingleCondition` with no dependency, which never matches
    """
    if raw is None:
        return None
    if isinstance(raw, (SingleCondition, ConditionGroup)):
        return raw
    if not isinstance(raw, dict):
        return SingleCondition()
    if isinstance(raw.get("conditions"), list):
        return ConditionGroup.model_validate(raw)
    return SingleCondition.model_validate(raw)


class AnswerOption(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    label: str = Field(default="", alias="text")
    image_ref: Optional[str] = Field(default=None, alias="image")


def _coerce_option(value: Any) -> Union[str, AnswerOption]:
    if isinstance(value, AnswerOption):
        return value
    if isinstance(value, dict):
        label = value.get("text", value.get("label"))
        image = value.get("image", value.get("imageRef")) or None
        return AnswerOption(text=str(label or ""), image=image)
    return str(value)


class Question(BaseModel):
    """
    A single quote-form question as stored in `FormQuestions`.

    Field names follow the table columns; the Python attribute names are accepted too.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(..., alias="question_id")
    step_number: int = Field(default=1, ge=1)
    display_order: int = Field(default=0, alias="display_order_in_step")
    question_text: str = Field(default="")
    is_multiple_choice: bool = Field(default=False)
    allow_multiple_selections: bool = Field(default=False)
    answer_options: Tuple[Union[str, AnswerOption], ...] = Field(default=())
    is_required: bool = Field(default=False)
    condition: Optional[Condition] = Field(default=None, alias="conditional_display")

    service_category_id: Optional[str] = None
    status: Optional[str] = None
    is_deleted: bool = False
    has_helper_video: bool = False
    helper_video_url: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, v: Any) -> str:
        return str(v or "")

    @field_validator("answer_options", mode="before")
    @classmethod
    def _options(cls, v: Any) -> Tuple[Union[str, AnswerOption], ...]:
        if not isinstance(v, (list, tuple)):
            return ()
        return tuple(_coerce_option(item) for item in v if item is not None)

    @field_validator("condition", mode="before")
    @classmethod
    def _condition(cls, v: Any) -> Optional[Condition]:
        return parse_condition(v)

    @field_validator("allow_multiple_selections", "is_required", "is_multiple_choice", "is_deleted", mode="before")
    @classmethod
    def _flags(cls, v: Any) -> bool:
        return bool(v)

    def option_labels(self) -> List[str]:
        if not self.is_multiple_choice:
            return []
        return [o.label if isinstance(o, AnswerOption) else o for o in self.answer_options]

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


AnswerValue = Union[str, List[str]]
AnswerSet = Dict[str, AnswerValue]


def load_questions(rows: Any) -> List[Question]:
    """Validate a list of raw `FormQuestions` rows, skipping non-objects."""
    if not isinstance(rows, list):
        return []
    return [Question.model_validate(row) for row in rows if isinstance(row, (dict, Question))]
