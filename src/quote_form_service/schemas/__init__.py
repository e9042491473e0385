"""
Schema package for quote-form data models.
"""

from .questions import (  # noqa: F401
    AnswerOption,
    AnswerSet,
    AnswerValue,
    Condition,
    ConditionGroup,
    LogicalOperator,
    Question,
    SingleCondition,
    load_questions,
    parse_condition,
)
from .submissions import FormAnswer, QuoteSubmissionRequest  # noqa: F401
