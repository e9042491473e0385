"""
Conditional visibility for quote-form questions.

`compute_visible_questions` is a pure function of the question list and the
current answers. It is meant to be called again after every answer change;
nothing is cached between calls.

Malformed input never raises: an unanswered or unknown dependency makes its
condition false, so the dependent question stays hidden.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Sequence

from quote_form_service.schemas.questions import (
    Condition,
    LogicalOperator,
    Question,
    SingleCondition,
)


def evaluate_single_condition(condition: SingleCondition, answers: Mapping[str, Any]) -> bool:
    answer = answers.get(condition.depends_on_question_id) if condition.depends_on_question_id else None
    if not answer:
        return False

    values = condition.match_values
    if isinstance(answer, (list, tuple)):
        if condition.operator is LogicalOperator.OR:
            return any(item in values for item in answer)
        # AND means "every required value was selected", not the reverse.
        return all(value in answer for value in values)

    if condition.operator is LogicalOperator.OR:
        return answer in values
    # A scalar can only equal every value when they are all the same.
    return all(answer == value for value in values)


def evaluate_condition(condition: Condition, answers: Mapping[str, Any]) -> bool:
    conditions, group_operator = condition.normalized()
    if not conditions:
        return True
    results = [evaluate_single_condition(c, answers) for c in conditions]
    if group_operator is LogicalOperator.AND:
        return all(results)
    return any(results)


def is_question_visible(question: Question, answers: Mapping[str, Any]) -> bool:
    if question.condition is None:
        return True
    return evaluate_condition(question.condition, answers)


def compute_visible_questions(
    all_questions: Sequence[Question],
    answers: Mapping[str, Any],
) -> List[Question]:
    """Return the questions that should be shown, in their original order."""
    answers = answers or {}
    return [q for q in all_questions if is_question_visible(q, answers)]
