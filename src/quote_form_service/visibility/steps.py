from __future__ import annotations

from typing import Iterable, List

from quote_form_service.schemas.questions import Question


def visible_step_numbers(visible_questions: Iterable[Question]) -> List[int]:
    """Distinct step numbers of the visible questions, ascending."""
    return sorted({q.step_number for q in visible_questions})


def questions_for_step(visible_questions: Iterable[Question], step: int) -> List[Question]:
    """
    All visible questions of `step`, ordered by display order.

    Single-question screens only render the first entry; the rest are still
    returned so a multi-question renderer can show them.
    """
    in_step = [q for q in visible_questions if q.step_number == step]
    return sorted(in_step, key=lambda q: q.display_order)
