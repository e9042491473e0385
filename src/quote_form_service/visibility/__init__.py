from .evaluator import (  # noqa: F401
    compute_visible_questions,
    evaluate_condition,
    evaluate_single_condition,
    is_question_visible,
)
from .steps import questions_for_step, visible_step_numbers  # noqa: F401
