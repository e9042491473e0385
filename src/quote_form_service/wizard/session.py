"""
Quote wizard view-model.

The wizard owns the answer set and the current step. Every answer mutation is
followed by an explicit recompute of the visible questions; the step list is
always derived from that result, never patched incrementally.

Steps are 1-based: the visible question steps come first, followed by the
postcode step and the contact-details step.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from quote_form_service.config import auto_advance_delay_ms
from quote_form_service.schemas.questions import AnswerValue, Question
from quote_form_service.submissions import filter_answers
from quote_form_service.visibility import compute_visible_questions, questions_for_step, visible_step_numbers
from quote_form_service.wizard.validation import is_answered, validate_required

logger = logging.getLogger(__name__)

SCREEN_QUESTIONS = "questions"
SCREEN_POSTCODE = "postcode"
SCREEN_CONTACT = "contact"

TRAILING_STEPS = 2


@dataclass(frozen=True)
class WizardScreen:
    kind: str
    step_index: int
    step_number: Optional[int] = None
    questions: List[Question] = field(default_factory=list)

    @property
    def primary_question(self) -> Optional[Question]:
        return self.questions[0] if self.questions else None

    def to_dict(self) -> Dict[str, Any]:
        primary = self.primary_question
        return {
            "kind": self.kind,
            "stepIndex": self.step_index,
            "stepNumber": self.step_number,
            "questionIds": [q.id for q in self.questions],
            "primaryQuestionId": primary.id if primary else None,
        }


class QuoteWizard:
    def __init__(
        self,
        questions: Sequence[Question],
        answers: Optional[Mapping[str, AnswerValue]] = None,
        current_step: int = 1,
    ) -> None:
        self._questions: List[Question] = list(questions)
        self._by_id: Dict[str, Question] = {q.id: q for q in self._questions}
        self._answers: Dict[str, AnswerValue] = {}
        for key, value in (answers or {}).items():
            if is_answered(value):
                self._answers[str(key)] = list(value) if isinstance(value, (list, tuple)) else value
        self._visible: List[Question] = []
        self._step_numbers: List[int] = []
        self.current_step = 1
        self._recompute()
        self.current_step = self._clamp(current_step)

    @property
    def questions(self) -> List[Question]:
        return list(self._questions)

    @property
    def answers(self) -> Dict[str, AnswerValue]:
        return dict(self._answers)

    @property
    def visible_questions(self) -> List[Question]:
        return list(self._visible)

    @property
    def step_numbers(self) -> List[int]:
        return list(self._step_numbers)

    @property
    def total_steps(self) -> int:
        return len(self._step_numbers) + TRAILING_STEPS

    def question(self, question_id: str) -> Optional[Question]:
        return self._by_id.get(question_id)

    def _clamp(self, step: int) -> int:
        try:
            step = int(step)
        except (TypeError, ValueError):
            step = 1
        return max(1, min(step, self.total_steps))

    def _recompute(self) -> None:
        self._visible = compute_visible_questions(self._questions, self._answers)
        self._step_numbers = visible_step_numbers(self._visible)
        logger.debug(
            "visible questions recomputed: %d/%d visible, %d steps",
            len(self._visible),
            len(self._questions),
            len(self._step_numbers),
        )

    def set_answer(self, question_id: str, value: Any) -> None:
        """Store (or clear, when empty) an answer and recompute visibility."""
        if is_answered(value):
            self._answers[question_id] = list(value) if isinstance(value, (list, tuple)) else value
        else:
            self._answers.pop(question_id, None)
        self._recompute()
        self.current_step = self._clamp(self.current_step)

    def toggle_option(self, question_id: str, option: str) -> List[str]:
        """Checkbox behaviour for multi-select questions. Returns the new selection."""
        current = self._answers.get(question_id)
        if isinstance(current, list):
            selected = list(current)
        elif current:
            selected = [current]
        else:
            selected = []
        if option in selected:
            selected = [v for v in selected if v != option]
        else:
            selected.append(option)
        self.set_answer(question_id, selected)
        return selected

    def select_option(self, question_id: str, option: str) -> bool:
        """
        Radio behaviour for single-choice questions.

        Returns True when the caller should auto-advance after
        `auto_advance_delay_ms()`.
        """
        self.set_answer(question_id, option)
        question = self._by_id.get(question_id)
        return bool(question and question.is_multiple_choice and not question.allow_multiple_selections)

    @staticmethod
    def auto_advance_delay_ms() -> int:
        return auto_advance_delay_ms()

    def screen_for(self, step_index: int) -> WizardScreen:
        step_index = self._clamp(step_index)
        n = len(self._step_numbers)
        if step_index <= n:
            step_number = self._step_numbers[step_index - 1]
            return WizardScreen(
                kind=SCREEN_QUESTIONS,
                step_index=step_index,
                step_number=step_number,
                questions=questions_for_step(self._visible, step_number),
            )
        if step_index == n + 1:
            return WizardScreen(kind=SCREEN_POSTCODE, step_index=step_index)
        return WizardScreen(kind=SCREEN_CONTACT, step_index=step_index)

    def current_screen(self) -> WizardScreen:
        return self.screen_for(self.current_step)

    def validate_current_step(self) -> Dict[str, str]:
        screen = self.current_screen()
        if screen.kind != SCREEN_QUESTIONS:
            return {}
        return validate_required(screen.questions, self._answers)

    def next_step(self) -> Dict[str, str]:
        """Advance one step unless the current step has validation errors."""
        errors = self.validate_current_step()
        if errors:
            return errors
        self.current_step = self._clamp(self.current_step + 1)
        return {}

    def previous_step(self) -> None:
        if self.current_step > 1:
            self.current_step -= 1

    def submission_answers(self) -> Dict[str, Any]:
        """Answers to post with the contact details (question ids only, no postcode)."""
        return filter_answers(self._answers, self._questions)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "currentStep": self.current_step,
            "totalSteps": self.total_steps,
            "stepNumbers": self.step_numbers,
            "visibleQuestionIds": [q.id for q in self._visible],
            "screen": self.current_screen().to_dict(),
        }
