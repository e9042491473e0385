from quote_form_service.schemas import Question
from quote_form_service.wizard import (
    REQUIRED_MESSAGE,
    SCREEN_CONTACT,
    SCREEN_POSTCODE,
    SCREEN_QUESTIONS,
    QuoteWizard,
)


def _questions():
    rows = [
        {
            "question_id": "fuel",
            "question_text": "What fuel does your boiler use?",
            "step_number": 1,
            "is_multiple_choice": True,
            "answer_options": ["Gas", "Oil", "Electric"],
            "is_required": True,
        },
        {
            "question_id": "gas_type",
            "question_text": "Mains gas or LPG?",
            "step_number": 2,
            "is_multiple_choice": True,
            "answer_options": ["Mains", "LPG"],
            "is_required": True,
            "conditional_display": {
                "dependent_on_question_id": "fuel",
                "show_when_answer_equals": ["Gas"],
                "logical_operator": "OR",
            },
        },
        {
            "question_id": "rooms",
            "question_text": "Which rooms need heating?",
            "step_number": 3,
            "is_multiple_choice": True,
            "allow_multiple_selections": True,
            "answer_options": ["Kitchen", "Bathroom", "Loft"],
        },
        {
            "question_id": "notes",
            "question_text": "Anything else?",
            "step_number": 3,
            "display_order_in_step": 2,
        },
    ]
    return [Question.model_validate(r) for r in rows]


def test_total_steps_counts_visible_steps_plus_postcode_and_contact():
    wizard = QuoteWizard(_questions())
    assert wizard.step_numbers == [1, 3]
    assert wizard.total_steps == 4

    wizard.set_answer("fuel", "Gas")
    assert wizard.step_numbers == [1, 2, 3]
    assert wizard.total_steps == 5


def test_screens_follow_visible_steps_then_fixed_steps():
    wizard = QuoteWizard(_questions(), answers={"fuel": "Oil"})
    screens = [wizard.screen_for(i) for i in range(1, wizard.total_steps + 1)]
    assert [s.kind for s in screens] == [SCREEN_QUESTIONS, SCREEN_QUESTIONS, SCREEN_POSTCODE, SCREEN_CONTACT]
    assert screens[1].step_number == 3
    assert [q.id for q in screens[1].questions] == ["rooms", "notes"]
    assert screens[1].primary_question.id == "rooms"


def test_next_step_blocks_on_required_question():
    wizard = QuoteWizard(_questions())
    errors = wizard.next_step()
    assert errors == {"fuel": REQUIRED_MESSAGE}
    assert wizard.current_step == 1

    wizard.set_answer("fuel", "Gas")
    assert wizard.next_step() == {}
    assert wizard.current_step == 2
    assert wizard.current_screen().step_number == 2


def test_next_step_never_passes_last_step_and_previous_stops_at_one():
    wizard = QuoteWizard(_questions(), answers={"fuel": "Oil"}, current_step=99)
    assert wizard.current_step == wizard.total_steps
    assert wizard.next_step() == {}
    assert wizard.current_step == wizard.total_steps

    wizard.current_step = 1
    wizard.previous_step()
    assert wizard.current_step == 1


def test_changing_upstream_answer_hides_step_and_clamps_position():
    wizard = QuoteWizard(_questions(), answers={"fuel": "Gas", "gas_type": "LPG"}, current_step=5)
    assert wizard.total_steps == 5

    wizard.set_answer("fuel", "Electric")
    assert "gas_type" not in [q.id for q in wizard.visible_questions]
    assert wizard.total_steps == 4
    assert wizard.current_step == 4


def test_clearing_an_answer_removes_it():
    wizard = QuoteWizard(_questions(), answers={"fuel": "Gas"})
    wizard.set_answer("fuel", "")
    assert "fuel" not in wizard.answers
    assert wizard.step_numbers == [1, 3]


def test_toggle_option_adds_and_removes():
    wizard = QuoteWizard(_questions())
    assert wizard.toggle_option("rooms", "Kitchen") == ["Kitchen"]
    assert wizard.toggle_option("rooms", "Loft") == ["Kitchen", "Loft"]
    assert wizard.toggle_option("rooms", "Kitchen") == ["Loft"]
    assert wizard.answers["rooms"] == ["Loft"]
    assert wizard.toggle_option("rooms", "Loft") == []
    assert "rooms" not in wizard.answers


def test_toggle_option_promotes_scalar_answer():
    wizard = QuoteWizard(_questions(), answers={"rooms": "Kitchen"})
    assert wizard.toggle_option("rooms", "Bathroom") == ["Kitchen", "Bathroom"]


def test_select_option_signals_auto_advance_for_single_choice_only():
    wizard = QuoteWizard(_questions())
    assert wizard.select_option("fuel", "Gas") is True
    assert wizard.answers["fuel"] == "Gas"
    assert wizard.select_option("rooms", "Loft") is False
    assert wizard.select_option("notes", "hello") is False


def test_auto_advance_delay_env_override(monkeypatch):
    monkeypatch.delenv("QUOTE_FORM_AUTO_ADVANCE_MS", raising=False)
    assert QuoteWizard.auto_advance_delay_ms() == 300
    monkeypatch.setenv("QUOTE_FORM_AUTO_ADVANCE_MS", "750")
    assert QuoteWizard.auto_advance_delay_ms() == 750
    monkeypatch.setenv("QUOTE_FORM_AUTO_ADVANCE_MS", "not-a-number")
    assert QuoteWizard.auto_advance_delay_ms() == 300


def test_required_list_answer_must_not_be_empty():
    questions = _questions()
    required_rooms = questions[2].model_copy(update={"is_required": True})
    wizard = QuoteWizard([questions[0], required_rooms], answers={"fuel": "Oil", "rooms": []}, current_step=2)
    assert wizard.validate_current_step() == {"rooms": REQUIRED_MESSAGE}


def test_snapshot_is_json_friendly():
    wizard = QuoteWizard(_questions(), answers={"fuel": "Gas"})
    snap = wizard.snapshot()
    assert snap["currentStep"] == 1
    assert snap["totalSteps"] == 5
    assert snap["stepNumbers"] == [1, 2, 3]
    assert snap["visibleQuestionIds"] == ["fuel", "gas_type", "rooms", "notes"]
    assert snap["screen"] == {
        "kind": SCREEN_QUESTIONS,
        "stepIndex": 1,
        "stepNumber": 1,
        "questionIds": ["fuel"],
        "primaryQuestionId": "fuel",
    }


def test_submission_answers_exclude_postcode_and_unknown_keys():
    wizard = QuoteWizard(_questions(), answers={"fuel": "Gas", "postcode": "SW1A 1AA", "utm": "x"})
    wizard.toggle_option("rooms", "Loft")
    assert wizard.submission_answers() == {"fuel": "Gas", "rooms": ["Loft"]}


def test_wizard_does_not_mutate_caller_answers():
    answers = {"fuel": "Gas"}
    wizard = QuoteWizard(_questions(), answers=answers)
    wizard.set_answer("fuel", "Oil")
    assert answers == {"fuel": "Gas"}
