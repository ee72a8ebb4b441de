from __future__ import annotations

import pytest

from sprint_quiz.core.models import ParticipantIdentity, Question, QuestionOutcome


class TestQuestion:
    def test_answer_choices_keep_first_occurrence(self):
        question = Question(id="1", prompt="?", correct_answer="A", incorrect_answers=("B", "A", "C", "B"))
        assert question.answer_choices() == ["A", "B", "C"]

    def test_record_round_trip_keeps_optional_fields(self, sample_questions):
        original = sample_questions[1]
        assert Question.from_record("ignored", original.to_record()) == original

    def test_record_omits_empty_optional_fields(self, sample_questions):
        record = sample_questions[3].to_record()
        assert "explanation" not in record
        assert record["competency"] == "Science"

    def test_list_answer_on_single_select_is_rejected(self):
        with pytest.raises(ValueError):
            Question.from_record("x", {"question": "?", "correctAnswer": ["A"], "isMultiSelect": False})

    def test_missing_prompt_is_rejected(self):
        with pytest.raises(KeyError):
            Question.from_record("x", {"correctAnswer": "A"})


class TestOutcomeText:
    def test_no_answer_text(self):
        outcome = QuestionOutcome(
            question_id="1",
            prompt="?",
            correct_answers=("A", "B"),
            selected_answers=(),
            is_correct=False,
        )
        assert outcome.selected_answer_text == "No answer"
        assert outcome.correct_answer_text == "A, B"


class TestParticipantIdentity:
    @pytest.mark.parametrize(("name", "first"), [("Ada Lovelace", "Ada"), ("Cher", "Cher")])
    def test_first_name(self, name, first):
        assert ParticipantIdentity(user_id="u", name=name, company="c").first_name == first
