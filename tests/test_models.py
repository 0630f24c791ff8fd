"""
Tests for record models (Question / Assessment validation).
"""

import pytest
from pydantic import ValidationError

from assessment_cbt.models.assessment_model import AnswerRecord, Assessment
from assessment_cbt.models.question_model import Question


def _question_row(**overrides):
    row = {
        "id": "q1",
        "assessment_id": "a-1",
        "question_text": "Which link is safe?",
        "options": ["A", "B", "C"],
        "correct_option_index": 2,
    }
    row.update(overrides)
    return row


class TestQuestion:
    def test_valid_question(self):
        question = Question.model_validate(_question_row())

        assert question.correct_option_index == 2
        assert question.is_active is True
        assert question.explanation is None

    def test_legacy_correct_answer_key_is_accepted(self):
        row = _question_row()
        del row["correct_option_index"]
        row["correct_answer"] = 1

        assert Question.model_validate(row).correct_option_index == 1

    @pytest.mark.parametrize("index", [-1, 3, 10])
    def test_correct_index_must_point_into_options(self, index):
        with pytest.raises(ValidationError):
            Question.model_validate(_question_row(correct_option_index=index))

    @pytest.mark.parametrize("count", [0, 1, 7])
    def test_option_count_between_two_and_six(self, count):
        with pytest.raises(ValidationError):
            Question.model_validate(
                _question_row(options=[f"o{i}" for i in range(count)], correct_option_index=0)
            )

    def test_unknown_columns_are_ignored(self):
        question = Question.model_validate(_question_row(question_type="phishing", created_at="2026-01-01"))

        assert question.id == "q1"

    def test_option_labels_are_positional(self):
        question = Question.model_validate(_question_row(options=list("uvwxyz"), correct_option_index=0))

        assert [question.option_label(i) for i in range(6)] == ["A", "B", "C", "D", "E", "F"]


class TestAssessment:
    def test_missing_passing_score_uses_default(self):
        assessment = Assessment.model_validate({"id": "a-1", "title": "Quiz", "status": "published"})

        assert assessment.passing_score == 60

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            Assessment.model_validate({"id": "a-1", "title": "Quiz", "status": "archived"})

    @pytest.mark.parametrize("score", [-1, 101])
    def test_passing_score_is_a_percentage(self, score):
        with pytest.raises(ValidationError):
            Assessment.model_validate({"id": "a-1", "title": "Quiz", "passing_score": score})


class TestAnswerRecord:
    def test_selected_option_below_skip_sentinel_rejected(self):
        with pytest.raises(ValidationError):
            AnswerRecord(session_id="s", question_id="q", selected_option=-2, is_correct=False)
