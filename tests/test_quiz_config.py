from __future__ import annotations

import pytest

from sprint_quiz.core.errors import InvalidConfigValue, PersistenceFailure
from sprint_quiz.core.services.quiz_config import QuizConfigService, validate_question_count
from sprint_quiz.storage.document_store import DocumentStore

from conftest import FIXED_NOW_TEXT


def _store_with_count(value) -> DocumentStore:
    return DocumentStore({"config": {"quiz": {"questionCount": value}}})


class TestLoadQuestionCount:
    def test_default_when_nothing_stored(self, store):
        assert QuizConfigService(store).load_question_count() == 100

    def test_reads_stored_value(self):
        assert QuizConfigService(_store_with_count(25)).load_question_count() == 25

    def test_whole_float_is_accepted(self):
        assert QuizConfigService(_store_with_count(10.0)).load_question_count() == 10

    @pytest.mark.parametrize("value", [0, -3, 2.5, "ten", True, None])
    def test_invalid_value_falls_back_to_default(self, value, caplog):
        assert QuizConfigService(_store_with_count(value)).load_question_count() == 100
        assert "Using default question count" in caplog.text

    def test_store_failure_falls_back_to_default(self, broken_store):
        assert QuizConfigService(broken_store).load_question_count() == 100


class TestSaveQuestionCount:
    def test_writes_count_and_timestamp(self, store, clock):
        service = QuizConfigService(store, clock=clock)

        assert service.save_question_count(40) == 40
        assert store.get_document("config", "quiz") == {
            "questionCount": 40,
            "updatedAt": FIXED_NOW_TEXT,
        }
        assert service.load_question_count() == 40

    @pytest.mark.parametrize("value", [1, 500])
    def test_bounds_are_inclusive(self, store, value):
        assert QuizConfigService(store).save_question_count(value) == value

    @pytest.mark.parametrize("value", [0, 501, -1, 2.5, True])
    def test_rejects_out_of_bounds(self, store, value):
        with pytest.raises(InvalidConfigValue):
            QuizConfigService(store).save_question_count(value)
        assert store.get_document("config", "quiz") is None

    def test_invalid_config_value_is_a_value_error(self):
        with pytest.raises(ValueError):
            validate_question_count(0)

    def test_store_failure_is_persistence_failure(self, broken_store):
        with pytest.raises(PersistenceFailure):
            QuizConfigService(broken_store).save_question_count(10)
