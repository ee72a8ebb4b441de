from __future__ import annotations

from pathlib import Path

from seed_questions import main, prepare_questions, seed_questions
from sprint_quiz.core.models import Question
from sprint_quiz.core.question_bank import DISTRACTOR_TERMS, LOCAL_QUESTIONS, pad_incorrect_answers
from sprint_quiz.storage.document_store import JsonDocumentStore


class TestPadding:
    def test_pads_single_select_to_three_distractors(self, shuffler):
        question = Question(id="p", prompt="Pick", correct_answer="SitecoreAI", incorrect_answers=("XM Cloud",))

        padded = pad_incorrect_answers(question, shuffler=shuffler)

        assert len(padded) == 3
        assert padded[0] == "XM Cloud"
        assert "SitecoreAI" not in padded
        assert len(set(padded)) == 3
        assert set(padded[1:]) <= set(DISTRACTOR_TERMS)

    def test_leaves_full_questions_alone(self, sample_questions, shuffler):
        assert pad_incorrect_answers(sample_questions[0], shuffler=shuffler) == ("3", "5", "22")

    def test_multi_select_is_not_padded(self, sample_questions, shuffler):
        prepared = prepare_questions(sample_questions, shuffler=shuffler)
        assert prepared[2].incorrect_answers == ("Green",)


class TestSeedQuestions:
    def test_seeds_empty_store(self, store, sample_questions, shuffler):
        written = seed_questions(store, sample_questions, shuffler=shuffler)

        assert written == 5
        assert store.get_document("questions", "q3")["correctAnswer"] == ["Red", "Blue", "Yellow"]

    def test_skips_populated_store(self, seeded_store, sample_questions):
        assert seed_questions(seeded_store, sample_questions[:1]) == 0
        assert seeded_store.count("questions") == 5

    def test_force_overwrites(self, seeded_store, sample_questions):
        assert seed_questions(seeded_store, sample_questions[:1], force=True) == 1

    def test_main_seeds_local_bank(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("SPRINT_QUIZ_LOG_LEVEL", "WARNING")
        data_file = tmp_path / "store.json"

        assert main(["--data-file", str(data_file)]) == 0

        assert JsonDocumentStore(data_file).count("questions") == len(LOCAL_QUESTIONS)

    def test_main_imports_file(self, tmp_path: Path):
        catalog = tmp_path / "catalog.txt"
        catalog.write_text("Q: One?\nCORRECT: A\nWRONG: B\n", encoding="utf-8")
        data_file = tmp_path / "store.json"

        main(["--file", str(catalog), "--data-file", str(data_file)])

        (doc_id, record), = JsonDocumentStore(data_file).list_documents("questions")
        assert doc_id == "1"
        assert len(record["incorrectAnswers"]) == 3
