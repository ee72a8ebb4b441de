from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from sprint_quiz.core.models import AssembledQuestion, AssembledQuiz, ParticipantIdentity, Question
from sprint_quiz.core.shuffler import Shuffler
from sprint_quiz.storage.document_store import DocumentStore, DocumentStoreError

FIXED_NOW = datetime(2025, 10, 20, 9, 30, tzinfo=timezone.utc)
FIXED_NOW_TEXT = "2025-10-20T09:30:00.000Z"


class BrokenStore(DocumentStore):
    """Store whose reads and writes always fail."""

    def _load(self):
        raise DocumentStoreError("backend offline")

    def _mutate(self, apply):
        raise DocumentStoreError("backend offline")


class SwitchableStore(DocumentStore):
    """In-memory store whose writes can be switched off mid-test."""

    def __init__(self, initial=None) -> None:
        super().__init__(initial)
        self.fail_writes = False

    def _mutate(self, apply):
        if self.fail_writes:
            raise DocumentStoreError("write rejected")
        super()._mutate(apply)


class CollectionFailingStore(DocumentStore):
    """In-memory store that rejects writes to the collections listed in ``failing``."""

    def __init__(self, initial=None) -> None:
        super().__init__(initial)
        self.failing: set[str] = set()

    def set_document(self, collection, doc_id, data, merge=False):
        if collection in self.failing:
            raise DocumentStoreError(f"write to {collection} rejected")
        super().set_document(collection, doc_id, data, merge=merge)


class MutableClock:
    """Clock a test can move forward."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock():
    return fixed_clock


@pytest.fixture
def shuffler() -> Shuffler:
    return Shuffler(seed=7)


@pytest.fixture
def store() -> DocumentStore:
    return DocumentStore()


@pytest.fixture
def broken_store() -> DocumentStore:
    return BrokenStore()


@pytest.fixture
def switchable_store() -> SwitchableStore:
    return SwitchableStore()


@pytest.fixture
def collection_failing_store() -> CollectionFailingStore:
    return CollectionFailingStore()


@pytest.fixture
def sample_questions() -> list[Question]:
    return [
        Question(
            id="q1",
            prompt="What is 2 + 2?",
            correct_answer="4",
            incorrect_answers=("3", "5", "22"),
            explanation="Basic **addition**.",
            competency="Math",
        ),
        Question(
            id="q2",
            prompt="What is the capital of France?",
            correct_answer="Paris",
            incorrect_answers=("Lyon", "Nice", "Lille"),
            reference="https://en.wikipedia.org/wiki/Paris",
            competency="Geography",
        ),
        Question(
            id="q3",
            prompt="Which are primary colours of paint?",
            correct_answer=("Red", "Blue", "Yellow"),
            incorrect_answers=("Green",),
            is_multi_select=True,
            competency="Art",
        ),
        Question(
            id="q4",
            prompt="Which is the largest planet?",
            correct_answer="Jupiter",
            incorrect_answers=("Mars", "Venus", "Earth"),
            competency="Science",
        ),
        Question(
            id="q5",
            prompt="What is H2O?",
            correct_answer="Water",
            incorrect_answers=("Salt", "Sand", "Air"),
            competency="Science",
        ),
    ]


@pytest.fixture
def make_quiz():
    """Build an assembled quiz that keeps catalog order and authored answer order."""

    def build(questions) -> AssembledQuiz:
        return AssembledQuiz(
            questions=tuple(
                AssembledQuestion(question=q, answer_choices=tuple(q.answer_choices())) for q in questions
            )
        )

    return build


@pytest.fixture
def identity() -> ParticipantIdentity:
    return ParticipantIdentity(
        user_id="user-1",
        name="Ada Lovelace",
        company="Analytical Engines",
        email="ada@example.com",
    )


@pytest.fixture
def seeded_store(sample_questions) -> DocumentStore:
    return DocumentStore(
        {
            "questions": {q.id: q.to_record() for q in sample_questions},
            "config": {"quiz": {"questionCount": 3}},
        }
    )
