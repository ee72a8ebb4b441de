"""Domain models for the quiz application."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Mapping

from sprint_quiz.constants.quiz_constants import NO_ANSWER_TEXT


@dataclass(slots=True, frozen=True)
class Question:
    """Single- or multi-select quiz question as stored in the catalog."""

    id: str
    prompt: str
    correct_answer: str | tuple[str, ...]
    incorrect_answers: tuple[str, ...] = ()
    is_multi_select: bool = False
    explanation: str | None = None
    reference: str | None = None
    competency: str | None = None
    image_url: str | None = None

    @property
    def correct_answers(self) -> tuple[str, ...]:
        if isinstance(self.correct_answer, str):
            return (self.correct_answer,)
        return tuple(self.correct_answer)

    @property
    def correct_answer_set(self) -> frozenset[str]:
        return frozenset(self.correct_answers)

    def answer_choices(self) -> list[str]:
        """Return correct and incorrect answers, deduplicated by exact value."""
        seen: set[str] = set()
        choices: list[str] = []
        for answer in (*self.correct_answers, *self.incorrect_answers):
            if answer in seen:
                continue
            seen.add(answer)
            choices.append(answer)
        return choices

    @classmethod
    def from_record(cls, doc_id: str, record: Mapping[str, Any]) -> "Question":
        """Build a question from a document store record.

        Raises KeyError/ValueError for records that do not have the question shape.
        """
        prompt = record["question"]
        raw_correct = record["correctAnswer"]
        is_multi_select = bool(record.get("isMultiSelect", isinstance(raw_correct, (list, tuple))))

        correct_answer: str | tuple[str, ...]
        if is_multi_select:
            if isinstance(raw_correct, str):
                correct_answer = (raw_correct,)
            else:
                correct_answer = tuple(str(answer) for answer in raw_correct)
        elif isinstance(raw_correct, str):
            correct_answer = raw_correct
        else:
            raise ValueError(f"Question {doc_id} has a list answer but is not multi-select.")

        if not isinstance(prompt, str):
            raise ValueError(f"Question {doc_id} has no text prompt.")

        incorrect = record.get("incorrectAnswers") or []
        if isinstance(incorrect, str):
            raise ValueError(f"Question {doc_id} must list incorrect answers.")

        return cls(
            id=str(record.get("id") or doc_id),
            prompt=prompt,
            correct_answer=correct_answer,
            incorrect_answers=tuple(str(answer) for answer in incorrect),
            is_multi_select=is_multi_select,
            explanation=record.get("explanation") or None,
            reference=record.get("reference") or None,
            competency=record.get("competency") or None,
            image_url=record.get("imageUrl") or None,
        )

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {
            "id": self.id,
            "question": self.prompt,
            "correctAnswer": list(self.correct_answers) if self.is_multi_select else self.correct_answer,
            "incorrectAnswers": list(self.incorrect_answers),
            "isMultiSelect": self.is_multi_select,
        }
        optional = {
            "explanation": self.explanation,
            "reference": self.reference,
            "competency": self.competency,
            "imageUrl": self.image_url,
        }
        record.update({key: value for key, value in optional.items() if value})
        return record


@dataclass(slots=True, frozen=True)
class AssembledQuestion:
    """A selected question together with its shuffled display choices."""

    question: Question
    answer_choices: tuple[str, ...]

    @property
    def id(self) -> str:
        return self.question.id


@dataclass(slots=True, frozen=True)
class AssembledQuiz:
    """Ordered per-session quiz instance. Never mutated after assembly."""

    questions: tuple[AssembledQuestion, ...] = ()

    def __len__(self) -> int:
        return len(self.questions)

    def __iter__(self) -> Iterator[AssembledQuestion]:
        return iter(self.questions)

    def __getitem__(self, index: int) -> AssembledQuestion:
        return self.questions[index]

    @property
    def is_empty(self) -> bool:
        return not self.questions

    @property
    def question_ids(self) -> list[str]:
        return [item.id for item in self.questions]

    def index_of(self, question_id: str) -> int:
        for index, item in enumerate(self.questions):
            if item.id == question_id:
                return index
        raise KeyError(f"Question {question_id} is not part of this quiz")

    def get(self, question_id: str) -> AssembledQuestion:
        return self.questions[self.index_of(question_id)]


# Final per-question selection as handed to the scoring engine.
Selection = str | frozenset[str]


@dataclass(slots=True, frozen=True)
class QuestionOutcome:
    """Per-question scoring outcome. Answers are kept in display order."""

    question_id: str
    prompt: str
    correct_answers: tuple[str, ...]
    selected_answers: tuple[str, ...]
    is_correct: bool
    is_multi_select: bool = False
    explanation: str | None = None
    reference: str | None = None
    competency: str | None = None

    @property
    def correct_answer_text(self) -> str:
        return ", ".join(self.correct_answers)

    @property
    def selected_answer_text(self) -> str:
        if not self.selected_answers:
            return NO_ANSWER_TEXT
        return ", ".join(self.selected_answers)

    def to_record(self) -> dict[str, Any]:
        return {
            "questionId": self.question_id,
            "question": self.prompt,
            "correctAnswer": self.correct_answer_text,
            "selectedAnswer": self.selected_answer_text,
            "isCorrect": self.is_correct,
            "explanation": self.explanation,
            "reference": self.reference,
            "competency": self.competency,
        }


@dataclass(slots=True, frozen=True)
class ScoredResult:
    """Write-once summary produced at submission time."""

    correct_count: int
    total_questions: int
    percentage: int
    outcomes: tuple[QuestionOutcome, ...] = ()

    @property
    def incorrect_outcomes(self) -> list[QuestionOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.is_correct]

    def to_record(self) -> dict[str, Any]:
        """Flatten to the display/persistence shape (comma-joined answers)."""
        return {
            "score": self.correct_count,
            "totalQuestions": self.total_questions,
            "percentage": self.percentage,
            "questionResults": [outcome.to_record() for outcome in self.outcomes],
        }


@dataclass(slots=True, frozen=True)
class ParticipantIdentity:
    """Identity established at sign-in and attached to every write."""

    user_id: str
    name: str
    company: str
    email: str | None = None
    consent: bool = True

    @property
    def first_name(self) -> str:
        parts = self.name.split()
        return parts[0] if parts else self.name
