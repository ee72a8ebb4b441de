"""Service for tracking one participant's progress through an assembled quiz."""

from __future__ import annotations

from enum import Enum, auto

from sprint_quiz.core.errors import InvalidTransition
from sprint_quiz.core.models import AssembledQuestion, AssembledQuiz, Selection


class SessionPhase(Enum):
    AWAITING_SELECTION = auto()
    REVEAL_LOCKED = auto()
    READY_TO_SUBMIT = auto()
    SUBMITTED = auto()


class QuizSession:
    """Owns position, selections and per-question reveal locks for one quiz.

    A question locks the moment a selection is recorded for it and stays locked for
    the rest of the session, so revisiting it shows the earlier answer and feedback.
    """

    def __init__(self, quiz: AssembledQuiz) -> None:
        self._quiz = quiz
        self._index: int = 0
        self._selections: dict[str, str | set[str]] = {}
        self._locked: set[str] = set()
        self._ready_to_submit: bool = False
        self._submitted: bool = False

    # --- Read access ---

    @property
    def quiz(self) -> AssembledQuiz:
        return self._quiz

    @property
    def phase(self) -> SessionPhase:
        if self._submitted:
            return SessionPhase.SUBMITTED
        if self._ready_to_submit:
            return SessionPhase.READY_TO_SUBMIT
        current = self.get_current_question()
        if current is not None and current.id in self._locked:
            return SessionPhase.REVEAL_LOCKED
        return SessionPhase.AWAITING_SELECTION

    def get_current_index(self) -> int:
        return self._index

    def get_current_question(self) -> AssembledQuestion | None:
        if self._quiz.is_empty:
            return None
        return self._quiz[self._index]

    def is_last_question(self) -> bool:
        return self._index == len(self._quiz) - 1

    @property
    def next_action(self) -> str:
        """Label for the forward control: "submit" on the last question."""
        return "submit" if self.is_last_question() else "next"

    def is_locked(self, question_id: str) -> bool:
        return question_id in self._locked

    def get_selection(self, question_id: str) -> Selection | None:
        selection = self._selections.get(question_id)
        if isinstance(selection, set):
            return frozenset(selection)
        return selection

    def selection_snapshot(self) -> dict[str, Selection]:
        """Frozen copy of every recorded selection, for the scoring engine."""
        return {
            question_id: frozenset(value) if isinstance(value, set) else value
            for question_id, value in self._selections.items()
        }

    def has_answer(self, question_id: str) -> bool:
        return bool(self._selections.get(question_id))

    def answered_count(self) -> int:
        return sum(1 for item in self._quiz if self.has_answer(item.id))

    def can_submit(self) -> bool:
        if self._quiz.is_empty:
            return False
        return all(self.has_answer(item.id) for item in self._quiz)

    # --- Transitions ---

    def record_selection(self, question_id: str, answer: str) -> bool:
        """Record or toggle an answer for the current question.

        Returns False (and changes nothing) when the question is already locked.
        """
        current = self._require_current_question()
        if current.id != question_id:
            raise InvalidTransition(
                f"Question {question_id} is not the current question."
            )
        phase = self.phase
        if phase is SessionPhase.REVEAL_LOCKED:
            return False
        if phase is not SessionPhase.AWAITING_SELECTION:
            raise InvalidTransition(f"Cannot change answers while {phase.name.lower()}.")
        if answer not in current.answer_choices:
            raise ValueError(f"'{answer}' is not an answer choice for question {question_id}.")

        if current.question.is_multi_select:
            chosen = self._selections.get(question_id)
            if not isinstance(chosen, set):
                chosen = set()
                self._selections[question_id] = chosen
            chosen ^= {answer}
            if chosen:
                self._locked.add(question_id)
        else:
            self._selections[question_id] = answer
            self._locked.add(question_id)
        return True

    def navigate_next(self) -> SessionPhase:
        if self.phase is not SessionPhase.REVEAL_LOCKED:
            raise InvalidTransition("Answer the current question before moving on.")
        if self.is_last_question():
            self._ready_to_submit = True
        else:
            self._index += 1
        return self.phase

    def navigate_previous(self) -> SessionPhase:
        if self.phase is not SessionPhase.AWAITING_SELECTION:
            raise InvalidTransition("Cannot go back while feedback is shown.")
        if self._index == 0:
            raise InvalidTransition("Already at the first question.")
        self._index -= 1
        return self.phase

    def mark_submitted(self) -> None:
        if self.phase is not SessionPhase.READY_TO_SUBMIT:
            raise InvalidTransition("The quiz is not ready to be submitted.")
        if not self.can_submit():
            raise InvalidTransition("Every question needs an answer before submitting.")
        self._submitted = True

    def _require_current_question(self) -> AssembledQuestion:
        current = self.get_current_question()
        if current is None:
            raise InvalidTransition("The quiz has no questions.")
        return current
