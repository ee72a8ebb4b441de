"""Service that builds a per-session quiz instance from the catalog."""

from __future__ import annotations

import logging
from typing import Sequence

from sprint_quiz.constants.quiz_constants import USE_ALL_QUESTIONS
from sprint_quiz.core.models import AssembledQuestion, AssembledQuiz, Question
from sprint_quiz.core.shuffler import Shuffler

logger = logging.getLogger(__name__)


class QuizAssembler:
    """Selects and orders questions, then orders each question's answer choices."""

    def __init__(self, shuffler: Shuffler | None = None) -> None:
        self._shuffler = shuffler or Shuffler()

    def assemble(self, catalog: Sequence[Question], desired_count: int | str) -> AssembledQuiz:
        """Return ``min(desired_count, len(catalog))`` shuffled questions, or all of them.

        A catalog smaller than requested is returned whole rather than rejected.
        """
        ordered = self._shuffler.shuffle(catalog)
        if desired_count == USE_ALL_QUESTIONS:
            selected = ordered
        else:
            count = self._normalize_count(desired_count)
            if count > len(ordered):
                logger.info(
                    "Requested %d questions but the catalog only holds %d; using all of them",
                    count,
                    len(ordered),
                )
            selected = ordered[: min(count, len(ordered))]

        return AssembledQuiz(questions=tuple(self._assemble_question(q) for q in selected))

    def _assemble_question(self, question: Question) -> AssembledQuestion:
        # A fresh draw per question keeps answer orders uncorrelated.
        choices = self._shuffler.shuffle(question.answer_choices())
        return AssembledQuestion(question=question, answer_choices=tuple(choices))

    @staticmethod
    def _normalize_count(desired_count: int | str) -> int:
        if isinstance(desired_count, bool) or not isinstance(desired_count, int):
            raise ValueError(
                f"Question count must be an integer or '{USE_ALL_QUESTIONS}', got {desired_count!r}."
            )
        if desired_count < 0:
            raise ValueError("Question count must not be negative.")
        return desired_count
