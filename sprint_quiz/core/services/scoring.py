"""Scoring engine: turns an assembled quiz and final selections into a result."""

from __future__ import annotations

from typing import Mapping

from sprint_quiz.core.models import (
    AssembledQuestion,
    AssembledQuiz,
    QuestionOutcome,
    ScoredResult,
    Selection,
)


def score(quiz: AssembledQuiz, selections: Mapping[str, Selection]) -> ScoredResult:
    """Score every question of ``quiz``. Pure; missing selections count as incorrect."""
    outcomes = tuple(_score_question(item, selections.get(item.id)) for item in quiz)
    correct_count = sum(1 for outcome in outcomes if outcome.is_correct)
    total = len(outcomes)
    return ScoredResult(
        correct_count=correct_count,
        total_questions=total,
        percentage=percentage(correct_count, total),
        outcomes=outcomes,
    )


def percentage(correct_count: int, total: int) -> int:
    """Whole-number percentage rounded half up; 0 for an empty quiz."""
    if total <= 0:
        return 0
    return (200 * correct_count + total) // (2 * total)


def is_selection_correct(item: AssembledQuestion, selection: Selection | None) -> bool:
    question = item.question
    if question.is_multi_select:
        # Exact set match rejects both missing and extra answers.
        return _as_set(selection) == question.correct_answer_set
    if not isinstance(selection, str):
        return False
    return selection == question.correct_answer


def _score_question(item: AssembledQuestion, selection: Selection | None) -> QuestionOutcome:
    question = item.question
    return QuestionOutcome(
        question_id=question.id,
        prompt=question.prompt,
        correct_answers=question.correct_answers,
        selected_answers=_in_display_order(item, selection),
        is_correct=is_selection_correct(item, selection),
        is_multi_select=question.is_multi_select,
        explanation=question.explanation,
        reference=question.reference,
        competency=question.competency,
    )


def _as_set(selection: Selection | None) -> frozenset[str]:
    if selection is None:
        return frozenset()
    if isinstance(selection, str):
        return frozenset((selection,))
    return frozenset(selection)


def _in_display_order(item: AssembledQuestion, selection: Selection | None) -> tuple[str, ...]:
    chosen = _as_set(selection)
    ordered = [choice for choice in item.answer_choices if choice in chosen]
    # Answers outside the displayed choices are still reported.
    ordered.extend(sorted(chosen.difference(item.answer_choices)))
    return tuple(ordered)
