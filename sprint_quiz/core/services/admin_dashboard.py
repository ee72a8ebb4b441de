"""Read-only aggregation for the administrator view."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sprint_quiz.constants.quiz_constants import (
    FEEDBACK_COLLECTION,
    RESPONSES_COLLECTION,
    USERS_COLLECTION,
)
from sprint_quiz.core.services.quiz_config import QuizConfigService
from sprint_quiz.storage.document_store import DocumentStore


@dataclass(slots=True)
class DashboardStats:
    participant_count: int = 0
    response_count: int = 0
    average_percentage: int = 0
    feedback_count: int = 0
    interested_count: int = 0


@dataclass(slots=True)
class DashboardSnapshot:
    stats: DashboardStats
    question_count: int
    users: list[dict[str, Any]] = field(default_factory=list)
    responses: list[dict[str, Any]] = field(default_factory=list)
    feedback: list[dict[str, Any]] = field(default_factory=list)


class AdminDashboard:
    def __init__(self, store: DocumentStore, config: QuizConfigService) -> None:
        self._store = store
        self._config = config

    def load(self) -> DashboardSnapshot:
        """Collect the raw tables (newest first) and the headline numbers.

        Store errors propagate; the admin view reports them instead of showing partial data.
        """
        users = self._documents(USERS_COLLECTION)
        responses = sorted(
            self._documents(RESPONSES_COLLECTION),
            key=lambda doc: doc.get("completedAt") or "",
            reverse=True,
        )
        feedback = sorted(
            self._documents(FEEDBACK_COLLECTION),
            key=lambda doc: doc.get("submittedAt") or "",
            reverse=True,
        )
        stats = DashboardStats(
            participant_count=len(users),
            response_count=len(responses),
            average_percentage=average_percentage(responses),
            feedback_count=len(feedback),
            interested_count=sum(1 for entry in feedback if entry.get("interestedInMore") == "yes"),
        )
        return DashboardSnapshot(
            stats=stats,
            question_count=self._config.load_question_count(),
            users=users,
            responses=responses,
            feedback=feedback,
        )

    def _documents(self, collection: str) -> list[dict[str, Any]]:
        return [{**doc, "id": doc_id} for doc_id, doc in self._store.list_documents(collection)]


def average_percentage(responses: list[dict[str, Any]]) -> int:
    if not responses:
        return 0
    total = sum(_as_number(response.get("percentage")) for response in responses)
    return int(total / len(responses) + 0.5)


def _as_number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)
