"""Service that provides the question pool for new quiz sessions."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable

from sprint_quiz.constants.quiz_constants import QUESTIONS_COLLECTION
from sprint_quiz.core.errors import CatalogUnavailable
from sprint_quiz.core.models import Question
from sprint_quiz.core.question_bank import local_questions
from sprint_quiz.storage.document_store import DocumentStore

logger = logging.getLogger(__name__)

SOURCE_REMOTE = "remote"
SOURCE_LOCAL = "local"


@dataclass(slots=True, frozen=True)
class CatalogDiagnostic:
    """Describes where the last catalog load came from and why."""

    source: str
    question_count: int
    reason: str
    error: str | None = None


class QuestionCatalog:
    """Loads questions from the store, falling back to the local set on any failure."""

    def __init__(
        self,
        store: DocumentStore | None,
        fallback: Callable[[], list[Question]] = local_questions,
    ) -> None:
        self._store = store
        self._fallback = fallback
        self.last_diagnostic: CatalogDiagnostic | None = None

    def load(self) -> list[Question]:
        """Return the remote questions when available, otherwise the local set. Never raises."""
        try:
            questions = self._load_remote()
        except CatalogUnavailable as exc:
            questions = self._fallback()
            cause = exc.__cause__
            self._report(
                CatalogDiagnostic(
                    source=SOURCE_LOCAL,
                    question_count=len(questions),
                    reason=str(exc),
                    error=f"{type(cause).__name__}: {cause}" if cause is not None else None,
                )
            )
            return questions

        self._report(
            CatalogDiagnostic(
                source=SOURCE_REMOTE,
                question_count=len(questions),
                reason="remote collection",
            )
        )
        return questions

    def _load_remote(self) -> list[Question]:
        if self._store is None:
            raise CatalogUnavailable("no document store configured")
        try:
            documents = self._store.list_documents(QUESTIONS_COLLECTION)
            questions = [Question.from_record(doc_id, record) for doc_id, record in documents]
        except Exception as exc:  # any store or record failure means the local set is used
            raise CatalogUnavailable("remote catalog could not be loaded") from exc
        if not questions:
            raise CatalogUnavailable("remote catalog is empty")
        return questions

    def _report(self, diagnostic: CatalogDiagnostic) -> None:
        self.last_diagnostic = diagnostic
        level = logging.INFO if diagnostic.source == SOURCE_REMOTE else logging.WARNING
        logger.log(
            level,
            "Question catalog loaded from %s (%d questions): %s",
            diagnostic.source,
            diagnostic.question_count,
            diagnostic.reason,
            extra={
                "catalog_source": diagnostic.source,
                "catalog_error": diagnostic.error,
            },
        )
