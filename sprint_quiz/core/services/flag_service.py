"""Service for flagging questions for review."""

from __future__ import annotations

import logging

from sprint_quiz.constants.quiz_constants import FLAG_REASON, FLAGS_COLLECTION
from sprint_quiz.core.errors import AuthenticationMissing, PersistenceFailure
from sprint_quiz.core.models import ParticipantIdentity, Question
from sprint_quiz.storage.document_store import DocumentStore
from sprint_quiz.utils.time_utils import Clock, isoformat_utc, utc_now

logger = logging.getLogger(__name__)


class FlagService:
    """Per-user, per-question flag records. Unflagging deletes the stored records."""

    def __init__(self, store: DocumentStore, clock: Clock = utc_now) -> None:
        self._store = store
        self._clock = clock

    def load_flags(self, user_id: str) -> set[str]:
        """Return the ids of questions the user has flagged; empty on read failure."""
        try:
            documents = self._store.list_documents(FLAGS_COLLECTION)
        except Exception:
            logger.exception("Error loading flagged questions for %s", user_id)
            return set()
        return {
            str(doc.get("questionId"))
            for _, doc in documents
            if doc.get("userId") == user_id
        }

    def toggle(self, identity: ParticipantIdentity | None, question: Question) -> bool:
        """Flip the flag for ``question``. Returns the new flagged state."""
        if identity is None:
            raise AuthenticationMissing("Please sign in to flag questions")
        try:
            existing = [
                doc_id
                for doc_id, doc in self._store.list_documents(FLAGS_COLLECTION)
                if doc.get("questionId") == question.id and doc.get("userId") == identity.user_id
            ]
            if existing:
                for doc_id in existing:
                    self._store.delete_document(FLAGS_COLLECTION, doc_id)
                logger.info("Question %s unflagged by %s", question.id, identity.user_id)
                return False

            flag = {
                "questionId": question.id,
                "question": question.prompt,
                "userId": identity.user_id,
                "userName": identity.name,
                "userCompany": identity.company,
                "flaggedAt": isoformat_utc(self._clock()),
                "reason": FLAG_REASON,
            }
            if identity.email:
                flag["userEmail"] = identity.email
            self._store.add_document(FLAGS_COLLECTION, flag)
        except Exception as exc:
            raise PersistenceFailure("Failed to flag question. Please try again.") from exc
        logger.info("Question %s flagged by %s", question.id, identity.user_id)
        return True
