"""Service for post-quiz feedback."""

from __future__ import annotations

import logging
from typing import Any

from sprint_quiz.constants.quiz_constants import FEEDBACK_COLLECTION
from sprint_quiz.core.errors import AuthenticationMissing, PersistenceFailure
from sprint_quiz.core.models import ParticipantIdentity
from sprint_quiz.storage.document_store import DocumentStore
from sprint_quiz.utils.time_utils import Clock, isoformat_utc, utc_now

logger = logging.getLogger(__name__)

INTEREST_VALUES = ("yes", "no")


class FeedbackService:
    def __init__(self, store: DocumentStore, clock: Clock = utc_now) -> None:
        self._store = store
        self._clock = clock

    def submit(
        self,
        identity: ParticipantIdentity | None,
        interested: str | None = None,
        questions: str = "",
    ) -> dict[str, Any]:
        """Store free-text feedback plus the optional yes/no interest flag."""
        if identity is None:
            raise AuthenticationMissing("Sign in before sending feedback")
        interested = (interested or "").strip().lower() or None
        if interested is not None and interested not in INTEREST_VALUES:
            raise ValueError("Interest must be 'yes', 'no' or left unset.")
        text = (questions or "").strip()
        if interested is None and not text:
            raise ValueError("Please let us know if you are interested or share a question.")

        entry = {
            "userId": identity.user_id,
            "userName": identity.name,
            "userCompany": identity.company,
            "userEmail": identity.email or "",
            "interestedInMore": interested,
            "questions": text,
            "submittedAt": isoformat_utc(self._clock()),
        }
        try:
            entry_id = self._store.add_document(FEEDBACK_COLLECTION, entry)
        except Exception as exc:
            raise PersistenceFailure("Something went wrong. Please try again.") from exc
        logger.info("Feedback %s stored for %s", entry_id, identity.user_id)
        return {"id": entry_id, **entry}
