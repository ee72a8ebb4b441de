"""Service that persists a scored result for a participant."""

from __future__ import annotations

import logging
from typing import Any

from sprint_quiz.constants.quiz_constants import RESPONSES_COLLECTION, USERS_COLLECTION
from sprint_quiz.core.errors import AuthenticationMissing, PersistenceFailure
from sprint_quiz.core.models import ParticipantIdentity, ScoredResult
from sprint_quiz.storage.document_store import DocumentStore
from sprint_quiz.utils.time_utils import Clock, isoformat_utc, utc_now

logger = logging.getLogger(__name__)


class ResultRecorder:
    """Writes the response record and the user's denormalized last result.

    Failures are not retried; the caller keeps the session so the user can submit again.
    """

    def __init__(self, store: DocumentStore, clock: Clock = utc_now) -> None:
        self._store = store
        self._clock = clock

    def record(self, identity: ParticipantIdentity | None, result: ScoredResult) -> dict[str, Any]:
        if identity is None:
            raise AuthenticationMissing("User not authenticated")

        completed_at = isoformat_utc(self._clock())
        response = {
            "userId": identity.user_id,
            "userName": identity.name,
            "userCompany": identity.company,
            "userEmail": identity.email or "",
            **result.to_record(),
            "completedAt": completed_at,
        }
        profile_update: dict[str, Any] = {
            "name": identity.name,
            "company": identity.company,
            "consentAccepted": identity.consent,
            "lastQuizCompleted": completed_at,
            "lastScore": result.correct_count,
            "lastTotalQuestions": result.total_questions,
        }
        if identity.email:
            profile_update["email"] = identity.email

        try:
            # The response is written last, so a failed submit leaves no response behind.
            self._store.set_document(USERS_COLLECTION, identity.user_id, profile_update, merge=True)
            response_id = self._store.add_document(RESPONSES_COLLECTION, response)
        except Exception as exc:
            logger.error(
                "Error submitting quiz for %s",
                identity.user_id,
                exc_info=exc,
                extra={"source": "quiz_submit"},
            )
            raise PersistenceFailure("Error submitting quiz. Please try again.") from exc

        logger.info(
            "Stored result %s for %s: %d/%d",
            response_id,
            identity.user_id,
            result.correct_count,
            result.total_questions,
        )
        return {"id": response_id, **response}
