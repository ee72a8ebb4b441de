"""Service for establishing participant identities."""

from __future__ import annotations

import logging
from uuid import uuid4

from sprint_quiz.constants.quiz_constants import USERS_COLLECTION
from sprint_quiz.core.errors import PersistenceFailure
from sprint_quiz.core.models import ParticipantIdentity
from sprint_quiz.storage.document_store import DocumentStore
from sprint_quiz.utils.time_utils import Clock, isoformat_utc, utc_now

logger = logging.getLogger(__name__)


class ParticipantDirectory:
    """Anonymous sign-in: issues a user id and stores the registration form."""

    def __init__(self, store: DocumentStore, clock: Clock = utc_now) -> None:
        self._store = store
        self._clock = clock

    def sign_in(
        self,
        name: str,
        company: str,
        email: str | None = None,
        consent: bool = False,
    ) -> ParticipantIdentity:
        name = (name or "").strip()
        company = (company or "").strip()
        email = (email or "").strip() or None
        if not name:
            raise ValueError("Name is required.")
        if not company:
            raise ValueError("Company is required.")
        if not consent:
            raise ValueError("Consent is required to take the quiz.")

        identity = ParticipantIdentity(
            user_id=uuid4().hex,
            name=name,
            company=company,
            email=email,
            consent=consent,
        )
        try:
            self._store.set_document(
                USERS_COLLECTION,
                identity.user_id,
                {
                    "name": identity.name,
                    "company": identity.company,
                    "email": identity.email or "",
                    "consentAccepted": identity.consent,
                    "createdAt": isoformat_utc(self._clock()),
                },
            )
        except Exception as exc:
            raise PersistenceFailure("Error submitting form. Please try again.") from exc
        logger.info("Participant %s signed in", identity.user_id)
        return identity
