"""Service for the administrator-controlled quiz configuration."""

from __future__ import annotations

import logging

from sprint_quiz.constants.quiz_constants import (
    CONFIG_COLLECTION,
    DEFAULT_QUESTION_COUNT,
    MAX_QUESTION_COUNT,
    MIN_QUESTION_COUNT,
    QUIZ_CONFIG_DOCUMENT,
)
from sprint_quiz.core.errors import ConfigUnavailable, InvalidConfigValue, PersistenceFailure
from sprint_quiz.storage.document_store import DocumentStore
from sprint_quiz.utils.time_utils import Clock, isoformat_utc, utc_now

logger = logging.getLogger(__name__)


class QuizConfigService:
    """Reads and writes ``config/quiz``."""

    def __init__(self, store: DocumentStore, clock: Clock = utc_now) -> None:
        self._store = store
        self._clock = clock

    def load_question_count(self) -> int:
        """Return the configured question count, or the default when unusable. Never raises."""
        try:
            return self._read_question_count()
        except ConfigUnavailable as exc:
            logger.warning(
                "Using default question count %d: %s",
                DEFAULT_QUESTION_COUNT,
                exc,
                extra={"config_error": repr(exc.__cause__) if exc.__cause__ else None},
            )
            return DEFAULT_QUESTION_COUNT

    def save_question_count(self, question_count: int) -> int:
        validate_question_count(question_count)
        try:
            self._store.set_document(
                CONFIG_COLLECTION,
                QUIZ_CONFIG_DOCUMENT,
                {
                    "questionCount": question_count,
                    "updatedAt": isoformat_utc(self._clock()),
                },
            )
        except Exception as exc:
            raise PersistenceFailure("Failed to save configuration") from exc
        logger.info("Question count set to %d", question_count)
        return question_count

    def _read_question_count(self) -> int:
        try:
            document = self._store.get_document(CONFIG_COLLECTION, QUIZ_CONFIG_DOCUMENT)
        except Exception as exc:
            raise ConfigUnavailable("configuration could not be read") from exc
        if document is None:
            raise ConfigUnavailable("no configuration stored")
        value = document.get("questionCount")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigUnavailable(f"questionCount is not a number: {value!r}")
        if value <= 0 or int(value) != value:
            raise ConfigUnavailable(f"questionCount is not a positive whole number: {value!r}")
        return int(value)


def validate_question_count(question_count: int) -> None:
    if isinstance(question_count, bool) or not isinstance(question_count, int):
        raise InvalidConfigValue("Question count must be a whole number")
    if not MIN_QUESTION_COUNT <= question_count <= MAX_QUESTION_COUNT:
        raise InvalidConfigValue(
            f"Question count must be between {MIN_QUESTION_COUNT} and {MAX_QUESTION_COUNT}"
        )
