"""Business logic for running participant quiz sessions behind the API."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
import logging
from threading import Lock
from typing import Any, Callable, Iterable, TypeVar
from uuid import uuid4

from sprint_quiz.constants.network_constants import (
    MAX_ACTIVE_FLASH_CARD_DECKS,
    MAX_ACTIVE_PARTICIPANTS,
    SESSION_IDLE_TIMEOUT_SECONDS,
)
from sprint_quiz.constants.quiz_constants import USE_ALL_QUESTIONS
from sprint_quiz.core.errors import AuthenticationMissing, InvalidTransition
from sprint_quiz.core.models import ParticipantIdentity, ScoredResult
from sprint_quiz.core.services import scoring
from sprint_quiz.core.services.admin_auth import AdminAuthenticator
from sprint_quiz.core.services.admin_dashboard import AdminDashboard, DashboardSnapshot
from sprint_quiz.core.services.feedback_service import FeedbackService
from sprint_quiz.core.services.flag_service import FlagService
from sprint_quiz.core.services.flash_cards import STUDY_MODE_ALL, FlashCardDeck
from sprint_quiz.core.services.participant_directory import ParticipantDirectory
from sprint_quiz.core.services.question_catalog import QuestionCatalog
from sprint_quiz.core.services.quiz_assembler import QuizAssembler
from sprint_quiz.core.services.quiz_config import QuizConfigService
from sprint_quiz.core.services.quiz_session import QuizSession, SessionPhase
from sprint_quiz.core.services.result_recorder import ResultRecorder
from sprint_quiz.core.services.session_registry import SessionRegistry
from sprint_quiz.core.shuffler import Shuffler
from sprint_quiz.storage.document_store import DocumentStore
from sprint_quiz.utils.time_utils import Clock, utc_now

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True)
class ParticipantState:
    """Everything the server keeps in memory for one signed-in participant."""

    identity: ParticipantIdentity
    use_all_questions: bool = False
    session: QuizSession | None = None
    flagged: set[str] = field(default_factory=set)
    result: ScoredResult | None = None
    stored_result: dict[str, Any] | None = None


class QuizManager:
    """Facade for quiz services: Catalog, Assembler, Session, Scoring and the stores."""

    def __init__(
        self,
        store: DocumentStore,
        admin_emails: Iterable[str] = (),
        admin_password: str | None = None,
        shuffler: Shuffler | None = None,
        clock: Clock = utc_now,
        max_participants: int = MAX_ACTIVE_PARTICIPANTS,
        max_flash_card_decks: int = MAX_ACTIVE_FLASH_CARD_DECKS,
        idle_timeout: timedelta = timedelta(seconds=SESSION_IDLE_TIMEOUT_SECONDS),
    ) -> None:
        self._lock = Lock()
        self._shuffler = shuffler or Shuffler()

        # Services
        self._catalog = QuestionCatalog(store)
        self._assembler = QuizAssembler(self._shuffler)
        self._config = QuizConfigService(store, clock=clock)
        self._participants = ParticipantDirectory(store, clock=clock)
        self._recorder = ResultRecorder(store, clock=clock)
        self._feedback = FeedbackService(store, clock=clock)
        self._flags = FlagService(store, clock=clock)
        self._admin_auth = AdminAuthenticator(admin_emails, admin_password)
        self._dashboard = AdminDashboard(store, self._config)

        self._states: SessionRegistry[ParticipantState] = SessionRegistry(
            "participant", max_participants, idle_timeout, clock=clock
        )
        self._decks: SessionRegistry[FlashCardDeck] = SessionRegistry(
            "flash card", max_flash_card_decks, idle_timeout, clock=clock
        )

    # --- Participants ---

    def register_participant(
        self,
        name: str,
        company: str,
        email: str | None = None,
        consent: bool = False,
        use_all_questions: bool = False,
    ) -> ParticipantIdentity:
        """Sign the participant in and assemble their quiz."""
        with self._lock:
            identity = self._participants.sign_in(name, company, email=email, consent=consent)
            state = ParticipantState(identity=identity, use_all_questions=use_all_questions)
            self._start_quiz(state)
            self._states.add(identity.user_id, state)
            return identity

    def read_participant(self, user_id: str | None, reader: Callable[[ParticipantState], T]) -> T:
        """Run ``reader`` against the participant's state with the lock held.

        ``reader`` must not call back into the manager.
        """
        with self._lock:
            return reader(self._require_state(user_id))

    def active_participant_count(self) -> int:
        with self._lock:
            self._states.prune()
            return len(self._states)

    def restart_quiz(self, user_id: str | None) -> QuizSession:
        with self._lock:
            state = self._require_state(user_id)
            return self._start_quiz(state)

    # --- Quiz Session Delegation ---

    def select_answer(self, user_id: str | None, question_id: str, answer: str) -> bool:
        with self._lock:
            return self._require_session(user_id).record_selection(question_id, answer)

    def move_to_next_question(self, user_id: str | None) -> SessionPhase:
        with self._lock:
            return self._require_session(user_id).navigate_next()

    def move_to_previous_question(self, user_id: str | None) -> SessionPhase:
        with self._lock:
            return self._require_session(user_id).navigate_previous()

    def submit_quiz(self, user_id: str | None) -> ScoredResult:
        """Score the quiz and persist the result.

        On a persistence failure the session stays ready to submit with every
        selection intact, so the participant can simply try again.
        """
        with self._lock:
            state = self._require_state(user_id)
            session = self._require_session(user_id)
            if session.phase is SessionPhase.REVEAL_LOCKED and session.is_last_question():
                session.navigate_next()
            if session.phase is not SessionPhase.READY_TO_SUBMIT:
                raise InvalidTransition("Answer the last question before submitting.")
            if not session.can_submit():
                raise InvalidTransition("Every question needs an answer before submitting.")

            result = scoring.score(session.quiz, session.selection_snapshot())
            state.stored_result = self._recorder.record(state.identity, result)
            session.mark_submitted()
            state.result = result
            return result

    # --- Flags & Feedback ---

    def toggle_flag(self, user_id: str | None, question_id: str) -> bool:
        with self._lock:
            state = self._require_state(user_id)
            session = self._require_session(user_id)
            try:
                question = session.quiz.get(question_id).question
            except KeyError as exc:
                raise ValueError(f"Question {question_id} is not part of this quiz.") from exc
            flagged = self._flags.toggle(state.identity, question)
            if flagged:
                state.flagged.add(question_id)
            else:
                state.flagged.discard(question_id)
            return flagged

    def submit_feedback(
        self,
        user_id: str | None,
        interested: str | None = None,
        questions: str = "",
    ) -> dict[str, Any]:
        with self._lock:
            state = self._require_state(user_id)
            return self._feedback.submit(state.identity, interested=interested, questions=questions)

    # --- Flash cards ---

    def start_flash_cards(
        self,
        deck_id: str | None = None,
        study_mode: str = STUDY_MODE_ALL,
        competency: str | None = None,
    ) -> str:
        """Open (or replace) a study deck and return its id. No sign-in needed."""
        with self._lock:
            deck = self._build_deck(study_mode, competency)
            deck_id = deck_id if deck_id and deck_id in self._decks else uuid4().hex
            self._decks.add(deck_id, deck)
            return deck_id

    def flip_flash_card(self, deck_id: str | None) -> bool:
        with self._lock:
            return self._require_deck(deck_id).flip()

    def next_flash_card(self, deck_id: str | None) -> None:
        with self._lock:
            self._require_deck(deck_id).next_card()

    def previous_flash_card(self, deck_id: str | None) -> None:
        with self._lock:
            self._require_deck(deck_id).previous_card()

    def reshuffle_flash_cards(self, deck_id: str | None) -> None:
        with self._lock:
            self._require_deck(deck_id).reshuffle()

    def read_flash_cards(self, deck_id: str | None, reader: Callable[[FlashCardDeck], T]) -> T:
        """Run ``reader`` against the deck with the lock held."""
        with self._lock:
            return reader(self._require_deck(deck_id))

    # --- Admin ---

    def admin_login(self, email: str, password: str) -> str:
        with self._lock:
            return self._admin_auth.login(email, password)

    def admin_logout(self, token: str | None) -> None:
        with self._lock:
            self._admin_auth.logout(token)

    def get_admin_email(self, token: str | None) -> str | None:
        with self._lock:
            return self._admin_auth.get_admin_email(token)

    def get_dashboard(self, token: str | None) -> DashboardSnapshot:
        with self._lock:
            self._require_admin(token)
            return self._dashboard.load()

    def get_question_count(self) -> int:
        with self._lock:
            return self._config.load_question_count()

    def update_question_count(self, token: str | None, question_count: int) -> int:
        with self._lock:
            self._require_admin(token)
            return self._config.save_question_count(question_count)

    # --- Internal helpers (lock held) ---

    def _start_quiz(self, state: ParticipantState) -> QuizSession:
        desired = USE_ALL_QUESTIONS if state.use_all_questions else self._config.load_question_count()
        catalog = self._catalog.load()
        quiz = self._assembler.assemble(catalog, desired)
        state.session = QuizSession(quiz)
        state.result = None
        state.stored_result = None
        state.flagged = self._flags.load_flags(state.identity.user_id)
        logger.info(
            "Assembled %d questions for %s (requested %s)",
            len(quiz),
            state.identity.user_id,
            desired,
        )
        return state.session

    def _build_deck(self, study_mode: str, competency: str | None) -> FlashCardDeck:
        deck = FlashCardDeck(self._catalog.load(), shuffler=self._shuffler)
        deck.load(study_mode=study_mode, competency=competency)
        return deck

    def _require_state(self, user_id: str | None) -> ParticipantState:
        state = self._states.get(user_id)
        if state is None:
            raise AuthenticationMissing("Please sign in first")
        return state

    def _require_session(self, user_id: str | None) -> QuizSession:
        state = self._require_state(user_id)
        if state.session is None:
            raise InvalidTransition("No quiz has been started.")
        return state.session

    def _require_deck(self, deck_id: str | None) -> FlashCardDeck:
        deck = self._decks.get(deck_id)
        if deck is None:
            raise InvalidTransition("Open the flash cards first.")
        return deck

    def _require_admin(self, token: str | None) -> str:
        email = self._admin_auth.get_admin_email(token)
        if email is None:
            raise AuthenticationMissing("Admin sign-in required")
        return email
