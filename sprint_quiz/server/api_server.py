"""FastAPI server that exposes the participant and admin endpoints."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import asdict
import logging
from typing import Any, Iterator

from fastapi import Depends, FastAPI, HTTPException, Request, Response
import uvicorn

from sprint_quiz.constants.about import APP_NAME, APP_VERSION
from sprint_quiz.constants.network_constants import (
    ADMIN_COOKIE,
    COOKIE_MAX_AGE_SECONDS,
    DEFAULT_HOST,
    DEFAULT_PORT,
    FLASH_CARD_COOKIE,
    PARTICIPANT_COOKIE,
)
from sprint_quiz.core.errors import (
    AccessDenied,
    AuthenticationMissing,
    InvalidTransition,
    PersistenceFailure,
)
from sprint_quiz.core.markdown_renderer import renderer
from sprint_quiz.core.quiz_manager import ParticipantState, QuizManager
from sprint_quiz.core.services import scoring
from sprint_quiz.core.services.flash_cards import FlashCardDeck
from sprint_quiz.core.services.quiz_session import QuizSession, SessionPhase
from sprint_quiz.server.schemas import (
    AdminLoginPayload,
    ClientErrorPayload,
    FeedbackPayload,
    FlashCardPayload,
    FlagPayload,
    QuizConfigPayload,
    RegistrationPayload,
    SelectionPayload,
)
from sprint_quiz.storage.document_store import DocumentStoreError

logger = logging.getLogger(__name__)


@contextmanager
def _http_errors() -> Iterator[None]:
    """Translate quiz domain errors into HTTP responses."""
    try:
        yield
    except AuthenticationMissing as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except AccessDenied as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    except InvalidTransition as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except (PersistenceFailure, DocumentStoreError) as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _set_cookie(response: Response, key: str, value: str) -> None:
    response.set_cookie(
        key=key,
        value=value,
        max_age=COOKIE_MAX_AGE_SECONDS,
        samesite="lax",
        httponly=True,
    )


def _serialize_session(state: ParticipantState) -> dict[str, object]:
    session = state.session
    if session is None or session.quiz.is_empty:
        # Clients show a loading/empty state for a quiz without questions.
        return {"empty": True, "phase": None, "question": None, "total_questions": 0}

    phase = session.phase
    index = session.get_current_index()
    total = len(session.quiz)
    return {
        "empty": False,
        "phase": phase.name.lower(),
        "question_index": index,
        "total_questions": total,
        "answered_count": session.answered_count(),
        "progress_percent": round((index + 1) / total * 100),
        "next_action": session.next_action,
        "can_go_back": phase is SessionPhase.AWAITING_SELECTION and index > 0,
        "can_go_forward": phase is SessionPhase.REVEAL_LOCKED,
        "can_submit": session.can_submit(),
        "question": _serialize_current_question(session, state),
    }


def _serialize_current_question(session: QuizSession, state: ParticipantState) -> dict[str, object] | None:
    item = session.get_current_question()
    if item is None:
        return None
    question = item.question
    selection = session.get_selection(item.id)
    if isinstance(selection, str):
        selected = [selection]
    else:
        selected = [choice for choice in item.answer_choices if selection and choice in selection]
    locked = session.is_locked(item.id)

    payload: dict[str, object] = {
        "id": question.id,
        "prompt": question.prompt,
        "prompt_html": renderer.render_fragment(question.prompt),
        "image_url": question.image_url,
        "is_multi_select": question.is_multi_select,
        "answer_choices": list(item.answer_choices),
        "selected": selected,
        "locked": locked,
        "flagged": question.id in state.flagged,
        "feedback": None,
    }
    if locked and selected:
        payload["feedback"] = {
            "is_correct": scoring.is_selection_correct(item, session.get_selection(item.id)),
            "correct_answers": list(question.correct_answers),
            "explanation": question.explanation,
            "explanation_html": renderer.render_fragment(question.explanation),
            "reference": question.reference,
            "competency": question.competency,
        }
    return payload


def _serialize_result(state: ParticipantState) -> dict[str, object]:
    return {
        "first_name": state.identity.first_name,
        "company": state.identity.company,
        "result": state.stored_result,
    }


def _serialize_deck(deck: FlashCardDeck) -> dict[str, object]:
    card = deck.get_current_card()
    flipped = deck.is_flipped()
    payload: dict[str, object] = {
        "study_mode": deck.study_mode,
        "competency": deck.competency,
        "competencies": deck.competencies(),
        "card_index": deck.get_current_index(),
        "total_cards": len(deck),
        "flipped": flipped,
        "card": None,
    }
    if card is not None:
        # The back of the card stays hidden until it is flipped.
        payload["card"] = {
            "id": card.id,
            "prompt": card.prompt,
            "prompt_html": renderer.render_fragment(card.prompt),
            "image_url": card.image_url,
            "competency": card.competency,
            "answer": ", ".join(card.correct_answers) if flipped else None,
            "explanation": card.explanation if flipped else None,
            "explanation_html": renderer.render_fragment(card.explanation) if flipped else None,
            "reference": card.reference if flipped else None,
        }
    return payload


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def create_api_app(quiz_manager: QuizManager) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)

    @app.get("/")
    def get_status(manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        return {
            "app": APP_NAME,
            "version": APP_VERSION,
            "question_count": manager.get_question_count(),
        }

    # --- Participant flow ---

    @app.post("/participants", status_code=201)
    def register_participant(
        payload: RegistrationPayload,
        response: Response,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _http_errors():
            identity = manager.register_participant(
                payload.name,
                payload.company,
                email=payload.email,
                consent=payload.consent,
                use_all_questions=payload.use_all_questions,
            )
            quiz_view = manager.read_participant(identity.user_id, _serialize_session)
        _set_cookie(response, PARTICIPANT_COOKIE, identity.user_id)
        return {
            "user_id": identity.user_id,
            "first_name": identity.first_name,
            "company": identity.company,
            "quiz": quiz_view,
        }

    @app.get("/quiz")
    def get_quiz(request: Request, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        with _http_errors():
            return manager.read_participant(request.cookies.get(PARTICIPANT_COOKIE), _serialize_session)

    @app.post("/quiz/restart")
    def restart_quiz(request: Request, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        user_id = request.cookies.get(PARTICIPANT_COOKIE)
        with _http_errors():
            manager.restart_quiz(user_id)
            return manager.read_participant(user_id, _serialize_session)

    @app.post("/quiz/select")
    def select_answer(
        payload: SelectionPayload,
        request: Request,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        user_id = request.cookies.get(PARTICIPANT_COOKIE)
        with _http_errors():
            manager.select_answer(user_id, payload.question_id, payload.answer)
            return manager.read_participant(user_id, _serialize_session)

    @app.post("/quiz/next")
    def next_question(request: Request, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        user_id = request.cookies.get(PARTICIPANT_COOKIE)
        with _http_errors():
            manager.move_to_next_question(user_id)
            return manager.read_participant(user_id, _serialize_session)

    @app.post("/quiz/previous")
    def previous_question(
        request: Request,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        user_id = request.cookies.get(PARTICIPANT_COOKIE)
        with _http_errors():
            manager.move_to_previous_question(user_id)
            return manager.read_participant(user_id, _serialize_session)

    @app.post("/quiz/submit", status_code=201)
    def submit_quiz(request: Request, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        user_id = request.cookies.get(PARTICIPANT_COOKIE)
        with _http_errors():
            manager.submit_quiz(user_id)
            return manager.read_participant(user_id, _serialize_result)

    @app.get("/quiz/result")
    def get_result(request: Request, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        with _http_errors():
            body = manager.read_participant(request.cookies.get(PARTICIPANT_COOKIE), _serialize_result)
        if body["result"] is None:
            raise HTTPException(status_code=404, detail="The quiz has not been submitted yet.")
        return body

    @app.post("/quiz/flag")
    def toggle_flag(
        payload: FlagPayload,
        request: Request,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _http_errors():
            flagged = manager.toggle_flag(request.cookies.get(PARTICIPANT_COOKIE), payload.question_id)
        return {"question_id": payload.question_id, "flagged": flagged}

    @app.post("/feedback", status_code=201)
    def submit_feedback(
        payload: FeedbackPayload,
        request: Request,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _http_errors():
            entry = manager.submit_feedback(
                request.cookies.get(PARTICIPANT_COOKIE),
                interested=payload.interested,
                questions=payload.questions,
            )
        return {"id": entry["id"], "submitted_at": entry["submittedAt"]}

    # --- Flash cards ---

    @app.post("/flashcards")
    def open_flash_cards(
        payload: FlashCardPayload,
        request: Request,
        response: Response,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _http_errors():
            deck_id = manager.start_flash_cards(
                request.cookies.get(FLASH_CARD_COOKIE),
                study_mode=payload.study_mode,
                competency=payload.competency,
            )
            view = manager.read_flash_cards(deck_id, _serialize_deck)
        _set_cookie(response, FLASH_CARD_COOKIE, deck_id)
        return view

    @app.get("/flashcards")
    def get_flash_cards(request: Request, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        with _http_errors():
            return manager.read_flash_cards(request.cookies.get(FLASH_CARD_COOKIE), _serialize_deck)

    @app.post("/flashcards/flip")
    def flip_flash_card(request: Request, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        deck_id = request.cookies.get(FLASH_CARD_COOKIE)
        with _http_errors():
            manager.flip_flash_card(deck_id)
            return manager.read_flash_cards(deck_id, _serialize_deck)

    @app.post("/flashcards/next")
    def next_flash_card(request: Request, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        deck_id = request.cookies.get(FLASH_CARD_COOKIE)
        with _http_errors():
            manager.next_flash_card(deck_id)
            return manager.read_flash_cards(deck_id, _serialize_deck)

    @app.post("/flashcards/previous")
    def previous_flash_card(
        request: Request,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        deck_id = request.cookies.get(FLASH_CARD_COOKIE)
        with _http_errors():
            manager.previous_flash_card(deck_id)
            return manager.read_flash_cards(deck_id, _serialize_deck)

    @app.post("/flashcards/reshuffle")
    def reshuffle_flash_cards(
        request: Request,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        deck_id = request.cookies.get(FLASH_CARD_COOKIE)
        with _http_errors():
            manager.reshuffle_flash_cards(deck_id)
            return manager.read_flash_cards(deck_id, _serialize_deck)

    # --- Client diagnostics ---

    @app.post("/client-errors")
    def log_client_error(payload: ClientErrorPayload, request: Request) -> dict[str, object]:
        report: dict[str, Any] = payload.model_dump(by_alias=True)
        logger.error(
            "[ClientError] %s: %s",
            payload.source,
            payload.message or "no message",
            extra={
                "client_error": report,
                "client_ip": request.headers.get("x-forwarded-for", "unknown"),
                "client_user_agent": request.headers.get("user-agent", "unknown"),
            },
        )
        return {"ok": True}

    # --- Admin ---

    @app.post("/admin/login")
    def admin_login(
        payload: AdminLoginPayload,
        response: Response,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _http_errors():
            token = manager.admin_login(payload.email, payload.password)
        _set_cookie(response, ADMIN_COOKIE, token)
        return {"email": payload.email.strip().lower()}

    @app.post("/admin/logout")
    def admin_logout(
        request: Request,
        response: Response,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        manager.admin_logout(request.cookies.get(ADMIN_COOKIE))
        response.delete_cookie(ADMIN_COOKIE)
        return {"ok": True}

    @app.get("/admin/session")
    def admin_session(request: Request, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        email = manager.get_admin_email(request.cookies.get(ADMIN_COOKIE))
        if email is None:
            raise HTTPException(status_code=401, detail="Admin sign-in required")
        return {"email": email}

    @app.get("/admin/dashboard")
    def admin_dashboard(request: Request, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        with _http_errors():
            snapshot = manager.get_dashboard(request.cookies.get(ADMIN_COOKIE))
        return {**asdict(snapshot), "active_participants": manager.active_participant_count()}

    @app.put("/admin/config")
    def update_config(
        payload: QuizConfigPayload,
        request: Request,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _http_errors():
            count = manager.update_question_count(request.cookies.get(ADMIN_COOKIE), payload.question_count)
        return {"question_count": count, "message": "Configuration saved successfully!"}

    return app


def run_api_server(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    log_level: str = "info",
) -> None:
    """Serve the FastAPI application until interrupted."""
    app = create_api_app(quiz_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level=log_level.lower())
    server = uvicorn.Server(config)
    server.run()
