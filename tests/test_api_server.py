from __future__ import annotations

import logging

from fastapi.testclient import TestClient
import pytest

from sprint_quiz.constants.network_constants import ADMIN_COOKIE, FLASH_CARD_COOKIE, PARTICIPANT_COOKIE
from sprint_quiz.core.quiz_manager import QuizManager
from sprint_quiz.core.shuffler import Shuffler
from sprint_quiz.server.api_server import create_api_app

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "s3cret"

REGISTRATION = {"name": "Ada Lovelace", "company": "Analytical Engines", "consent": True}


@pytest.fixture
def client(seeded_store, clock) -> TestClient:
    manager = QuizManager(
        seeded_store,
        admin_emails=[ADMIN_EMAIL],
        admin_password=ADMIN_PASSWORD,
        shuffler=Shuffler(seed=5),
        clock=clock,
    )
    return TestClient(create_api_app(manager))


@pytest.fixture
def participant(client) -> TestClient:
    response = client.post("/participants", json=REGISTRATION)
    assert response.status_code == 201
    return client


def _answer_current(client: TestClient) -> dict:
    question = client.get("/quiz").json()["question"]
    response = client.post(
        "/quiz/select",
        json={"question_id": question["id"], "answer": question["answer_choices"][0]},
    )
    assert response.status_code == 200
    return response.json()


def _answer_everything(client: TestClient) -> dict:
    view = client.get("/quiz").json()
    for _ in range(view["total_questions"]):
        _answer_current(client)
        view = client.post("/quiz/next").json()
    return view


class TestStatus:
    def test_status(self, client):
        body = client.get("/").json()
        assert body["app"] == "Knowledge Sprint"
        assert body["question_count"] == 3


class TestParticipantApi:
    def test_register_sets_cookie_and_returns_quiz(self, client):
        response = client.post("/participants", json=REGISTRATION)

        assert response.status_code == 201
        assert PARTICIPANT_COOKIE in response.cookies
        body = response.json()
        assert body["first_name"] == "Ada"
        assert body["quiz"]["total_questions"] == 3
        assert body["quiz"]["phase"] == "awaiting_selection"
        assert body["quiz"]["question"]["feedback"] is None

    def test_registration_requires_consent(self, client):
        response = client.post("/participants", json={**REGISTRATION, "consent": False})
        assert response.status_code == 422

    def test_quiz_requires_sign_in(self, client):
        assert client.get("/quiz").status_code == 401

    def test_select_reveals_feedback(self, participant):
        view = _answer_current(participant)

        question = view["question"]
        assert view["phase"] == "reveal_locked"
        assert question["locked"] is True
        assert question["selected"] == [question["answer_choices"][0]]
        assert question["feedback"]["correct_answers"]
        assert view["can_go_forward"] is True

    def test_prompt_is_rendered_as_html(self, participant):
        question = participant.get("/quiz").json()["question"]
        assert question["prompt_html"].startswith("<p>")

    def test_wrong_question_is_a_conflict(self, participant):
        current = participant.get("/quiz").json()["question"]["id"]
        other = next(q for q in ("q1", "q2", "q3", "q4", "q5") if q != current)

        response = participant.post("/quiz/select", json={"question_id": other, "answer": "x"})

        assert response.status_code == 409

    def test_invalid_answer(self, participant):
        current = participant.get("/quiz").json()["question"]["id"]
        response = participant.post("/quiz/select", json={"question_id": current, "answer": "not a choice"})
        assert response.status_code == 422

    def test_next_requires_answer(self, participant):
        assert participant.post("/quiz/next").status_code == 409

    def test_previous(self, participant):
        _answer_current(participant)
        participant.post("/quiz/next")

        view = participant.post("/quiz/previous").json()

        assert view["question_index"] == 0
        assert view["phase"] == "reveal_locked"

    def test_submit_and_result(self, participant):
        assert participant.get("/quiz/result").status_code == 404
        view = _answer_everything(participant)
        assert view["phase"] == "ready_to_submit"
        assert view["can_submit"] is True

        response = participant.post("/quiz/submit")

        assert response.status_code == 201
        result = response.json()["result"]
        assert result["totalQuestions"] == 3
        assert len(result["questionResults"]) == 3
        assert result["completedAt"] == "2025-10-20T09:30:00.000Z"
        assert participant.get("/quiz/result").json()["first_name"] == "Ada"

    def test_submit_twice_is_a_conflict(self, participant):
        _answer_everything(participant)
        participant.post("/quiz/submit")
        assert participant.post("/quiz/submit").status_code == 409

    def test_restart(self, participant):
        _answer_current(participant)
        view = participant.post("/quiz/restart").json()
        assert view["phase"] == "awaiting_selection"
        assert view["answered_count"] == 0

    def test_flag_toggle(self, participant):
        question_id = participant.get("/quiz").json()["question"]["id"]

        assert participant.post("/quiz/flag", json={"question_id": question_id}).json()["flagged"] is True
        assert participant.get("/quiz").json()["question"]["flagged"] is True
        assert participant.post("/quiz/flag", json={"question_id": question_id}).json()["flagged"] is False

    def test_feedback(self, participant):
        response = participant.post("/feedback", json={"interested": "yes", "questions": "Demo?"})
        assert response.status_code == 201
        assert response.json()["submitted_at"] == "2025-10-20T09:30:00.000Z"

    def test_empty_feedback(self, participant):
        assert participant.post("/feedback", json={"questions": "  "}).status_code == 422

    def test_feedback_rejects_unknown_interest(self, participant):
        assert participant.post("/feedback", json={"interested": "maybe"}).status_code == 422


class TestFlashCardApi:
    def test_open_sets_cookie_and_hides_answer(self, client):
        response = client.post("/flashcards", json={})

        assert response.status_code == 200
        assert FLASH_CARD_COOKIE in response.cookies
        body = response.json()
        assert body["total_cards"] == 5
        assert body["card_index"] == 0
        assert body["competencies"] == ["Art", "Geography", "Math", "Science"]
        assert body["flipped"] is False
        assert body["card"]["answer"] is None

    def test_open_does_not_need_sign_in(self, client):
        assert client.post("/flashcards", json={"study_mode": "all"}).status_code == 200
        assert client.get("/flashcards").json()["total_cards"] == 5

    def test_flip_reveals_answer(self, client):
        client.post("/flashcards", json={"study_mode": "by-competency", "competency": "Art"})

        body = client.post("/flashcards/flip").json()

        assert body["total_cards"] == 1
        assert body["flipped"] is True
        assert body["card"]["id"] == "q3"
        assert body["card"]["answer"] == "Red, Blue, Yellow"
        assert client.post("/flashcards/flip").json()["card"]["answer"] is None

    def test_next_and_previous_stay_in_range(self, client):
        client.post("/flashcards", json={})
        client.post("/flashcards/flip")

        body = client.post("/flashcards/next").json()
        assert (body["card_index"], body["flipped"]) == (1, False)

        for _ in range(6):
            body = client.post("/flashcards/next").json()
        assert body["card_index"] == 4

        for _ in range(6):
            body = client.post("/flashcards/previous").json()
        assert body["card_index"] == 0

    def test_reshuffle_returns_to_first_card(self, client):
        client.post("/flashcards", json={})
        client.post("/flashcards/next")
        client.post("/flashcards/flip")

        body = client.post("/flashcards/reshuffle").json()

        assert (body["card_index"], body["flipped"], body["total_cards"]) == (0, False, 5)

    def test_reopen_changes_study_mode(self, client):
        client.post("/flashcards", json={})
        body = client.post("/flashcards", json={"study_mode": "by-competency", "competency": "Science"}).json()

        assert body["total_cards"] == 2
        assert body["competency"] == "Science"

    def test_requires_an_open_deck(self, client):
        assert client.get("/flashcards").status_code == 409
        assert client.post("/flashcards/flip").status_code == 409

    def test_unknown_mode(self, client):
        assert client.post("/flashcards", json={"study_mode": "shuffle"}).status_code == 422


class TestClientErrors:
    def test_logs_report(self, client, caplog):
        with caplog.at_level(logging.ERROR):
            response = client.post(
                "/client-errors",
                json={"source": "QuizPage", "message": "boom", "errorName": "TypeError"},
                headers={"user-agent": "pytest-agent"},
            )

        assert response.json() == {"ok": True}
        record = next(r for r in caplog.records if "[ClientError]" in r.getMessage())
        assert record.client_user_agent == "pytest-agent"
        assert record.client_error["errorName"] == "TypeError"

    def test_requires_source(self, client):
        assert client.post("/client-errors", json={"message": "boom"}).status_code == 422


class TestAdminApi:
    def test_dashboard_requires_login(self, client):
        assert client.get("/admin/dashboard").status_code == 401

    def test_dashboard_counts_active_participants(self, participant):
        participant.post("/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
        assert participant.get("/admin/dashboard").json()["active_participants"] == 1

    def test_wrong_password(self, client):
        response = client.post("/admin/login", json={"email": ADMIN_EMAIL, "password": "nope"})
        assert response.status_code == 401

    def test_non_admin(self, client):
        response = client.post("/admin/login", json={"email": "visitor@example.com", "password": ADMIN_PASSWORD})
        assert response.status_code == 403

    def test_login_dashboard_and_config(self, client):
        login = client.post("/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
        assert login.status_code == 200
        assert ADMIN_COOKIE in login.cookies

        dashboard = client.get("/admin/dashboard").json()
        assert dashboard["question_count"] == 3
        assert dashboard["stats"]["participant_count"] == 0
        assert dashboard["active_participants"] == 0
        assert client.get("/admin/session").json() == {"email": ADMIN_EMAIL}

        assert client.put("/admin/config", json={"question_count": 0}).status_code == 422
        assert client.put("/admin/config", json={"question_count": 501}).status_code == 422
        saved = client.put("/admin/config", json={"question_count": 4})
        assert saved.json()["question_count"] == 4
        assert client.get("/").json()["question_count"] == 4

    def test_logout(self, client):
        client.post("/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
        client.post("/admin/logout")
        assert client.get("/admin/dashboard").status_code == 401
        assert client.get("/admin/session").status_code == 401

    def test_config_requires_admin(self, client):
        assert client.put("/admin/config", json={"question_count": 4}).status_code == 401
