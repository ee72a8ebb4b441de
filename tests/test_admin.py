from __future__ import annotations

import pytest

from sprint_quiz.core.errors import AccessDenied, AuthenticationMissing
from sprint_quiz.core.services.admin_auth import AdminAuthenticator
from sprint_quiz.core.services.admin_dashboard import AdminDashboard, average_percentage
from sprint_quiz.core.services.quiz_config import QuizConfigService
from sprint_quiz.core.settings import parse_admin_emails
from sprint_quiz.storage.document_store import DocumentStore, DocumentStoreError


@pytest.fixture
def authenticator() -> AdminAuthenticator:
    return AdminAuthenticator(["Admin@Example.com"], "s3cret")


class TestAdminAuthenticator:
    def test_login_issues_token(self, authenticator):
        token = authenticator.login(" admin@example.com ", "s3cret")

        assert token
        assert authenticator.get_admin_email(token) == "admin@example.com"

    def test_wrong_password(self, authenticator):
        with pytest.raises(AuthenticationMissing):
            authenticator.login("admin@example.com", "guess")

    def test_valid_password_but_not_admin(self, authenticator):
        with pytest.raises(AccessDenied):
            authenticator.login("visitor@example.com", "s3cret")

    def test_not_configured(self):
        with pytest.raises(AuthenticationMissing):
            AdminAuthenticator([], None).login("admin@example.com", "anything")

    def test_logout_forgets_token(self, authenticator):
        token = authenticator.login("admin@example.com", "s3cret")
        authenticator.logout(token)
        assert authenticator.get_admin_email(token) is None

    def test_unknown_token(self, authenticator):
        assert authenticator.get_admin_email(None) is None
        assert authenticator.get_admin_email("forged") is None

    def test_is_admin_email(self, authenticator):
        assert authenticator.is_admin_email("ADMIN@example.com")
        assert not authenticator.is_admin_email("")

    def test_parse_admin_emails(self):
        assert parse_admin_emails(" A@x.io, ,b@y.io ") == ("a@x.io", "b@y.io")


class TestAdminDashboard:
    def _store(self) -> DocumentStore:
        return DocumentStore(
            {
                "users": {"u1": {"name": "Ada"}, "u2": {"name": "Grace"}},
                "quizResponses": {
                    "r1": {"userId": "u1", "percentage": 80, "completedAt": "2025-10-20T09:00:00.000Z"},
                    "r2": {"userId": "u2", "percentage": 67, "completedAt": "2025-10-21T09:00:00.000Z"},
                },
                "feedback": {
                    "f1": {"interestedInMore": "yes", "submittedAt": "2025-10-20T10:00:00.000Z"},
                    "f2": {"interestedInMore": "no", "submittedAt": "2025-10-22T10:00:00.000Z"},
                    "f3": {"interestedInMore": None, "questions": "Pricing?", "submittedAt": "2025-10-19T10:00:00.000Z"},
                },
                "config": {"quiz": {"questionCount": 30}},
            }
        )

    def test_stats(self):
        store = self._store()
        snapshot = AdminDashboard(store, QuizConfigService(store)).load()

        assert snapshot.stats.participant_count == 2
        assert snapshot.stats.response_count == 2
        assert snapshot.stats.average_percentage == 74
        assert snapshot.stats.feedback_count == 3
        assert snapshot.stats.interested_count == 1
        assert snapshot.question_count == 30

    def test_tables_are_newest_first_with_ids(self):
        store = self._store()
        snapshot = AdminDashboard(store, QuizConfigService(store)).load()

        assert [r["id"] for r in snapshot.responses] == ["r2", "r1"]
        assert [f["id"] for f in snapshot.feedback] == ["f2", "f1", "f3"]
        assert {u["id"] for u in snapshot.users} == {"u1", "u2"}

    def test_empty_store(self, store):
        snapshot = AdminDashboard(store, QuizConfigService(store)).load()

        assert snapshot.stats.average_percentage == 0
        assert snapshot.question_count == 100
        assert snapshot.responses == []

    def test_store_errors_propagate(self, broken_store):
        with pytest.raises(DocumentStoreError):
            AdminDashboard(broken_store, QuizConfigService(broken_store)).load()

    def test_average_ignores_non_numbers(self):
        assert average_percentage([{"percentage": 50}, {"percentage": "n/a"}]) == 25
        assert average_percentage([{"percentage": 33}, {"percentage": 34}]) == 34
