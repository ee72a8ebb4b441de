"""Application entry point for the Knowledge Sprint quiz server."""

from __future__ import annotations

from sprint_quiz.constants.about import APP_NAME, APP_VERSION
from sprint_quiz.core.quiz_manager import QuizManager
from sprint_quiz.core.settings import load_settings
from sprint_quiz.server.api_server import run_api_server
from sprint_quiz.storage.document_store import JsonDocumentStore
from sprint_quiz.utils.logging_config import configure_logging


def main() -> None:
    """Load settings, open the document store, and serve the API."""
    settings = load_settings()
    logger = configure_logging(settings.log_level)
    logger.info("Starting %s %s", APP_NAME, APP_VERSION)

    store = JsonDocumentStore(settings.data_file)
    logger.info("Using document store at %s", settings.data_file)
    if not settings.admin_enabled:
        logger.warning("Admin access disabled: set SPRINT_QUIZ_ADMIN_EMAILS and SPRINT_QUIZ_ADMIN_PASSWORD")

    quiz_manager = QuizManager(
        store,
        admin_emails=settings.admin_emails,
        admin_password=settings.admin_password,
    )
    logger.info("Participant API available at http://%s:%d/", settings.host, settings.port)
    run_api_server(
        quiz_manager=quiz_manager,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    main()
