"""Seed the questions collection of the document store.

Usage:
    python seed_questions.py [--file questions.txt] [--data-file path.json] [--force]

Without ``--file`` the built-in question bank is used. Single-select questions
with fewer than three distractors are padded from the shared term pool.
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from sprint_quiz.constants.quiz_constants import QUESTIONS_COLLECTION
from sprint_quiz.core.catalog_importer import load_catalog_from_file
from sprint_quiz.core.models import Question
from sprint_quiz.core.question_bank import local_questions, pad_incorrect_answers
from sprint_quiz.core.settings import load_settings
from sprint_quiz.core.shuffler import Shuffler
from sprint_quiz.storage.document_store import DocumentStore, JsonDocumentStore
from sprint_quiz.utils.logging_config import configure_logging

logger = logging.getLogger(__name__)


def prepare_questions(questions: Sequence[Question], shuffler: Shuffler | None = None) -> list[Question]:
    """Pad single-select distractors; multi-select questions are stored as authored."""
    shuffler = shuffler or Shuffler()
    prepared: list[Question] = []
    for question in questions:
        if not question.is_multi_select:
            question = replace(question, incorrect_answers=pad_incorrect_answers(question, shuffler=shuffler))
        prepared.append(question)
    return prepared


def seed_questions(
    store: DocumentStore,
    questions: Sequence[Question],
    force: bool = False,
    shuffler: Shuffler | None = None,
) -> int:
    """Write ``questions`` to the store. Returns how many were written.

    An already populated collection is left alone unless ``force`` is set.
    """
    existing = store.count(QUESTIONS_COLLECTION)
    if existing and not force:
        logger.info("Questions collection already has %d questions; skipping seed", existing)
        return 0

    prepared = prepare_questions(questions, shuffler=shuffler)
    for question in prepared:
        store.set_document(QUESTIONS_COLLECTION, question.id, question.to_record())
    logger.info("Seeded %d questions", len(prepared))
    return len(prepared)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the quiz question catalog")
    parser.add_argument("--file", type=Path, help="Catalog text file to import")
    parser.add_argument("--data-file", type=Path, help="Document store file (defaults to SPRINT_QUIZ_DATA_FILE)")
    parser.add_argument("--force", action="store_true", help="Write even when questions already exist")
    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging(settings.log_level)

    if args.file:
        questions = load_catalog_from_file(args.file).questions
        logger.info("Loaded %d questions from %s", len(questions), args.file)
    else:
        questions = local_questions()

    store = JsonDocumentStore(args.data_file or settings.data_file)
    seed_questions(store, questions, force=args.force)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
