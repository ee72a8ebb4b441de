"""Utilities for importing catalog questions from a human-friendly text file.

File format (repeat blocks separated by blank lines or '---'):

    ID: optional stable identifier (defaults to the block number)
    Q: Question text. Additional lines until the next marker are treated as
       part of the question.
    CORRECT: Correct answer   (repeat the line for multi-select questions)
    WRONG: Distractor         (repeatable)
    EXPLANATION: Optional explanation shown after answering
    REFERENCE: Optional link or citation
    COMPETENCY: Optional competency label (used by flash-card study mode)
    IMAGE: Optional image URL

Example:

    Q: Which workspace is central to building AI workflows in SitecoreAI?
    CORRECT: Agentic Studio
    WRONG: Content Studio
    WRONG: Experience Editor
    WRONG: Marketing Control Panel
    COMPETENCY: AI

Answer sets are validated here, at authoring time. Catalog loading trusts the
stored records and does not repeat these checks.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from sprint_quiz.core.models import Question


class CatalogImportError(Exception):
    """Raised when a catalog definition cannot be parsed."""


@dataclass(slots=True)
class ImportedCatalog:
    """Container for imported catalog metadata and questions."""

    source_path: Path
    questions: list[Question]


_SINGLE_VALUE_FIELDS = ("ID", "EXPLANATION", "REFERENCE", "COMPETENCY", "IMAGE")
_MULTI_LINE_SECTIONS = ("Q", "EXPLANATION")


def load_catalog_from_file(file_path: Path) -> ImportedCatalog:
    text = file_path.read_text(encoding="utf-8")
    questions = parse_catalog_text(text)
    if not questions:
        raise CatalogImportError("Catalog file did not contain any questions.")
    return ImportedCatalog(source_path=file_path, questions=questions)


def parse_catalog_text(text: str) -> list[Question]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            # Blank line encountered after content - finalize current block
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())

    questions = [_parse_block(block, number) for number, block in enumerate(blocks, start=1) if block]
    seen_ids: set[str] = set()
    for question in questions:
        if question.id in seen_ids:
            raise CatalogImportError(f"Duplicate question id '{question.id}'.")
        seen_ids.add(question.id)
    return questions


def _parse_block(block: str, number: int) -> Question:
    question_lines: list[str] = []
    correct: list[str] = []
    wrong: list[str] = []
    fields: dict[str, str] = {}
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        marker, separator, value = line.partition(":")
        marker = marker.strip().upper()
        value = value.strip()

        if marker == "Q" and separator:
            question_lines = [value]
            current_section = "Q"
            continue
        if marker == "CORRECT" and separator:
            correct.append(_require_value(marker, value))
            current_section = None
            continue
        if marker == "WRONG" and separator:
            wrong.append(_require_value(marker, value))
            current_section = None
            continue
        if marker in _SINGLE_VALUE_FIELDS and separator:
            if marker in fields:
                raise CatalogImportError(f"{marker} may only appear once per question.")
            fields[marker] = _require_value(marker, value)
            current_section = marker
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section in _MULTI_LINE_SECTIONS:
            fields[current_section] = fields[current_section] + f"\n{line}"
        else:
            raise CatalogImportError(
                f"Encountered text outside of a known section: '{line}'."
            )

    prompt = "\n".join(question_lines).strip()
    if not prompt:
        raise CatalogImportError("Question text missing (Q: ...)")
    if not correct:
        raise CatalogImportError(f"Question '{prompt[:40]}' needs at least one CORRECT answer.")
    if len(set(correct)) != len(correct):
        raise CatalogImportError(f"Question '{prompt[:40]}' repeats a CORRECT answer.")
    overlap = set(correct).intersection(wrong)
    if overlap:
        raise CatalogImportError(
            f"Answers listed as both CORRECT and WRONG: {', '.join(sorted(overlap))}."
        )
    is_multi_select = len(correct) > 1
    if not is_multi_select and not wrong:
        raise CatalogImportError(f"Question '{prompt[:40]}' needs at least one WRONG answer.")

    return Question(
        id=fields.get("ID", str(number)),
        prompt=prompt,
        correct_answer=tuple(correct) if is_multi_select else correct[0],
        incorrect_answers=tuple(wrong),
        is_multi_select=is_multi_select,
        explanation=fields.get("EXPLANATION"),
        reference=fields.get("REFERENCE"),
        competency=fields.get("COMPETENCY"),
        image_url=fields.get("IMAGE"),
    )


def _require_value(marker: str, value: str) -> str:
    if not value:
        raise CatalogImportError(f"{marker} must include a value.")
    return value
