"""Request and response payloads for the HTTP API."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from sprint_quiz.constants.quiz_constants import MAX_QUESTION_COUNT, MIN_QUESTION_COUNT
from sprint_quiz.core.services.flash_cards import STUDY_MODE_ALL


class RegistrationPayload(BaseModel):
    """Registration form submitted before the quiz starts."""

    name: str
    company: str
    email: str | None = None
    consent: bool = False
    use_all_questions: bool = False


class SelectionPayload(BaseModel):
    question_id: str
    answer: str


class FlagPayload(BaseModel):
    question_id: str


class FeedbackPayload(BaseModel):
    interested: Literal["yes", "no"] | None = None
    questions: str = ""


class AdminLoginPayload(BaseModel):
    email: str
    password: str


class QuizConfigPayload(BaseModel):
    question_count: int = Field(..., description=f"Between {MIN_QUESTION_COUNT} and {MAX_QUESTION_COUNT}.")


class ClientErrorPayload(BaseModel):
    """Error report sent by a browser client."""

    source: str
    message: str | None = None
    error_name: str | None = Field(default=None, alias="errorName")
    stack: str | None = None
    url: str | None = None
    user_agent: str | None = Field(default=None, alias="userAgent")
    timestamp: str | None = None
    extra: dict[str, Any] | None = None

    model_config = {"populate_by_name": True}


class FlashCardPayload(BaseModel):
    study_mode: str = STUDY_MODE_ALL
    competency: str | None = None
