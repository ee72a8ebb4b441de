"""Runtime settings read from the environment (and an optional .env file)."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path

from dotenv import load_dotenv

from sprint_quiz.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT

DEFAULT_DATA_FILE = "./data/sprint_quiz.json"


@dataclass(slots=True)
class Settings:
    """Deployment settings; everything has a usable default except admin access."""

    data_file: Path = field(default_factory=lambda: Path(DEFAULT_DATA_FILE))
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    admin_emails: tuple[str, ...] = ()
    admin_password: str | None = None

    @property
    def admin_enabled(self) -> bool:
        return bool(self.admin_emails and self.admin_password)


def load_settings(env_file: str | None = None) -> Settings:
    """Build settings from ``SPRINT_QUIZ_*`` variables after loading a .env file if present."""
    load_dotenv(env_file)
    return Settings(
        data_file=Path(os.getenv("SPRINT_QUIZ_DATA_FILE", DEFAULT_DATA_FILE)),
        host=os.getenv("SPRINT_QUIZ_HOST", DEFAULT_HOST),
        port=_parse_port(os.getenv("SPRINT_QUIZ_PORT")),
        log_level=os.getenv("SPRINT_QUIZ_LOG_LEVEL", "INFO"),
        admin_emails=parse_admin_emails(os.getenv("SPRINT_QUIZ_ADMIN_EMAILS", "")),
        admin_password=os.getenv("SPRINT_QUIZ_ADMIN_PASSWORD") or None,
    )


def parse_admin_emails(raw: str) -> tuple[str, ...]:
    """Split a comma-separated list into lowercase, trimmed addresses."""
    return tuple(email.strip().lower() for email in raw.split(",") if email.strip())


def _parse_port(raw: str | None) -> int:
    if not raw:
        return DEFAULT_PORT
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"SPRINT_QUIZ_PORT must be an integer, got {raw!r}.") from exc
