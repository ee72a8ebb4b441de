"""Network configuration constants for the quiz application."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
PARTICIPANT_COOKIE: str = "sprint_participant"
ADMIN_COOKIE: str = "sprint_admin"
COOKIE_MAX_AGE_SECONDS: int = 60 * 60 * 24 * 30
FLASH_CARD_COOKIE: str = "sprint_flash_cards"

# In-memory session limits
MAX_ACTIVE_PARTICIPANTS: int = 1000
MAX_ACTIVE_FLASH_CARD_DECKS: int = 1000
SESSION_IDLE_TIMEOUT_SECONDS: int = 60 * 60 * 4
