"""Exception taxonomy shared by the quiz services and the API layer."""

from __future__ import annotations


class QuizError(Exception):
    """Base class for quiz domain errors."""


class CatalogUnavailable(QuizError):
    """The remote question collection could not be used."""


class ConfigUnavailable(QuizError):
    """The remote quiz configuration could not be used."""


class PersistenceFailure(QuizError):
    """A write to the document store failed; the caller may retry manually."""


class AuthenticationMissing(QuizError):
    """An action requiring an identity was attempted without one."""


class InvalidConfigValue(QuizError, ValueError):
    """A configuration value is outside its accepted bounds."""


class InvalidTransition(QuizError):
    """The requested action is not allowed in the current session phase."""


class AccessDenied(QuizError):
    """The caller is signed in but lacks the required role."""
