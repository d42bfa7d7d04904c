# vocabulary/errors.py
"""
Error taxonomy for user actions.

Every error is caught at the boundary of the action that raised it (a view or
a management command) and surfaced as a short message; none is fatal.
"""


class VocabularyError(Exception):
    """Base class; ``str(exc)`` is the user-facing message."""


class ValidationError(VocabularyError):
    """Bad input detected before any write (missing selection, empty text, …)."""


class SectionNotFound(ValidationError):
    pass


class AuthenticationRequired(VocabularyError):
    """Completion tracking was attempted without a signed-in user."""


class PersistenceError(VocabularyError):
    """A store read or write failed."""
