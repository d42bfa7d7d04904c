# vocabulary/storage/__init__.py
"""
Pick a store for the caller: the database for signed-in users, the browser
session otherwise.
"""
from .base import CompletionRow, EntryRow, SectionRow, VocabularyStore
from .db import DatabaseStore
from .local import JsonFileStore, LocalStore, SessionStore


def current_user(request):
    """The signed-in user, or ``None`` for anonymous requests."""
    user = getattr(request, "user", None)
    if user is not None and user.is_authenticated:
        return user
    return None


def store_for_request(request) -> VocabularyStore:
    user = current_user(request)
    if user is not None:
        return DatabaseStore(user)
    return SessionStore(request.session)


__all__ = [
    "CompletionRow",
    "DatabaseStore",
    "EntryRow",
    "JsonFileStore",
    "LocalStore",
    "SectionRow",
    "SessionStore",
    "VocabularyStore",
    "current_user",
    "store_for_request",
]
