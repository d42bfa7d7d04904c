"""Store selection shared by the vocabulary management commands."""
from __future__ import annotations

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import CommandError

from vocabulary.storage import DatabaseStore, JsonFileStore


def add_store_arguments(parser) -> None:
    who = parser.add_mutually_exclusive_group()
    who.add_argument("--user", help="username; use the database store for this user")
    who.add_argument("--local", metavar="PATH",
                     help="JSON file for the local store (default: VOCABULARY_LOCAL_STORE)")


def store_from_options(options):
    """Return ``(store, user)``; ``user`` is None for the local store."""
    username = options.get("user")
    if username:
        User = get_user_model()
        try:
            user = User.objects.get(**{User.USERNAME_FIELD: username})
        except User.DoesNotExist:
            raise CommandError(f"No user named {username!r}")
        return DatabaseStore(user), user
    return JsonFileStore(options.get("local") or settings.VOCABULARY_LOCAL_STORE), None
