# vocabulary/views.py
from __future__ import annotations

import functools
import logging
import random
from typing import Any, Dict, Optional

from django.http import JsonResponse
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.settings import api_settings

from . import services
from .errors import AuthenticationRequired, PersistenceError, SectionNotFound, ValidationError
from .practice.rotation import Selection, SectionRotation, todays_section
from .serializers import (
    CompleteInputSerializer,
    CompletionRecordSerializer,
    EntriesInputSerializer,
    EntryDraftSerializer,
    EntrySerializer,
    PreviewInputSerializer,
    SectionInputSerializer,
    SectionSerializer,
)
from .storage import current_user, store_for_request

log = logging.getLogger(__name__)


def surfaces_errors(view):
    """Turn a failed user action into a ``{"detail": …}`` response."""
    @functools.wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except SectionNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except ValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except AuthenticationRequired as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_401_UNAUTHORIZED)
        except PersistenceError as exc:
            log.exception("%s failed", view.__name__)
            return Response({"detail": str(exc)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    return wrapper


def _body(serializer_class, request) -> Dict[str, Any]:
    """Validated request body; a malformed one becomes a ``ValidationError``."""
    s = serializer_class(data=request.data)
    if not s.is_valid():
        field, messages = next(iter(s.errors.items()))
        message = messages[0] if isinstance(messages, list) else messages
        if field == api_settings.NON_FIELD_ERRORS_KEY:
            raise ValidationError(str(message))
        raise ValidationError(f"{field}: {message}")
    return s.validated_data


def _selection_payload(store, selection: Selection) -> Dict[str, Any]:
    section = selection.section
    entries = store.list_entries_by_section(section.id) if section else []
    return {
        "section": SectionSerializer(section).data if section else None,
        "entries": EntrySerializer(entries, many=True).data,
        "cycle": selection.cycle,
        "new_cycle": selection.new_cycle,
        "notice": selection.notice,
    }


# ────────────────────────────────────────────────────────────────────────────
#  /api/vocabulary/sections/  – list (GET) or create (POST {"name": …})
#     query: search=<text> (optional, case-insensitive name match)
# ────────────────────────────────────────────────────────────────────────────
@api_view(["GET", "POST"])
@permission_classes([AllowAny])
@surfaces_errors
def sections(request) -> Response:
    store = store_for_request(request)
    if request.method == "POST":
        section = services.create_section(store, _body(SectionInputSerializer, request).get("name"))
        return Response(SectionSerializer(section).data, status=status.HTTP_201_CREATED)
    found = services.search_sections(store, request.GET.get("search"))
    return Response(SectionSerializer(found, many=True).data)


@api_view(["GET"])
@permission_classes([AllowAny])
@surfaces_errors
def sections_summary(request) -> Response:
    """Totals for the section overview."""
    return Response(services.section_totals(store_for_request(request).list_sections()))


# ────────────────────────────────────────────────────────────────────────────
#  /api/vocabulary/sections/<id>/entries/  – entries of one section
# ────────────────────────────────────────────────────────────────────────────
@api_view(["GET"])
@permission_classes([AllowAny])
@surfaces_errors
def section_entries(request, section_id: str) -> Response:
    store = store_for_request(request)
    section = services.find_section(store, section_id)
    entries = store.list_entries_by_section(section.id)
    return Response({
        "section": SectionSerializer(section).data,
        "entries": EntrySerializer(entries, many=True).data,
    })


# ────────────────────────────────────────────────────────────────────────────
#  /api/vocabulary/entries/
#     GET  → every entry of the caller
#     POST → { "section_id": "…", "text": "term | meaning | example\n…" }
# ────────────────────────────────────────────────────────────────────────────
@api_view(["GET", "POST"])
@permission_classes([AllowAny])
@surfaces_errors
def entries(request) -> Response:
    store = store_for_request(request)
    if request.method == "GET":
        return Response(EntrySerializer(store.list_entries(), many=True).data)

    data = _body(EntriesInputSerializer, request)
    section, rows = services.add_entries(store, data.get("section_id"), data.get("text"))
    return Response(
        {
            "section": SectionSerializer(section).data,
            "created": len(rows),
            "entries": EntrySerializer(rows, many=True).data,
            "detail": f'Added {len(rows)} entries to "{section.name}"',
        },
        status=status.HTTP_201_CREATED,
    )


@api_view(["POST"])
@permission_classes([AllowAny])
@surfaces_errors
def preview_entries(request) -> Response:
    """Live count for the bulk-entry box; nothing is stored."""
    drafts = services.preview_entries(_body(PreviewInputSerializer, request).get("text"))
    return Response({
        "valid_entries": len(drafts),
        "entries": EntryDraftSerializer(drafts, many=True).data,
    })


# ────────────────────────────────────────────────────────────────────────────
#  /api/vocabulary/practice/next/  – pick the section to practice now
#     query: seed=<int> (optional, reproducible pick)
# ────────────────────────────────────────────────────────────────────────────
def _rng_from(request):
    raw: Optional[str] = request.GET.get("seed")
    if raw is None:
        return None
    try:
        return random.Random(int(raw))
    except ValueError:
        raise ValidationError("seed must be an integer")


@api_view(["GET"])
@permission_classes([AllowAny])
@surfaces_errors
def practice_next(request) -> Response:
    store = store_for_request(request)
    rotation = SectionRotation(store, user=current_user(request), rng=_rng_from(request))
    return Response(_selection_payload(store, rotation.select_next()))


# ────────────────────────────────────────────────────────────────────────────
#  /api/vocabulary/practice/complete/  – POST { "section_id": "…" }
#     records the completion, then answers with the next pick
# ────────────────────────────────────────────────────────────────────────────
@api_view(["POST"])
@permission_classes([AllowAny])
@surfaces_errors
def practice_complete(request) -> Response:
    user = current_user(request)
    if user is None:
        raise AuthenticationRequired("Please sign in to track your progress.")

    store = store_for_request(request)
    section = services.find_section(store, _body(CompleteInputSerializer, request).get("section_id"))
    done = SectionRotation(store, user=user, rng=_rng_from(request)).mark_complete(section)
    return Response(
        {
            "record": CompletionRecordSerializer(done.record).data,
            "created": done.created,
            "detail": f'"{section.name}" has been marked as complete.',
            "next": _selection_payload(store, done.next),
        },
        status=status.HTTP_201_CREATED if done.created else status.HTTP_200_OK,
    )


@api_view(["GET"])
@permission_classes([AllowAny])
@surfaces_errors
def practice_today(request) -> Response:
    store = store_for_request(request)
    section = todays_section(store.list_sections())
    return Response(_selection_payload(store, Selection(section=section)))


# ────────────────────────────────────────────────────────────────────────────
#  /api/vocabulary/completions/  – the caller's completion history
#     query: cycle=<int> (optional)
# ────────────────────────────────────────────────────────────────────────────
@api_view(["GET"])
@permission_classes([AllowAny])
@surfaces_errors
def completions(request) -> Response:
    if current_user(request) is None:
        raise AuthenticationRequired("Please sign in to track your progress.")
    cycle_raw = request.GET.get("cycle")
    try:
        cycle = int(cycle_raw) if cycle_raw else None
    except ValueError:
        raise ValidationError("cycle must be an integer")
    records = store_for_request(request).list_completion_records(cycle)
    return Response(CompletionRecordSerializer(records, many=True).data)


@api_view(["GET"])
@permission_classes([])  # public
def health(_request):
    return JsonResponse({"ok": True})
