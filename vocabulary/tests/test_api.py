# vocabulary/tests/test_api.py
from unittest import mock

import pytest

from vocabulary.errors import PersistenceError
from vocabulary.models import CompletionRecord, Entry, Section

BASE = "/api/vocabulary"


def _section(c, name):
    r = c.post(f"{BASE}/sections/", {"name": name}, format="json")
    assert r.status_code == 201
    return r.json()


@pytest.mark.django_db
def test_health(api_client):
    r = api_client.get(f"{BASE}/health/")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


@pytest.mark.django_db
def test_signed_in_sections_and_bulk_entries(auth_client, user):
    idioms = _section(auth_client, "Idioms")
    assert Section.objects.filter(user=user, name="Idioms").exists()

    dup = auth_client.post(f"{BASE}/sections/", {"name": "IDIOMS"}, format="json")
    assert dup.status_code == 400
    assert dup.json()["detail"] == "A section with this name already exists"

    r = auth_client.post(
        f"{BASE}/entries/",
        {"section_id": idioms["id"], "text": "a | b | c\nnot valid\nd | e | f"},
        format="json",
    )
    assert r.status_code == 201
    body = r.json()
    assert body["created"] == 2
    assert body["detail"] == 'Added 2 entries to "Idioms"'
    assert Entry.objects.filter(user=user).count() == 2

    listed = auth_client.get(f"{BASE}/sections/").json()
    assert listed[0]["name"] == "Idioms"
    assert listed[0]["entry_count"] == 2

    per_section = auth_client.get(f"{BASE}/sections/{idioms['id']}/entries/").json()
    assert [e["term"] for e in per_section["entries"]] == ["a", "d"]
    assert len(auth_client.get(f"{BASE}/entries/").json()) == 2


@pytest.mark.django_db
def test_bulk_entry_validation_messages(auth_client):
    idioms = _section(auth_client, "Idioms")
    cases = [
        ({"text": "a | b | c"}, 400, "Please select a section"),
        ({"section_id": idioms["id"], "text": ""}, 400, "Please enter vocabulary entries"),
        ({"section_id": idioms["id"], "text": "a | b"}, 400,
         "No valid entries found. Please use format: term | meaning | example"),
    ]
    for payload, code, detail in cases:
        r = auth_client.post(f"{BASE}/entries/", payload, format="json")
        assert r.status_code == code
        assert r.json()["detail"] == detail

    missing = auth_client.post(
        f"{BASE}/entries/", {"section_id": "no-such-section", "text": "a | b | c"}, format="json"
    )
    assert missing.status_code == 404


@pytest.mark.django_db
def test_preview_counts_valid_lines(api_client):
    r = api_client.post(f"{BASE}/entries/preview/", {"text": "a|b|c\nx\n d | e | f "}, format="json")
    assert r.status_code == 200
    body = r.json()
    assert body["valid_entries"] == 2
    assert body["entries"][1] == {"term": "d", "meaning": "e", "example": "f"}


@pytest.mark.django_db
def test_anonymous_user_uses_session_store(api_client):
    s = _section(api_client, "Local")
    assert not Section.objects.exists()

    r = api_client.post(f"{BASE}/entries/", {"section_id": s["id"], "text": "a | b | c"}, format="json")
    assert r.status_code == 201
    assert not Entry.objects.exists()

    listed = api_client.get(f"{BASE}/sections/").json()
    assert [x["name"] for x in listed] == ["Local"]

    nxt = api_client.get(f"{BASE}/practice/next/").json()
    assert nxt["section"]["name"] == "Local"
    assert nxt["cycle"] is None
    assert [e["term"] for e in nxt["entries"]] == ["a"]


@pytest.mark.django_db
def test_anonymous_cannot_complete(api_client):
    s = _section(api_client, "Local")
    r = api_client.post(f"{BASE}/practice/complete/", {"section_id": s["id"]}, format="json")
    assert r.status_code == 401
    assert r.json()["detail"] == "Please sign in to track your progress."
    assert not CompletionRecord.objects.exists()


@pytest.mark.django_db
def test_practice_next_with_no_sections(auth_client):
    r = auth_client.get(f"{BASE}/practice/next/")
    assert r.status_code == 200
    assert r.json()["section"] is None
    assert r.json()["entries"] == []


@pytest.mark.django_db
def test_practice_rotation_over_http(auth_client, user):
    idioms = _section(auth_client, "Idioms")
    phrasal = _section(auth_client, "Phrasal Verbs")

    done = auth_client.post(f"{BASE}/practice/complete/", {"section_id": idioms["id"]}, format="json")
    assert done.status_code == 201
    body = done.json()
    assert body["record"]["cycle_number"] == 1
    assert body["record"]["section_name"] == "Idioms"
    assert body["next"]["section"]["id"] == phrasal["id"]

    for seed in range(5):
        nxt = auth_client.get(f"{BASE}/practice/next/?seed={seed}").json()
        assert nxt["section"]["name"] == "Phrasal Verbs"
        assert nxt["cycle"] == 1

    again = auth_client.post(f"{BASE}/practice/complete/", {"section_id": idioms["id"]}, format="json")
    assert again.status_code == 200
    assert again.json()["created"] is False

    last = auth_client.post(f"{BASE}/practice/complete/", {"section_id": phrasal["id"]}, format="json")
    assert last.json()["next"]["new_cycle"] == 2
    assert last.json()["next"]["notice"] == "Starting cycle 2. All sections are available again."
    assert CompletionRecord.objects.filter(user=user).count() == 2

    history = auth_client.get(f"{BASE}/completions/?cycle=1").json()
    assert {r["section_name"] for r in history} == {"Idioms", "Phrasal Verbs"}


@pytest.mark.django_db
def test_bad_seed_is_rejected(auth_client):
    r = auth_client.get(f"{BASE}/practice/next/?seed=abc")
    assert r.status_code == 400


@pytest.mark.django_db
def test_practice_today(auth_client):
    assert auth_client.get(f"{BASE}/practice/today/").json()["section"] is None
    _section(auth_client, "Only")
    assert auth_client.get(f"{BASE}/practice/today/").json()["section"]["name"] == "Only"


@pytest.mark.django_db
def test_persistence_failure_is_surfaced(auth_client):
    with mock.patch(
        "vocabulary.storage.db.DatabaseStore.list_sections",
        side_effect=PersistenceError("Could not list sections."),
    ):
        r = auth_client.get(f"{BASE}/sections/")
    assert r.status_code == 503
    assert r.json()["detail"] == "Could not list sections."


@pytest.mark.django_db
def test_anonymous_reads_do_not_start_a_session(api_client):
    for path in ("practice/next/", "sections/", "entries/", "practice/today/"):
        r = api_client.get(f"{BASE}/{path}")
        assert r.status_code == 200
        assert "sessionid" not in r.cookies


@pytest.mark.django_db
def test_malformed_bodies_are_rejected(auth_client):
    idioms = _section(auth_client, "Idioms")
    cases = [
        ("entries/", {"section_id": idioms["id"], "text": ["a | b | c"]}),
        ("entries/", {"section_id": idioms["id"], "text": 123}),
        ("entries/", [{"section_id": idioms["id"], "text": "a | b | c"}]),
        ("sections/", {"name": {"nested": True}}),
        ("sections/", ["Idioms"]),
        ("entries/preview/", {"text": True}),
        ("entries/preview/", ["a | b | c"]),
        ("practice/complete/", ["x"]),
    ]
    for path, payload in cases:
        r = auth_client.post(f"{BASE}/{path}", payload, format="json")
        assert r.status_code == 400, (path, payload)
        assert isinstance(r.json()["detail"], str)
    assert not Entry.objects.exists()


@pytest.mark.django_db
def test_section_search_and_summary(auth_client):
    idioms = _section(auth_client, "Idioms")
    _section(auth_client, "Phrasal Verbs")
    _section(auth_client, "Business Idioms")
    auth_client.post(f"{BASE}/entries/", {"section_id": idioms["id"], "text": "a | b | c"}, format="json")

    found = auth_client.get(f"{BASE}/sections/?search=idiom").json()
    assert {s["name"] for s in found} == {"Idioms", "Business Idioms"}
    assert auth_client.get(f"{BASE}/sections/?search=nothing").json() == []

    assert auth_client.get(f"{BASE}/sections/summary/").json() == {
        "sections": 3, "entries": 1, "sections_with_entries": 1,
    }
