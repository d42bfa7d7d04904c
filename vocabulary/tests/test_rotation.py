# vocabulary/tests/test_rotation.py
import datetime as dt
import random

import pytest

from vocabulary.errors import AuthenticationRequired
from vocabulary.practice.rotation import SectionRotation, cycle_state, todays_section
from vocabulary.storage import CompletionRow, LocalStore

SIGNED_IN = object()   # any non-None identity turns rotation tracking on


def _sections(store, *names):
    return [store.create_section(n) for n in names]


def test_no_sections_means_no_selection(local_store):
    sel = SectionRotation(local_store, user=SIGNED_IN).select_next()
    assert sel.section is None
    assert not sel.started_new_cycle


def test_anonymous_pick_is_any_section(local_store, rng):
    ids = {s.id for s in _sections(local_store, "A", "B", "C")}
    rotation = SectionRotation(local_store, user=None, rng=rng)
    for _ in range(20):
        sel = rotation.select_next()
        assert sel.section.id in ids
        assert sel.cycle is None


def test_fresh_user_starts_in_cycle_one(local_store, rng):
    ids = {s.id for s in _sections(local_store, "A", "B", "C")}
    rotation = SectionRotation(local_store, user=SIGNED_IN, rng=rng)
    for _ in range(20):
        sel = rotation.select_next()
        assert sel.section.id in ids
        assert sel.cycle == 1
        assert sel.new_cycle is None
    assert rotation.current_cycle() == 1


def test_only_unshown_section_is_picked():
    store = LocalStore()
    idioms, phrasal = _sections(store, "Idioms", "Phrasal Verbs")
    rotation = SectionRotation(store, user=SIGNED_IN)

    done = rotation.mark_complete(idioms)
    assert done.created
    assert done.record.cycle_number == 1
    assert done.next.section == phrasal

    for seed in range(10):
        sel = SectionRotation(store, user=SIGNED_IN, rng=random.Random(seed)).select_next()
        assert sel.section.name == "Phrasal Verbs"


def test_rollover_after_every_section_is_done(local_store, rng):
    sections = _sections(local_store, "A", "B", "C")
    rotation = SectionRotation(local_store, user=SIGNED_IN, rng=rng)
    for s in sections:
        last = rotation.mark_complete(s)

    assert last.next.started_new_cycle
    assert last.next.new_cycle == 2

    sel = rotation.select_next()
    assert sel.new_cycle == 2
    assert sel.notice == "Starting cycle 2. All sections are available again."
    assert sel.section.id in {s.id for s in sections}
    # reporting the rollover writes nothing
    assert len(local_store.list_completion_records()) == 3


def test_first_completion_after_rollover_opens_next_cycle(local_store, rng):
    a, b = _sections(local_store, "A", "B")
    rotation = SectionRotation(local_store, user=SIGNED_IN, rng=rng)
    rotation.mark_complete(a)
    rotation.mark_complete(b)

    done = rotation.mark_complete(a)
    assert done.created
    assert done.record.cycle_number == 2
    assert rotation.current_cycle() == 2
    assert done.next.section == b
    assert done.next.new_cycle is None


def test_repeat_completion_in_open_cycle_writes_nothing(local_store):
    a, _b = _sections(local_store, "A", "B")
    rotation = SectionRotation(local_store, user=SIGNED_IN)
    first = rotation.mark_complete(a)
    again = rotation.mark_complete(a)

    assert not again.created
    assert again.record.id == first.record.id
    assert len(local_store.list_completion_records()) == 1


def test_mark_complete_requires_identity(local_store):
    (a,) = _sections(local_store, "A")
    with pytest.raises(AuthenticationRequired):
        SectionRotation(local_store, user=None).mark_complete(a)
    assert local_store.list_completion_records() == []


def test_select_next_is_read_only(local_store):
    a, b = _sections(local_store, "A", "B")
    rotation = SectionRotation(local_store, user=SIGNED_IN)
    rotation.mark_complete(a)
    snapshot = {k: list(v) for k, v in local_store.data.items()}

    for _ in range(10):
        rotation.select_next()

    assert {k: list(v) for k, v in local_store.data.items()} == snapshot


def test_cycle_state_uses_latest_record():
    now = dt.datetime(2025, 3, 1, tzinfo=dt.timezone.utc)
    records = [
        CompletionRow("3", "u", "s1", "A", 2, now),
        CompletionRow("2", "u", "s2", "B", 1, now - dt.timedelta(hours=1)),
        CompletionRow("1", "u", "s1", "A", 1, now - dt.timedelta(hours=2)),
    ]
    state = cycle_state(records)
    assert state.number == 2
    assert state.completed == frozenset({"s1"})
    assert cycle_state([]).number == 1


def test_todays_section_is_day_of_year_modulo(local_store):
    _sections(local_store, "A", "B", "C")
    sections = local_store.list_sections()
    # 2025-01-05 is day 5 of the year → index 5 % 3 == 2
    assert todays_section(sections, dt.date(2025, 1, 5)) == sections[2]
    assert todays_section([], dt.date(2025, 1, 5)) is None


@pytest.mark.django_db
def test_database_store_rotation_end_to_end(db_store, rng):
    idioms = db_store.create_section("Idioms")
    phrasal = db_store.create_section("Phrasal Verbs")
    rotation = SectionRotation(db_store, user=db_store.user, rng=rng)

    done = rotation.mark_complete(idioms)
    assert done.record.cycle_number == 1
    assert rotation.select_next().section.id == phrasal.id

    done = rotation.mark_complete(phrasal)
    assert done.next.new_cycle == 2

    again = rotation.mark_complete(phrasal)
    assert again.created and again.record.cycle_number == 2
    assert rotation.select_next().section.id == idioms.id


def test_reads_leave_an_empty_store_untouched():
    data = {}
    rotation = SectionRotation(LocalStore(data), user=SIGNED_IN)
    rotation.select_next()
    rotation.current_cycle()
    assert data == {}
