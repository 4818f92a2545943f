from datetime import date

import pytest

from apps.cms import timeline
from apps.cms.exceptions import CurrentEntryHasEndDate, InvalidDateRange, NotFound
from apps.cms.models import TimelineEntry


def _entry(db, **overrides):
    data = {
        "title": "Engineer",
        "organization": "Acme",
        "start_date": date(2022, 1, 1),
        "end_date": date(2023, 1, 1),
        "is_current": False,
        "entry_type": "career",
    }
    data.update(overrides)
    return timeline.create_entry(db, data)


def test_start_after_stored_end_is_rejected_and_row_unchanged(db):
    entry = _entry(db)

    with pytest.raises(InvalidDateRange):
        timeline.update_entry(db, entry.id, {"start_date": date(2024, 1, 1)})

    db.refresh(entry)
    assert entry.start_date == date(2022, 1, 1)
    assert entry.end_date == date(2023, 1, 1)


def test_equal_start_and_end_is_allowed(db):
    entry = _entry(db, start_date=date(2023, 1, 1), end_date=date(2023, 1, 1))
    assert entry.start_date == entry.end_date


def test_current_with_stored_end_date_is_rejected(db):
    entry = _entry(db)

    with pytest.raises(CurrentEntryHasEndDate):
        timeline.update_entry(db, entry.id, {"is_current": True})

    db.refresh(entry)
    assert entry.is_current is False


def test_current_with_end_date_cleared_in_same_update(db):
    entry = _entry(db)

    updated = timeline.update_entry(db, entry.id, {"is_current": True, "end_date": None})

    assert updated.is_current is True
    assert updated.end_date is None


def test_end_date_on_current_entry_is_rejected(db):
    entry = _entry(db, end_date=None, is_current=True)

    with pytest.raises(CurrentEntryHasEndDate):
        timeline.update_entry(db, entry.id, {"end_date": date(2024, 6, 1)})


def test_create_validates_dates(db):
    with pytest.raises(InvalidDateRange):
        _entry(db, start_date=date(2024, 1, 1), end_date=date(2023, 1, 1))
    with pytest.raises(CurrentEntryHasEndDate):
        _entry(db, is_current=True)
    assert db.query(TimelineEntry).count() == 0


def test_update_missing_entry(db):
    with pytest.raises(NotFound):
        timeline.update_entry(db, 99, {"title": "Ghost"})


def test_list_orders_by_sort_order_then_latest_start(db):
    older = _entry(db, title="Older", start_date=date(2015, 1, 1), end_date=None)
    newer = _entry(db, title="Newer", start_date=date(2019, 1, 1), end_date=None)
    pinned = _entry(db, title="Pinned", start_date=date(2010, 1, 1), end_date=None, sort_order=-1)
    school = _entry(db, title="BSc", entry_type="education", end_date=None)

    assert [e.id for e in timeline.list_entries(db, "career")] == [pinned.id, newer.id, older.id]
    assert len(timeline.list_entries(db)) == 4
    assert [e.id for e in timeline.list_entries(db, "education")] == [school.id]


def test_reorder_applies_every_item(db):
    a = _entry(db, title="A")
    b = _entry(db, title="B")

    timeline.reorder_entries(db, [{"id": a.id, "sort_order": 2}, {"id": b.id, "sort_order": 1}])

    db.refresh(a)
    db.refresh(b)
    assert (a.sort_order, b.sort_order) == (2, 1)


def test_reorder_with_missing_id_changes_nothing(db):
    a = _entry(db, title="A")

    with pytest.raises(NotFound):
        timeline.reorder_entries(db, [{"id": a.id, "sort_order": 5}, {"id": 404, "sort_order": 6}])

    db.refresh(a)
    assert a.sort_order == 0


def test_delete_entry(db):
    entry = _entry(db)
    timeline.delete_entry(db, entry.id)
    assert timeline.get_entry(db, entry.id) is None

    with pytest.raises(NotFound):
        timeline.delete_entry(db, entry.id)
