"""
Career and education timeline.

Before any write the proposed state of an entry (stored values overlaid with
the requested changes) must satisfy:
- end_date, when set, is not before start_date
- a current entry has no end_date
and within one entry_type at most one entry is current.
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from apps.shared.database import transaction
from apps.cms.exceptions import CurrentEntryHasEndDate, InvalidDateRange, NotFound
from apps.cms.models import TimelineEntry, TimelineType
from apps.cms.singleton import claim_exclusive_flag

logger = logging.getLogger(__name__)


def check_entry_state(
    start_date: date,
    end_date: Optional[date],
    is_current: bool,
) -> None:
    """Raise if the effective dates and current flag are inconsistent."""
    if end_date is not None and start_date > end_date:
        raise InvalidDateRange(
            f"Start date {start_date.isoformat()} cannot be after end date {end_date.isoformat()}"
        )
    if is_current and end_date is not None:
        raise CurrentEntryHasEndDate("Current positions cannot have an end date")


def _effective(existing: TimelineEntry, changes: Dict[str, Any], field: str):
    return changes[field] if field in changes else getattr(existing, field)


def list_entries(db: Session, entry_type: Optional[TimelineType] = None) -> List[TimelineEntry]:
    """Entries ordered by sort_order, then most recent start first."""
    query = db.query(TimelineEntry)
    if entry_type is not None:
        query = query.filter(TimelineEntry.entry_type == TimelineType(entry_type).value)
    return query.order_by(TimelineEntry.sort_order.asc(), TimelineEntry.start_date.desc()).all()


def get_entry(db: Session, entry_id: int) -> Optional[TimelineEntry]:
    return db.query(TimelineEntry).filter(TimelineEntry.id == entry_id).first()


def _require_entry(db: Session, entry_id: int) -> TimelineEntry:
    entry = get_entry(db, entry_id)
    if not entry:
        raise NotFound(f"Timeline entry with id {entry_id} not found")
    return entry


def create_entry(db: Session, data: Dict[str, Any]) -> TimelineEntry:
    """Insert a new entry; a current entry takes the flag from its siblings."""
    is_current = bool(data.get("is_current", False))
    check_entry_state(data["start_date"], data.get("end_date"), is_current)

    entry = TimelineEntry(**data)
    with transaction(db):
        db.add(entry)
        db.flush()
        claim_exclusive_flag(
            db, TimelineEntry, "is_current", entry.id, is_current,
            partition={"entry_type": entry.entry_type},
        )
    db.refresh(entry)

    logger.info(f"Created {entry.entry_type} timeline entry {entry.id} (current={entry.is_current})")
    return entry


def update_entry(db: Session, entry_id: int, changes: Dict[str, Any]) -> TimelineEntry:
    """
    Apply a partial update.

    Validation runs on the merged state before anything is written. When the
    entry is current afterwards and the update touched is_current or
    entry_type, the other current entry of the effective type is demoted in
    the same transaction.
    """
    entry = _require_entry(db, entry_id)

    check_entry_state(
        _effective(entry, changes, "start_date"),
        _effective(entry, changes, "end_date"),
        _effective(entry, changes, "is_current"),
    )

    # Joining another type while current also takes the flag there
    effective_current = _effective(entry, changes, "is_current")
    with transaction(db):
        if effective_current and ("is_current" in changes or "entry_type" in changes):
            claim_exclusive_flag(
                db, TimelineEntry, "is_current", entry.id, True,
                partition={"entry_type": _effective(entry, changes, "entry_type")},
            )
        for key, value in changes.items():
            setattr(entry, key, value)
    db.refresh(entry)

    logger.info(f"Updated timeline entry {entry_id}: {sorted(changes)}")
    return entry


def delete_entry(db: Session, entry_id: int) -> None:
    entry = _require_entry(db, entry_id)
    with transaction(db):
        db.delete(entry)
    logger.info(f"Deleted timeline entry {entry_id}")


def reorder_entries(db: Session, orders: List[Dict[str, int]]) -> None:
    """
    Set sort_order for several entries.

    Every id is checked before the first write, and all writes commit together.
    """
    if not orders:
        return

    ids = [item["id"] for item in orders]
    found = {
        row.id for row in db.query(TimelineEntry.id).filter(TimelineEntry.id.in_(ids)).all()
    }
    for entry_id in ids:
        if entry_id not in found:
            raise NotFound(f"Timeline entry with id {entry_id} not found")

    with transaction(db):
        for item in orders:
            db.query(TimelineEntry).filter(TimelineEntry.id == item["id"]).update(
                {TimelineEntry.sort_order: item["sort_order"]},
                synchronize_session="fetch",
            )

    logger.info(f"Reordered {len(orders)} timeline entries")
