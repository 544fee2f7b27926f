# app/services/entry_service.py
"""
Vehicle entry store: CRUD plus the two read-only aggregates
(statistics, created_at date range) and the bulk deletes.

Exit time is validated against entry time on every write; the
"at least one vehicle type / destination" rule belongs to the client form.
"""

from datetime import datetime, time, timedelta
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.exceptions import EntryNotFound, InvalidDateRange, InvalidEntryTimes, PermissionDenied
from app.models.user import User, UserRole
from app.models.vehicle_entry import VehicleEntry
from app.schemas.vehicle_entry import EntryCreate, EntryUpdate
from app.utils.logger import get_logger

logger = get_logger(__name__)

NULLABLE_FIELDS = {"exit_time", "photo_url"}


def _check_times(entry_time: datetime, exit_time: Optional[datetime]):
    if exit_time is not None and entry_time is not None and exit_time < entry_time:
        raise InvalidEntryTimes("Exit time cannot be earlier than entry time")


def create_entry(db: Session, data: EntryCreate) -> VehicleEntry:
    _check_times(data.entry_time, data.exit_time)
    entry = VehicleEntry(**data.model_dump())
    db.add(entry)
    db.commit()
    db.refresh(entry)
    logger.info(f"[ENTRIES] Created {entry.id} plate={entry.plate} ci={entry.national_id}")
    return entry


def list_entries(db: Session) -> list[VehicleEntry]:
    return db.query(VehicleEntry).order_by(VehicleEntry.created_at.desc()).all()


def get_entry(db: Session, entry_id: str) -> VehicleEntry:
    entry = db.get(VehicleEntry, entry_id)
    if not entry:
        raise EntryNotFound(f"Entry with ID {entry_id} not found")
    return entry


def update_entry(db: Session, entry_id: str, data: EntryUpdate) -> VehicleEntry:
    entry = get_entry(db, entry_id)
    changes = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field in NULLABLE_FIELDS
    }
    _check_times(changes.get("entry_time", entry.entry_time),
                 changes.get("exit_time", entry.exit_time))

    for field, value in changes.items():
        setattr(entry, field, value)
    db.commit()
    db.refresh(entry)
    logger.info(f"[ENTRIES] Updated {entry.id}: {sorted(changes)}")
    return entry


def register_exit(db: Session, entry_id: str, when: Optional[datetime] = None) -> VehicleEntry:
    """Stamp the exit time (now by default) on an entry."""
    return update_entry(db, entry_id, EntryUpdate(exit_time=when or datetime.now()))


def set_photo(db: Session, entry_id: str, photo_url: str) -> VehicleEntry:
    return update_entry(db, entry_id, EntryUpdate(photo_url=photo_url))


def delete_entry(db: Session, entry_id: str):
    entry = get_entry(db, entry_id)
    db.delete(entry)
    db.commit()
    logger.info(f"[ENTRIES] Deleted {entry_id}")


def delete_multiple(db: Session, ids: list[str], user: User) -> dict:
    if not user.permissions.get("canDeleteEntries"):
        raise PermissionDenied("You do not have permission to delete entries")

    entries = db.query(VehicleEntry).filter(VehicleEntry.id.in_(ids)).all() if ids else []
    if not entries:
        raise EntryNotFound("No entries found to delete")

    for entry in entries:
        db.delete(entry)
    db.commit()

    count = len(entries)
    logger.info(f"[ENTRIES] {user.username} deleted {count} entries")
    return {"deleted_count": count, "message": f"{count} entries deleted successfully"}


def get_statistics(db: Session, now: Optional[datetime] = None) -> dict:
    now = now or datetime.now()
    total = db.query(func.count(VehicleEntry.id)).scalar()
    completed = db.query(func.count(VehicleEntry.id)).filter(
        VehicleEntry.exit_time.isnot(None)
    ).scalar()

    today = datetime.combine(now.date(), time.min)
    tomorrow = today + timedelta(days=1)
    today_entries = db.query(func.count(VehicleEntry.id)).filter(
        VehicleEntry.created_at >= today,
        VehicleEntry.created_at < tomorrow,
    ).scalar()

    return {
        "total": total,
        "completed": completed,
        "pending": total - completed,
        "today_entries": today_entries,
    }


def _parse_bound(value: str, end: bool = False) -> datetime:
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise InvalidDateRange(f"Invalid date: {value!r}")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    # A bare date as upper bound covers that whole day
    if end and len(value.strip()) == 10:
        parsed = datetime.combine(parsed.date(), time.max)
    return parsed


def find_by_date_range(db: Session, start: str, end: str) -> list[VehicleEntry]:
    start_dt, end_dt = _parse_bound(start), _parse_bound(end, end=True)
    if start_dt > end_dt:
        raise InvalidDateRange("startDate must not be after endDate")
    return (
        db.query(VehicleEntry)
        .filter(VehicleEntry.created_at >= start_dt, VehicleEntry.created_at <= end_dt)
        .order_by(VehicleEntry.created_at.desc())
        .all()
    )


def manual_cleanup(db: Session, user: User) -> dict:
    """Delete every entry. Yearly admins only."""
    if user.role != UserRole.YEARLY_ADMIN:
        raise PermissionDenied("Only yearly administrators can run a manual cleanup")

    count = db.query(VehicleEntry).delete(synchronize_session=False)
    db.commit()
    logger.warning(f"[CLEANUP] Manual cleanup by {user.username}: {count} entries deleted")
    return {
        "success": True,
        "deleted_count": count,
        "message": f"Manual cleanup completed. {count} entries deleted.",
    }
