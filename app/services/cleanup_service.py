# app/services/cleanup_service.py
"""
Retention cleanup - one job per admin tier.

  daily_admin  → entries created before the end of yesterday
  weekly_admin → entries created more than 7 days ago
  yearly_admin → entries created more than a year ago

A tier's job only deletes when at least one user of that tier exists.
Runs are idempotent: nothing overdue means nothing deleted.
"""

from datetime import datetime, time, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from app.database import SessionLocal
from app.models.user import User, UserRole
from app.models.vehicle_entry import VehicleEntry
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _one_year_before(now: datetime) -> datetime:
    try:
        return now.replace(year=now.year - 1)
    except ValueError:
        # Feb 29 → Feb 28
        return now.replace(year=now.year - 1, day=28)


def cutoff_for(role: UserRole, now: datetime) -> datetime:
    match UserRole(role):
        case UserRole.DAILY_ADMIN:
            return datetime.combine(now.date() - timedelta(days=1), time.max)
        case UserRole.WEEKLY_ADMIN:
            return now - timedelta(days=7)
        case UserRole.YEARLY_ADMIN:
            return _one_year_before(now)


def run_cleanup(db: Session, role: UserRole, now: Optional[datetime] = None) -> int:
    """Delete entries older than the tier's cutoff. Returns the number deleted."""
    has_admin = db.query(User.id).filter(User.role == role).first() is not None
    if not has_admin:
        logger.debug(f"[CLEANUP] No {role.value} users - skipped")
        return 0

    cutoff = cutoff_for(role, now or datetime.now())
    deleted = (
        db.query(VehicleEntry)
        .filter(VehicleEntry.created_at < cutoff)
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted:
        logger.info(f"[CLEANUP] {role.value}: {deleted} entries older than {cutoff:%Y-%m-%d %H:%M} deleted")
    return deleted


def _run_job(role: UserRole) -> int:
    logger.info(f"[CLEANUP] Running {role.value} cleanup...")
    db = SessionLocal()
    try:
        return run_cleanup(db, role)
    finally:
        db.close()


def daily_cleanup() -> int:
    return _run_job(UserRole.DAILY_ADMIN)


def weekly_cleanup() -> int:
    return _run_job(UserRole.WEEKLY_ADMIN)


def yearly_cleanup() -> int:
    return _run_job(UserRole.YEARLY_ADMIN)
