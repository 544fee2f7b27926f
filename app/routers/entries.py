# app/routers/entries.py
"""Vehicle entry CRUD, aggregates, bulk delete, manual cleanup and photos."""

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import ALL_ROLES, HISTORY_ROLES, get_current_user, require_roles
from app.exceptions import EntryNotFound
from app.models.user import User, UserRole
from app.schemas.vehicle_entry import (
    CleanupOut,
    DeleteMultipleOut,
    DeleteMultipleRequest,
    EntryCreate,
    EntryOut,
    EntryStatisticsOut,
    EntryUpdate,
)
from app.services import entry_service, photo_service

router = APIRouter(prefix="/entries")

any_admin = require_roles(*ALL_ROLES)
history_admin = require_roles(*HISTORY_ROLES)
yearly_admin = require_roles(UserRole.YEARLY_ADMIN)


@router.post("", response_model=EntryOut, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(any_admin)], summary="Register a vehicle entry")
def create_entry(body: EntryCreate, db: Session = Depends(get_db)):
    return entry_service.create_entry(db, body)


@router.get("", response_model=list[EntryOut], dependencies=[Depends(any_admin)],
            summary="All entries, newest first")
def list_entries(db: Session = Depends(get_db)):
    return entry_service.list_entries(db)


@router.get("/statistics", response_model=EntryStatisticsOut, dependencies=[Depends(history_admin)],
            summary="Total / completed / pending / today's entries")
def get_statistics(db: Session = Depends(get_db)):
    return entry_service.get_statistics(db)


@router.get("/date-range", response_model=list[EntryOut], dependencies=[Depends(history_admin)],
            summary="Entries created between two dates (inclusive)")
def find_by_date_range(
    start_date: str = Query(alias="startDate"),
    end_date: str = Query(alias="endDate"),
    db: Session = Depends(get_db),
):
    return entry_service.find_by_date_range(db, start_date, end_date)


@router.post("/cleanup", response_model=CleanupOut, summary="Delete every entry (yearly admins)")
def manual_cleanup(user: User = Depends(yearly_admin), db: Session = Depends(get_db)):
    return entry_service.manual_cleanup(db, user)


@router.get("/{entry_id}", response_model=EntryOut, dependencies=[Depends(any_admin)])
def get_entry(entry_id: str, db: Session = Depends(get_db)):
    return entry_service.get_entry(db, entry_id)


@router.patch("/{entry_id}", response_model=EntryOut, dependencies=[Depends(any_admin)],
              summary="Partial update, e.g. registering the exit time")
def update_entry(entry_id: str, body: EntryUpdate, db: Session = Depends(get_db)):
    return entry_service.update_entry(db, entry_id, body)


@router.post("/{entry_id}/photo", response_model=EntryOut, dependencies=[Depends(any_admin)],
             summary="Attach a photo (jpg/jpeg/png/gif, max 5MB)")
def upload_photo(entry_id: str, photo: UploadFile = File(...), db: Session = Depends(get_db)):
    entry_service.get_entry(db, entry_id)
    photo_url = photo_service.save_photo(photo.filename, photo.file)
    return entry_service.set_photo(db, entry_id, photo_url)


@router.get("/{entry_id}/photo", dependencies=[Depends(get_current_user)], summary="Download an entry's photo")
def get_photo(entry_id: str, db: Session = Depends(get_db)):
    entry = entry_service.get_entry(db, entry_id)
    filepath = photo_service.photo_path(entry.photo_url)
    if not filepath:
        raise EntryNotFound("Photo not found")
    return FileResponse(filepath)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(history_admin)])
def delete_entry(entry_id: str, db: Session = Depends(get_db)):
    entry_service.delete_entry(db, entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", response_model=DeleteMultipleOut, summary="Delete several entries by id")
def delete_multiple(body: DeleteMultipleRequest, user: User = Depends(history_admin),
                    db: Session = Depends(get_db)):
    return entry_service.delete_multiple(db, body.ids, user)
