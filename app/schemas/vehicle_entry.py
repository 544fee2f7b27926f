# app/schemas/vehicle_entry.py
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional


def _to_local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Stored times are naive server-local; convert aware inputs first."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


class EntryCreate(BaseModel):
    first_name: str = Field(alias="nombre", min_length=1)
    last_name: str = Field(alias="apellidos", min_length=1)
    national_id: str = Field(alias="ci", min_length=1)
    vehicle_types: list[str] = Field(alias="tipoVehiculo")
    plate: str = Field(alias="chapa", min_length=1)
    entry_time: datetime = Field(alias="fechaEntrada")
    destinations: dict[str, list[str]] = Field(alias="lugarDestino")
    exit_time: Optional[datetime] = Field(default=None, alias="fechaSalida")
    photo_url: Optional[str] = Field(default=None, alias="photoUrl")

    @field_validator("exit_time", mode="before")
    @classmethod
    def blank_exit_is_none(cls, v):
        # The web form posts "" when no exit has been registered yet
        return None if v == "" else v

    @field_validator("entry_time", "exit_time")
    @classmethod
    def normalize_time(cls, v):
        return _to_local_naive(v)

    class Config:
        populate_by_name = True


class EntryUpdate(BaseModel):
    """Partial update - only the fields present in the request body change."""
    first_name: Optional[str] = Field(default=None, alias="nombre", min_length=1)
    last_name: Optional[str] = Field(default=None, alias="apellidos", min_length=1)
    national_id: Optional[str] = Field(default=None, alias="ci", min_length=1)
    vehicle_types: Optional[list[str]] = Field(default=None, alias="tipoVehiculo")
    plate: Optional[str] = Field(default=None, alias="chapa", min_length=1)
    entry_time: Optional[datetime] = Field(default=None, alias="fechaEntrada")
    destinations: Optional[dict[str, list[str]]] = Field(default=None, alias="lugarDestino")
    exit_time: Optional[datetime] = Field(default=None, alias="fechaSalida")
    photo_url: Optional[str] = Field(default=None, alias="photoUrl")

    @field_validator("exit_time", mode="before")
    @classmethod
    def blank_exit_is_none(cls, v):
        return None if v == "" else v

    @field_validator("entry_time", "exit_time")
    @classmethod
    def normalize_time(cls, v):
        return _to_local_naive(v)

    class Config:
        populate_by_name = True


class EntryOut(BaseModel):
    id: str
    first_name: str = Field(alias="nombre")
    last_name: str = Field(alias="apellidos")
    national_id: str = Field(alias="ci")
    vehicle_types: list[str] = Field(alias="tipoVehiculo")
    plate: str = Field(alias="chapa")
    entry_time: datetime = Field(alias="fechaEntrada")
    destinations: dict[str, list[str]] = Field(alias="lugarDestino")
    exit_time: Optional[datetime] = Field(default=None, alias="fechaSalida")
    photo_url: Optional[str] = Field(default=None, alias="photoUrl")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    class Config:
        from_attributes = True
        populate_by_name = True


class DeleteMultipleRequest(BaseModel):
    ids: list[str]


class DeleteMultipleOut(BaseModel):
    deleted_count: int = Field(alias="deletedCount")
    message: str

    class Config:
        populate_by_name = True


class CleanupOut(BaseModel):
    success: bool
    deleted_count: int = Field(alias="deletedCount")
    message: str

    class Config:
        populate_by_name = True


class EntryStatisticsOut(BaseModel):
    total: int
    completed: int
    pending: int
    today_entries: int = Field(alias="todayEntries")

    class Config:
        populate_by_name = True
