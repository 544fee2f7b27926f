# app/models/vehicle_entry.py
"""
Vehicle entry log table.
One row per visitor/vehicle, from entrance to the (optional) exit.
Rows are purged by the cleanup jobs according to created_at.
"""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, JSON, String
from app.database import Base


class VehicleEntry(Base):
    __tablename__ = "vehicle_entries"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    first_name = Column(String(200), nullable=False)
    last_name = Column(String(200), nullable=False)
    national_id = Column(String(50), nullable=False, index=True)
    vehicle_types = Column(JSON, nullable=False, default=list)   # ["Carro", "Moto", ...]
    plate = Column(String(50), nullable=False, index=True)
    entry_time = Column(DateTime, nullable=False)
    destinations = Column(JSON, nullable=False, default=dict)    # {"Entidades": ["Etecsa", ...]}
    exit_time = Column(DateTime)
    photo_url = Column(String(500))
    created_at = Column(DateTime, nullable=False, default=datetime.now, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    def __repr__(self):
        return f"<VehicleEntry {self.id} plate={self.plate} exit={self.exit_time}>"
