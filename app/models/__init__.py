# Vehicle Entry Log - Database Models
# Import all models here for SQLAlchemy discovery

from app.models.user import User, UserRole                 # noqa
from app.models.vehicle_entry import VehicleEntry          # noqa
