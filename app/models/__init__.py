# Fleet Reservation — Database Models
# Import all models here for SQLAlchemy discovery

from app.models.user import User                       # noqa
from app.models.vehicle import Vehicle                 # noqa
from app.models.vehicle_request import VehicleRequest  # noqa
