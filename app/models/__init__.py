# Parking Slot Management — Database Models
# Import all models here for SQLAlchemy discovery

from app.models.user import User                  # noqa
from app.models.vehicle import Vehicle            # noqa
from app.models.parking_slot import ParkingSlot   # noqa
from app.models.slot_request import SlotRequest   # noqa
from app.models.action_log import ActionLog       # noqa
