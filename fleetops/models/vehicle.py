import enum

from sqlalchemy import Column, String, Boolean

from fleetops.database import Base


class VehicleStatus(str, enum.Enum):
    AVAILABLE = "available"
    IN_USE = "in_use"
    MAINTENANCE = "maintenance"


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    license_plate = Column(String, nullable=False, unique=True)
    qr_code = Column(String, nullable=True, unique=True, index=True)
    status = Column(String, nullable=False, default=VehicleStatus.AVAILABLE.value)
    has_first_aid_kit = Column(Boolean, nullable=False, default=True)
    has_spare_wheel = Column(Boolean, nullable=False, default=True)
    has_extinguisher = Column(Boolean, nullable=False, default=True)
    has_battery_booster = Column(Boolean, nullable=False, default=True)
    created_at = Column(String, nullable=False)
