import enum

from sqlalchemy import Column, String, JSON

from fleetops.database import Base


class AlertType(str, enum.Enum):
    DRIVER_PENDING = "driver_pending"
    INSPECTION_FAILED = "inspection_failed"
    REPAIR_COMPLETED = "repair_completed"
    # Declared for clients; no rule emits these yet.
    BATTERY_MISMATCH = "battery_mismatch"
    SAFETY_ITEM_MISSING = "safety_item_missing"


class Alert(Base):
    __tablename__ = "alerts"

    id = Column(String, primary_key=True)
    type = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    message = Column(String, nullable=False)
    payload = Column(JSON, nullable=False, default=dict)
    created_at = Column(String, nullable=False, index=True)
    read_at = Column(String, nullable=True)
