import enum

from sqlalchemy import Column, String, Float, ForeignKey

from fleetops.database import Base


class MaintenanceStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class MaintenanceRecord(Base):
    __tablename__ = "maintenance_records"

    id = Column(String, primary_key=True)
    vehicle_id = Column(String, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(String, nullable=False)
    status = Column(String, nullable=False, default=MaintenanceStatus.PENDING.value)
    performed_by = Column(String, ForeignKey("users.id"), nullable=False)
    performed_at = Column(String, nullable=False, index=True)
    cost = Column(Float, nullable=True)
    notes = Column(String, nullable=True)
    completed_at = Column(String, nullable=True)
