import enum

from sqlalchemy import Column, String, Integer, ForeignKey, Index, text

from fleetops.database import Base


class ShiftStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


class Shift(Base):
    __tablename__ = "shifts"
    __table_args__ = (
        # At most one active shift per driver, enforced by the database.
        Index(
            "uq_shifts_driver_active",
            "driver_id",
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'"),
        ),
    )

    id = Column(String, primary_key=True)
    driver_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    vehicle_id = Column(String, ForeignKey("vehicles.id", ondelete="SET NULL"), nullable=True, index=True)
    start_time = Column(String, nullable=False)
    end_time = Column(String, nullable=True)
    status = Column(String, nullable=False, default=ShiftStatus.ACTIVE.value)
    start_battery_count = Column(Integer, nullable=True)
    end_battery_count = Column(Integer, nullable=True)
