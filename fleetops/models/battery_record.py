from sqlalchemy import Column, String, Integer, ForeignKey, UniqueConstraint

from fleetops.database import Base


class BatteryRecord(Base):
    __tablename__ = "battery_records"
    __table_args__ = (UniqueConstraint("shift_id", "type", name="uq_battery_records_shift_type"),)

    id = Column(String, primary_key=True)
    shift_id = Column(String, ForeignKey("shifts.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String, nullable=False)
    count = Column(Integer, nullable=False)
    photo_url = Column(String, nullable=False)
    comment = Column(String, nullable=False)
    driver_signature = Column(String, nullable=False)
    team_leader_signature = Column(String, nullable=True)
    signed_by = Column(String, ForeignKey("users.id"), nullable=True)
    signed_at = Column(String, nullable=True)
    created_at = Column(String, nullable=False)
