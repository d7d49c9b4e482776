from sqlalchemy import Column, String, Float, ForeignKey

from fleetops.database import Base


class LocationUpdate(Base):
    __tablename__ = "location_updates"

    id = Column(String, primary_key=True)
    shift_id = Column(String, ForeignKey("shifts.id", ondelete="CASCADE"), nullable=False, index=True)
    driver_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    accuracy = Column(Float, nullable=True)
    timestamp = Column(String, nullable=False, index=True)
