import enum

from sqlalchemy import Column, String, Boolean, ForeignKey, UniqueConstraint

from fleetops.database import Base


class SubmissionType(str, enum.Enum):
    DEPARTURE = "departure"
    RETURN = "return"


class Inspection(Base):
    __tablename__ = "inspections"
    __table_args__ = (UniqueConstraint("shift_id", "type", name="uq_inspections_shift_type"),)

    id = Column(String, primary_key=True)
    shift_id = Column(String, ForeignKey("shifts.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String, nullable=False)
    video_url = Column(String, nullable=True)
    trousse_secours = Column(Boolean, nullable=False)
    trousse_secours_photo = Column(String, nullable=True)
    trousse_secours_comment = Column(String, nullable=True)
    roue_secours = Column(Boolean, nullable=False)
    roue_secours_photo = Column(String, nullable=True)
    roue_secours_comment = Column(String, nullable=True)
    extincteur = Column(Boolean, nullable=False)
    extincteur_photo = Column(String, nullable=True)
    extincteur_comment = Column(String, nullable=True)
    booster_batterie = Column(Boolean, nullable=False)
    booster_batterie_photo = Column(String, nullable=True)
    booster_batterie_comment = Column(String, nullable=True)
    completed_at = Column(String, nullable=False)
