import enum

from sqlalchemy import Column, String, Boolean

from fleetops.database import Base


class UserRole(str, enum.Enum):
    DRIVER = "driver"
    TEAM_LEADER = "team_leader"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, nullable=True, unique=True, index=True)
    phone = Column(String, nullable=True, unique=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    role = Column(String, nullable=False, index=True)
    password_hash = Column(String, nullable=True)
    is_approved = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(String, nullable=False)
    updated_at = Column(String, nullable=False)
