import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.config import settings
from fleetops.models.user import User, UserRole
from fleetops.models.vehicle import Vehicle, VehicleStatus
from fleetops.services.auth_service import hash_password
from fleetops.utils.timestamps import utcnow_iso

logger = logging.getLogger(__name__)

SEED_VEHICLES = [
    {"id": str(uuid.uuid5(uuid.NAMESPACE_DNS, "vehicle-van-001")), "name": "Renault Master", "license_plate": "GH-101-AA", "qr_code": "VEH-SEED00000001"},
    {"id": str(uuid.uuid5(uuid.NAMESPACE_DNS, "vehicle-van-002")), "name": "Renault Master", "license_plate": "GH-102-AA", "qr_code": "VEH-SEED00000002"},
    {"id": str(uuid.uuid5(uuid.NAMESPACE_DNS, "vehicle-ute-001")), "name": "Peugeot Partner", "license_plate": "GH-201-BB", "qr_code": "VEH-SEED00000003"},
]

SEED_LEADER_ID = str(uuid.uuid5(uuid.NAMESPACE_DNS, "user-team-leader"))


async def seed_data(session: AsyncSession) -> None:
    now = utcnow_iso()
    email = settings.bootstrap_leader_email.strip().lower()

    result = await session.execute(select(User).where(User.email == email))
    if result.scalars().first() is None:
        logger.info("Creating default team leader %s", email)
        session.add(User(
            id=SEED_LEADER_ID,
            email=email,
            password_hash=hash_password(settings.bootstrap_leader_password),
            first_name=settings.bootstrap_leader_first_name,
            last_name=settings.bootstrap_leader_last_name,
            role=UserRole.TEAM_LEADER.value,
            is_approved=True,
            is_active=True,
            created_at=now,
            updated_at=now,
        ))

    result = await session.execute(select(Vehicle).limit(1))
    if result.scalars().first() is None:
        for v in SEED_VEHICLES:
            session.add(Vehicle(status=VehicleStatus.AVAILABLE.value, created_at=now, **v))

    await session.commit()
