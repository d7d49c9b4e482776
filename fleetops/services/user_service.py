import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.models.user import User, UserRole
from fleetops.services import alert_service
from fleetops.services.auth_service import SessionStore, hash_password
from fleetops.utils.exceptions import Conflict, NotFound
from fleetops.utils.timestamps import utcnow_iso

logger = logging.getLogger(__name__)


async def _ensure_unique(db: AsyncSession, column, value: str, message: str) -> None:
    existing = await db.execute(select(User.id).where(column == value))
    if existing.first() is not None:
        raise Conflict(message, "CONFLICT")


async def create_driver(db: AsyncSession, phone: str, first_name: str, last_name: str) -> User:
    phone = phone.strip()
    await _ensure_unique(db, User.phone, phone, "Ce numéro de téléphone est déjà utilisé")

    now = utcnow_iso()
    driver = User(
        id=str(uuid.uuid4()),
        phone=phone,
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        role=UserRole.DRIVER.value,
        is_approved=False,
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    db.add(driver)
    alert_service.driver_pending_alert(db, driver)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict("Ce numéro de téléphone est déjà utilisé", "CONFLICT")
    await db.refresh(driver)
    logger.info("Driver %s created, pending approval", driver.id)
    return driver


async def create_team_leader(
    db: AsyncSession, email: str, password: str, first_name: str, last_name: str
) -> User:
    email = email.strip().lower()
    await _ensure_unique(db, User.email, email, "Cet email est déjà utilisé")

    now = utcnow_iso()
    leader = User(
        id=str(uuid.uuid4()),
        email=email,
        password_hash=hash_password(password),
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        role=UserRole.TEAM_LEADER.value,
        is_approved=True,
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    db.add(leader)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict("Cet email est déjà utilisé", "CONFLICT")
    await db.refresh(leader)
    logger.info("Team leader %s created", leader.id)
    return leader


async def list_drivers(db: AsyncSession) -> dict[str, list[User]]:
    result = await db.execute(
        select(User).where(User.role == UserRole.DRIVER.value).order_by(User.last_name, User.first_name)
    )
    drivers = result.scalars().all()
    return {
        "active": [d for d in drivers if d.is_active and d.is_approved],
        "pending": [d for d in drivers if d.is_active and not d.is_approved],
        "deleted": [d for d in drivers if not d.is_active],
    }


async def _get_driver(db: AsyncSession, driver_id: str) -> User:
    driver = await db.get(User, driver_id)
    if driver is None or driver.role != UserRole.DRIVER.value:
        logger.warning("Driver %s not found", driver_id)
        raise NotFound("Chauffeur introuvable", "USER_NOT_FOUND")
    return driver


async def approve_driver(db: AsyncSession, driver_id: str) -> User:
    driver = await _get_driver(db, driver_id)
    driver.is_approved = True
    driver.updated_at = utcnow_iso()
    await db.commit()
    await db.refresh(driver)
    logger.info("Driver %s approved", driver_id)
    return driver


async def revoke_driver(db: AsyncSession, store: SessionStore, driver_id: str) -> User:
    driver = await _get_driver(db, driver_id)
    driver.is_active = False
    driver.updated_at = utcnow_iso()
    await db.commit()
    await db.refresh(driver)
    dropped = store.delete_for_user(driver_id)
    logger.info("Driver %s revoked (%d session(s) dropped)", driver_id, dropped)
    return driver


async def restore_driver(db: AsyncSession, driver_id: str) -> User:
    driver = await _get_driver(db, driver_id)
    driver.is_active = True
    driver.updated_at = utcnow_iso()
    await db.commit()
    await db.refresh(driver)
    logger.info("Driver %s restored", driver_id)
    return driver
