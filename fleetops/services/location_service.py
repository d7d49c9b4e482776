"""Already-sampled GPS points attached to active shifts."""
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.models.location import LocationUpdate
from fleetops.models.shift import Shift, ShiftStatus
from fleetops.models.user import User
from fleetops.services.shift_service import get_active_shift, get_owned_active_shift
from fleetops.utils.exceptions import NotFound
from fleetops.utils.timestamps import to_utc_iso, utcnow_iso

logger = logging.getLogger(__name__)


async def record_location(db: AsyncSession, payload, driver_id: str) -> LocationUpdate:
    shift = await get_owned_active_shift(db, payload.shift_id, driver_id)
    point = LocationUpdate(
        id=str(uuid.uuid4()),
        shift_id=shift.id,
        driver_id=driver_id,
        latitude=payload.latitude,
        longitude=payload.longitude,
        accuracy=payload.accuracy,
        timestamp=to_utc_iso(payload.timestamp) if payload.timestamp else utcnow_iso(),
    )
    db.add(point)
    await db.commit()
    await db.refresh(point)
    logger.debug("Location stored for shift %s", shift.id)
    return point


async def _latest_point(db: AsyncSession, shift_id: str) -> LocationUpdate | None:
    result = await db.execute(
        select(LocationUpdate)
        .where(LocationUpdate.shift_id == shift_id)
        .order_by(LocationUpdate.timestamp.desc())
        .limit(1)
    )
    return result.scalars().first()


async def fleet_positions(db: AsyncSession) -> list[dict]:
    result = await db.execute(
        select(Shift, User)
        .join(User, User.id == Shift.driver_id)
        .where(Shift.status == ShiftStatus.ACTIVE.value)
    )
    positions = []
    for shift, driver in result.all():
        point = await _latest_point(db, shift.id)
        if point is None:
            continue
        positions.append({
            "driver_id": driver.id,
            "first_name": driver.first_name,
            "last_name": driver.last_name,
            "shift_id": shift.id,
            "vehicle_id": shift.vehicle_id,
            "latitude": point.latitude,
            "longitude": point.longitude,
            "timestamp": point.timestamp,
        })
    return positions


async def driver_position(db: AsyncSession, driver_id: str) -> LocationUpdate:
    shift = await get_active_shift(db, driver_id)
    if shift is None:
        raise NotFound("Aucun service en cours pour ce chauffeur", "SHIFT_NOT_FOUND")
    point = await _latest_point(db, shift.id)
    if point is None:
        raise NotFound("Aucune position connue pour ce chauffeur", "LOCATION_NOT_FOUND")
    return point
