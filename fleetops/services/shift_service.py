"""Shift state machine: NONE -> ACTIVE -> COMPLETED, one active shift per driver."""
import asyncio
import logging
import uuid
import weakref

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.models.battery_record import BatteryRecord
from fleetops.models.inspection import Inspection, SubmissionType
from fleetops.models.shift import Shift, ShiftStatus
from fleetops.models.user import UserRole
from fleetops.models.vehicle import Vehicle, VehicleStatus
from fleetops.utils.exceptions import Conflict, Forbidden, NotFound
from fleetops.utils.timestamps import utcnow_iso

logger = logging.getLogger(__name__)

# Locks disappear once no start_shift call holds a reference to them.
_driver_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()


def _driver_lock(driver_id: str) -> asyncio.Lock:
    lock = _driver_locks.get(driver_id)
    if lock is None:
        lock = asyncio.Lock()
        _driver_locks[driver_id] = lock
    return lock


def _active_shift_conflict(shift_id: str | None = None) -> Conflict:
    return Conflict(
        "Vous avez déjà un service en cours",
        "ACTIVE_SHIFT_EXISTS",
        data={"shift_id": shift_id} if shift_id else None,
    )


async def get_active_shift(db: AsyncSession, driver_id: str) -> Shift | None:
    result = await db.execute(
        select(Shift).where(Shift.driver_id == driver_id, Shift.status == ShiftStatus.ACTIVE.value)
    )
    return result.scalars().first()


async def get_shift(db: AsyncSession, shift_id: str) -> Shift:
    shift = await db.get(Shift, shift_id)
    if shift is None:
        logger.warning("Shift %s not found", shift_id)
        raise NotFound("Service introuvable", "SHIFT_NOT_FOUND")
    return shift


async def get_owned_active_shift(db: AsyncSession, shift_id: str, driver_id: str) -> Shift:
    """Shift the driver may still submit data for."""
    shift = await get_shift(db, shift_id)
    if shift.driver_id != driver_id:
        logger.warning("Driver %s does not own shift %s", driver_id, shift_id)
        raise Forbidden("Accès refusé. Ce service ne vous appartient pas")
    if shift.status != ShiftStatus.ACTIVE.value:
        logger.warning("Shift %s is not active (status=%s)", shift_id, shift.status)
        raise Conflict("Ce service n'est pas en cours", "SHIFT_NOT_ACTIVE")
    return shift


async def start_shift(db: AsyncSession, driver_id: str, vehicle_id: str | None = None) -> Shift:
    lock = _driver_lock(driver_id)
    async with lock:
        existing = await get_active_shift(db, driver_id)
        if existing is not None:
            logger.warning("Driver %s already has active shift %s", driver_id, existing.id)
            raise _active_shift_conflict(existing.id)

        vehicle = None
        if vehicle_id:
            vehicle = await db.get(Vehicle, vehicle_id)
            if vehicle is None:
                logger.warning("Vehicle %s not found", vehicle_id)
                raise NotFound("Véhicule introuvable", "VEHICLE_NOT_FOUND")

        shift = Shift(
            id=str(uuid.uuid4()),
            driver_id=driver_id,
            vehicle_id=vehicle_id or None,
            start_time=utcnow_iso(),
            status=ShiftStatus.ACTIVE.value,
        )
        db.add(shift)
        if vehicle is not None and vehicle.status == VehicleStatus.AVAILABLE.value:
            vehicle.status = VehicleStatus.IN_USE.value

        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            # Only the partial unique index means another start won the race.
            winner = await get_active_shift(db, driver_id)
            if winner is None:
                logger.warning("Shift insert for driver %s violated a constraint other than the active-shift index", driver_id)
                raise
            logger.warning("Concurrent start rejected for driver %s", driver_id)
            raise _active_shift_conflict(winner.id)

    await db.refresh(shift)
    logger.info("Shift %s started by driver %s (vehicle=%s)", shift.id, driver_id, vehicle_id)
    return shift


async def missing_return_compliance(db: AsyncSession, shift_id: str) -> list[str]:
    missing = []
    inspection = await db.execute(
        select(Inspection.id).where(
            Inspection.shift_id == shift_id, Inspection.type == SubmissionType.RETURN.value
        )
    )
    if inspection.first() is None:
        missing.append("return_inspection")

    record = await db.execute(
        select(BatteryRecord.id).where(
            BatteryRecord.shift_id == shift_id, BatteryRecord.type == SubmissionType.RETURN.value
        )
    )
    if record.first() is None:
        missing.append("return_battery_record")
    return missing


async def end_shift(db: AsyncSession, shift_id: str, requester_id: str) -> Shift:
    shift = await get_shift(db, shift_id)

    if shift.driver_id != requester_id:
        logger.warning("Driver %s tried to end shift %s owned by %s", requester_id, shift_id, shift.driver_id)
        raise Forbidden("Accès refusé. Vous ne pouvez terminer que vos propres services")

    if shift.status != ShiftStatus.ACTIVE.value:
        logger.warning("Shift %s is not active (status=%s)", shift_id, shift.status)
        raise Conflict("Ce service n'est pas en cours", "SHIFT_NOT_ACTIVE")

    missing = await missing_return_compliance(db, shift_id)
    if missing:
        logger.warning("Shift %s cannot end, missing %s", shift_id, missing)
        raise Conflict(
            "Inspection et comptage des batteries de retour requis avant de terminer le service",
            "INCOMPLETE_COMPLIANCE",
            data={"missing": missing},
        )

    shift.status = ShiftStatus.COMPLETED.value
    shift.end_time = utcnow_iso()

    if shift.vehicle_id:
        vehicle = await db.get(Vehicle, shift.vehicle_id)
        if vehicle is not None and vehicle.status == VehicleStatus.IN_USE.value:
            vehicle.status = VehicleStatus.AVAILABLE.value

    await db.commit()
    await db.refresh(shift)
    logger.info("Shift %s completed by driver %s", shift_id, requester_id)
    return shift


async def get_shift_history(db: AsyncSession, requester_id: str, role: str) -> list[Shift]:
    query = select(Shift)
    if role == UserRole.DRIVER.value:
        query = query.where(Shift.driver_id == requester_id)
    result = await db.execute(query.order_by(Shift.start_time.desc()))
    return list(result.scalars().all())
