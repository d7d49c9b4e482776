import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.models.maintenance import MaintenanceRecord, MaintenanceStatus
from fleetops.models.vehicle import VehicleStatus
from fleetops.services import alert_service
from fleetops.services.vehicle_service import get_vehicle
from fleetops.utils.exceptions import Conflict, NotFound
from fleetops.utils.timestamps import utcnow_iso

logger = logging.getLogger(__name__)

RECENT_LIMIT = 50


async def create_record(db: AsyncSession, payload, performed_by: str) -> MaintenanceRecord:
    vehicle = await get_vehicle(db, payload.vehicle_id)

    record = MaintenanceRecord(
        id=str(uuid.uuid4()),
        vehicle_id=vehicle.id,
        description=payload.description.strip(),
        status=MaintenanceStatus.PENDING.value,
        performed_by=performed_by,
        performed_at=utcnow_iso(),
        cost=payload.cost,
        notes=payload.notes or None,
    )
    db.add(record)
    if vehicle.status == VehicleStatus.AVAILABLE.value:
        vehicle.status = VehicleStatus.MAINTENANCE.value

    await db.commit()
    await db.refresh(record)
    logger.info("Maintenance record %s opened on vehicle %s", record.id, vehicle.id)
    return record


async def _has_open_records(db: AsyncSession, vehicle_id: str, excluding: str) -> bool:
    result = await db.execute(
        select(MaintenanceRecord.id).where(
            MaintenanceRecord.vehicle_id == vehicle_id,
            MaintenanceRecord.id != excluding,
            MaintenanceRecord.status != MaintenanceStatus.DONE.value,
        )
    )
    return result.first() is not None


async def update_status(db: AsyncSession, record_id: str, status: MaintenanceStatus) -> MaintenanceRecord:
    record = await db.get(MaintenanceRecord, record_id)
    if record is None:
        raise NotFound("Maintenance introuvable", "MAINTENANCE_NOT_FOUND")

    if record.status == status.value:
        return record
    if record.status == MaintenanceStatus.DONE.value:
        logger.warning("Maintenance record %s is already done", record_id)
        raise Conflict("Cette maintenance est déjà terminée", "MAINTENANCE_CLOSED")

    record.status = status.value
    if status is MaintenanceStatus.DONE:
        record.completed_at = utcnow_iso()
        vehicle = await get_vehicle(db, record.vehicle_id)
        if vehicle.status == VehicleStatus.MAINTENANCE.value and not await _has_open_records(
            db, vehicle.id, record.id
        ):
            vehicle.status = VehicleStatus.AVAILABLE.value
        alert_service.repair_completed_alert(db, record, vehicle)

    await db.commit()
    await db.refresh(record)
    logger.info("Maintenance record %s moved to %s", record_id, status.value)
    return record


async def list_for_vehicle(db: AsyncSession, vehicle_id: str) -> list[MaintenanceRecord]:
    await get_vehicle(db, vehicle_id)
    result = await db.execute(
        select(MaintenanceRecord)
        .where(MaintenanceRecord.vehicle_id == vehicle_id)
        .order_by(MaintenanceRecord.performed_at.desc())
    )
    return list(result.scalars().all())


async def list_recent(db: AsyncSession, limit: int = RECENT_LIMIT) -> list[MaintenanceRecord]:
    result = await db.execute(
        select(MaintenanceRecord).order_by(MaintenanceRecord.performed_at.desc()).limit(limit)
    )
    return list(result.scalars().all())
