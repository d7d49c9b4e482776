import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.models.vehicle import Vehicle, VehicleStatus
from fleetops.utils.exceptions import Conflict, NotFound
from fleetops.utils.timestamps import utcnow_iso

logger = logging.getLogger(__name__)

EQUIPMENT_FIELDS = ("has_first_aid_kit", "has_spare_wheel", "has_extinguisher", "has_battery_booster")


def _plate(value: str) -> str:
    return value.strip().upper()


async def get_vehicle(db: AsyncSession, vehicle_id: str) -> Vehicle:
    vehicle = await db.get(Vehicle, vehicle_id)
    if vehicle is None:
        logger.warning("Vehicle %s not found", vehicle_id)
        raise NotFound("Véhicule introuvable", "VEHICLE_NOT_FOUND")
    return vehicle


async def list_vehicles(db: AsyncSession) -> list[Vehicle]:
    result = await db.execute(select(Vehicle).order_by(Vehicle.name))
    return list(result.scalars().all())


async def create_vehicle(db: AsyncSession, payload) -> Vehicle:
    plate = _plate(payload.license_plate)
    existing = await db.execute(select(Vehicle.id).where(Vehicle.license_plate == plate))
    if existing.first() is not None:
        raise Conflict("Cette immatriculation existe déjà", "CONFLICT")

    vehicle = Vehicle(
        id=str(uuid.uuid4()),
        name=payload.name.strip(),
        license_plate=plate,
        status=VehicleStatus.AVAILABLE.value,
        created_at=utcnow_iso(),
        **{field: getattr(payload, field) for field in EQUIPMENT_FIELDS},
    )
    db.add(vehicle)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict("Cette immatriculation existe déjà", "CONFLICT")
    await db.refresh(vehicle)
    logger.info("Vehicle %s created (%s)", vehicle.id, plate)
    return vehicle


async def update_vehicle(db: AsyncSession, vehicle_id: str, payload) -> Vehicle:
    vehicle = await get_vehicle(db, vehicle_id)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)

    if "name" in changes:
        vehicle.name = changes["name"].strip()
    if "license_plate" in changes:
        vehicle.license_plate = _plate(changes["license_plate"])
    if "status" in changes:
        vehicle.status = VehicleStatus(changes["status"]).value
    for field in EQUIPMENT_FIELDS:
        if field in changes:
            setattr(vehicle, field, changes[field])

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict("Cette immatriculation existe déjà", "CONFLICT")
    await db.refresh(vehicle)
    logger.info("Vehicle %s updated: %s", vehicle_id, sorted(changes))
    return vehicle
