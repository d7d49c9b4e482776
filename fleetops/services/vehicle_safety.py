"""QR-code lookup and the safety status shown after a scan."""
import enum
import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.models.inspection import Inspection
from fleetops.models.shift import Shift
from fleetops.models.vehicle import Vehicle
from fleetops.services.compliance import failed_items
from fleetops.utils.exceptions import NotFound

logger = logging.getLogger(__name__)

QR_PREFIX = "VEH-"


class SafetyStatus(str, enum.Enum):
    OK = "ok"
    ISSUES = "issues"


@dataclass
class VehicleSafety:
    vehicle: Vehicle
    latest_inspection: Inspection | None
    safety_status: SafetyStatus


def safety_status_for(inspection: Inspection | None) -> SafetyStatus:
    # A vehicle that was never inspected counts as ok.
    if inspection is None:
        return SafetyStatus.OK
    return SafetyStatus.ISSUES if failed_items(inspection) else SafetyStatus.OK


async def latest_inspection_for_vehicle(db: AsyncSession, vehicle_id: str) -> Inspection | None:
    result = await db.execute(
        select(Inspection)
        .join(Shift, Shift.id == Inspection.shift_id)
        .where(Shift.vehicle_id == vehicle_id)
        .order_by(Inspection.completed_at.desc())
        .limit(1)
    )
    return result.scalars().first()


async def resolve_by_qr(db: AsyncSession, qr_code: str) -> VehicleSafety:
    result = await db.execute(select(Vehicle).where(Vehicle.qr_code == qr_code))
    vehicle = result.scalars().first()
    if vehicle is None:
        logger.warning("No vehicle for QR code %s", qr_code)
        raise NotFound("Véhicule introuvable", "VEHICLE_NOT_FOUND")

    inspection = await latest_inspection_for_vehicle(db, vehicle.id)
    status = safety_status_for(inspection)
    logger.info("QR lookup resolved vehicle %s (safety=%s)", vehicle.id, status.value)
    return VehicleSafety(vehicle=vehicle, latest_inspection=inspection, safety_status=status)


async def generate_qr_code(db: AsyncSession, vehicle_id: str) -> Vehicle:
    """Assign a QR code once; an already generated code is returned unchanged."""
    vehicle = await db.get(Vehicle, vehicle_id)
    if vehicle is None:
        raise NotFound("Véhicule introuvable", "VEHICLE_NOT_FOUND")

    if vehicle.qr_code:
        return vehicle

    vehicle.qr_code = f"{QR_PREFIX}{uuid.uuid4().hex[:12].upper()}"
    await db.commit()
    await db.refresh(vehicle)
    logger.info("QR code generated for vehicle %s", vehicle_id)
    return vehicle
