import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.models.inspection import Inspection
from fleetops.services import alert_service
from fleetops.services.auth_service import AuthSession
from fleetops.services.compliance import SAFETY_ITEMS, validate_inspection
from fleetops.services.role_gate import ensure_shift_access
from fleetops.services.shift_service import get_owned_active_shift, get_shift
from fleetops.utils.exceptions import Conflict, InvalidInput
from fleetops.utils.timestamps import utcnow_iso

logger = logging.getLogger(__name__)


def _duplicate(kind: str) -> Conflict:
    return Conflict(f"Une inspection de {kind} existe déjà pour ce service", "DUPLICATE_SUBMISSION")


async def create_inspection(db: AsyncSession, payload, driver_id: str) -> tuple[Inspection, bool]:
    """Store an inspection; returns it and whether an ``inspection_failed`` alert was raised."""
    issues = validate_inspection(payload)
    if issues:
        logger.warning("Inspection rejected for shift %s: %s", payload.shift_id, [i.field for i in issues])
        raise InvalidInput(
            f"Inspection invalide: {issues[0].field} ({issues[0].reason})",
            data={"field": issues[0].field, "issues": [i.to_dict() for i in issues]},
        )

    shift = await get_owned_active_shift(db, payload.shift_id, driver_id)
    kind = payload.type.value

    existing = await db.execute(
        select(Inspection.id).where(Inspection.shift_id == shift.id, Inspection.type == kind)
    )
    if existing.first() is not None:
        logger.warning("Duplicate %s inspection for shift %s", kind, shift.id)
        raise _duplicate(kind)

    values = {"video_url": payload.video_url or None}
    for item in SAFETY_ITEMS:
        values[item] = getattr(payload, item)
        values[f"{item}_photo"] = getattr(payload, f"{item}_photo") or None
        values[f"{item}_comment"] = getattr(payload, f"{item}_comment") or None

    inspection = Inspection(
        id=str(uuid.uuid4()),
        shift_id=shift.id,
        type=kind,
        completed_at=utcnow_iso(),
        **values,
    )
    db.add(inspection)
    alert = alert_service.inspection_failed_alert(db, inspection, shift)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise _duplicate(kind)
    await db.refresh(inspection)

    logger.info("Inspection %s (%s) stored for shift %s", inspection.id, kind, shift.id)
    return inspection, alert is not None


async def list_inspections(db: AsyncSession, session: AuthSession, shift_id: str) -> list[Inspection]:
    shift = await get_shift(db, shift_id)
    ensure_shift_access(session, shift)
    result = await db.execute(
        select(Inspection).where(Inspection.shift_id == shift_id).order_by(Inspection.completed_at)
    )
    return list(result.scalars().all())
