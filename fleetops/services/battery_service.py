import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.models.battery_record import BatteryRecord
from fleetops.models.inspection import SubmissionType
from fleetops.services.auth_service import AuthSession
from fleetops.services.compliance import validate_battery_record
from fleetops.services.role_gate import ensure_shift_access
from fleetops.services.shift_service import get_owned_active_shift, get_shift
from fleetops.utils.exceptions import Conflict, InvalidInput, NotFound
from fleetops.utils.timestamps import utcnow_iso

logger = logging.getLogger(__name__)


def _duplicate(kind: str) -> Conflict:
    return Conflict(f"Un comptage de {kind} existe déjà pour ce service", "DUPLICATE_SUBMISSION")


async def create_battery_record(db: AsyncSession, payload, driver_id: str) -> BatteryRecord:
    issues = validate_battery_record(payload)
    if issues:
        logger.warning("Battery record rejected for shift %s: %s", payload.shift_id, [i.field for i in issues])
        raise InvalidInput(
            f"Comptage invalide: {issues[0].field} ({issues[0].reason})",
            data={"field": issues[0].field, "issues": [i.to_dict() for i in issues]},
        )

    shift = await get_owned_active_shift(db, payload.shift_id, driver_id)
    kind = payload.type.value

    existing = await db.execute(
        select(BatteryRecord.id).where(BatteryRecord.shift_id == shift.id, BatteryRecord.type == kind)
    )
    if existing.first() is not None:
        logger.warning("Duplicate %s battery record for shift %s", kind, shift.id)
        raise _duplicate(kind)

    record = BatteryRecord(
        id=str(uuid.uuid4()),
        shift_id=shift.id,
        type=kind,
        count=payload.count,
        photo_url=payload.photo_url.strip(),
        comment=payload.comment.strip(),
        driver_signature=payload.driver_signature.strip(),
        created_at=utcnow_iso(),
    )
    db.add(record)
    if kind == SubmissionType.DEPARTURE.value:
        shift.start_battery_count = payload.count
    else:
        shift.end_battery_count = payload.count

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise _duplicate(kind)
    await db.refresh(record)

    logger.info("Battery record %s (%s, count=%d) stored for shift %s", record.id, kind, record.count, shift.id)
    return record


async def sign_battery_record(db: AsyncSession, record_id: str, signature: str, signer_id: str) -> BatteryRecord:
    """Attach the team leader countersignature; signing again replaces it."""
    if not signature or not signature.strip():
        raise InvalidInput("Signature requise", data={"field": "team_leader_signature"})

    record = await db.get(BatteryRecord, record_id)
    if record is None:
        logger.warning("Battery record %s not found", record_id)
        raise NotFound("Comptage de batteries introuvable", "BATTERY_RECORD_NOT_FOUND")

    if record.team_leader_signature:
        logger.info("Overwriting countersignature on battery record %s", record_id)
    record.team_leader_signature = signature.strip()
    record.signed_by = signer_id
    record.signed_at = utcnow_iso()
    await db.commit()
    await db.refresh(record)

    logger.info("Battery record %s countersigned by %s", record_id, signer_id)
    return record


async def list_battery_records(db: AsyncSession, session: AuthSession, shift_id: str) -> list[BatteryRecord]:
    shift = await get_shift(db, shift_id)
    ensure_shift_access(session, shift)
    result = await db.execute(
        select(BatteryRecord).where(BatteryRecord.shift_id == shift_id).order_by(BatteryRecord.created_at)
    )
    return list(result.scalars().all())
