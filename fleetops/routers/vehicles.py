from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleetops.database import get_db
from fleetops.dependencies import require
from fleetops.schemas.inspection import InspectionResponse
from fleetops.schemas.vehicle import VehicleCreate, VehicleResponse, VehicleSafetyResponse, VehicleUpdate
from fleetops.services import vehicle_safety, vehicle_service
from fleetops.services.role_gate import Capability
from fleetops.utils.response import success_response

router = APIRouter(prefix="/vehicles", tags=["vehicles"])

_any_user = [Depends(require(Capability.ANY_AUTHENTICATED))]
_managers = [Depends(require(Capability.TEAM_LEADER_OR_ADMIN))]


@router.get("", dependencies=_any_user)
async def get_vehicles(db: AsyncSession = Depends(get_db)):
    vehicles = await vehicle_service.list_vehicles(db)
    return success_response(data=[VehicleResponse.model_validate(v).model_dump() for v in vehicles])


@router.post("", status_code=201, dependencies=_managers)
async def create_vehicle(payload: VehicleCreate, db: AsyncSession = Depends(get_db)):
    vehicle = await vehicle_service.create_vehicle(db, payload)
    return success_response(data=VehicleResponse.model_validate(vehicle).model_dump())


@router.get("/qr/{qr_code}", dependencies=_any_user)
async def get_vehicle_by_qr(qr_code: str, db: AsyncSession = Depends(get_db)):
    resolved = await vehicle_safety.resolve_by_qr(db, qr_code)
    data = VehicleSafetyResponse(
        vehicle=VehicleResponse.model_validate(resolved.vehicle),
        latest_inspection=(
            InspectionResponse.model_validate(resolved.latest_inspection)
            if resolved.latest_inspection else None
        ),
        safety_status=resolved.safety_status.value,
    )
    return success_response(data=data.model_dump())


@router.get("/{vehicle_id}", dependencies=_any_user)
async def get_vehicle(vehicle_id: str, db: AsyncSession = Depends(get_db)):
    vehicle = await vehicle_service.get_vehicle(db, vehicle_id)
    return success_response(data=VehicleResponse.model_validate(vehicle).model_dump())


@router.put("/{vehicle_id}", dependencies=_managers)
async def update_vehicle(vehicle_id: str, payload: VehicleUpdate, db: AsyncSession = Depends(get_db)):
    vehicle = await vehicle_service.update_vehicle(db, vehicle_id, payload)
    return success_response(data=VehicleResponse.model_validate(vehicle).model_dump())


@router.post("/{vehicle_id}/qr", dependencies=_managers)
async def generate_qr_code(vehicle_id: str, db: AsyncSession = Depends(get_db)):
    vehicle = await vehicle_safety.generate_qr_code(db, vehicle_id)
    return success_response(data=VehicleResponse.model_validate(vehicle).model_dump())
