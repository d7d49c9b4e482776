from typing import Annotated

from pydantic import BaseModel, StringConstraints

from fleetops.models.vehicle import VehicleStatus
from fleetops.schemas.inspection import InspectionResponse

Text = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class VehicleCreate(BaseModel):
    name: Text
    license_plate: Text
    has_first_aid_kit: bool = True
    has_spare_wheel: bool = True
    has_extinguisher: bool = True
    has_battery_booster: bool = True


class VehicleUpdate(BaseModel):
    name: Text | None = None
    license_plate: Text | None = None
    status: VehicleStatus | None = None
    has_first_aid_kit: bool | None = None
    has_spare_wheel: bool | None = None
    has_extinguisher: bool | None = None
    has_battery_booster: bool | None = None


class VehicleResponse(BaseModel):
    id: str
    name: str
    license_plate: str
    qr_code: str | None = None
    status: str
    has_first_aid_kit: bool
    has_spare_wheel: bool
    has_extinguisher: bool
    has_battery_booster: bool

    model_config = {"from_attributes": True}


class VehicleSafetyResponse(BaseModel):
    vehicle: VehicleResponse
    latest_inspection: InspectionResponse | None = None
    safety_status: str
