from pydantic import BaseModel


class ShiftStart(BaseModel):
    vehicle_id: str | None = None


class ShiftResponse(BaseModel):
    id: str
    driver_id: str
    vehicle_id: str | None = None
    start_time: str
    end_time: str | None = None
    status: str
    start_battery_count: int | None = None
    end_battery_count: int | None = None

    model_config = {"from_attributes": True}
