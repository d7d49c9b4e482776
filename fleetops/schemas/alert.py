from typing import Any

from pydantic import BaseModel


class AlertResponse(BaseModel):
    id: str
    type: str
    title: str
    message: str
    payload: dict[str, Any]
    created_at: str
    read_at: str | None = None

    model_config = {"from_attributes": True}
