from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints

Text = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class UserResponse(BaseModel):
    id: str
    email: str | None = None
    phone: str | None = None
    first_name: str
    last_name: str
    role: str
    is_approved: bool
    is_active: bool

    model_config = {"from_attributes": True}


class DriverCreate(BaseModel):
    phone: Text
    first_name: Text
    last_name: Text


class TeamLeaderCreate(BaseModel):
    email: Annotated[str, StringConstraints(strip_whitespace=True, min_length=3)]
    password: str = Field(min_length=8)
    first_name: Text
    last_name: Text
