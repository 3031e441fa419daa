# app/schemas/vehicle_request.py
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Optional
from app.models.enums import DecisionStatus
from app.schemas.user import UserOut
from app.schemas.vehicle import VehicleOut
from app.utils.dates import to_utc_naive


class VehicleRequestCreate(BaseModel):
    vehicle_id: int
    user_id: int
    start_date: datetime
    end_date: datetime
    purpose: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("start_date", "end_date")
    @classmethod
    def _normalise(cls, value: datetime) -> datetime:
        return to_utc_naive(value)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class StatusUpdate(BaseModel):
    status: DecisionStatus
    admin_id: Optional[int] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class VehicleRequestOut(BaseModel):
    id: int
    vehicle_id: int
    user_id: int
    start_date: datetime
    end_date: datetime
    purpose: Optional[str]
    status: str
    admin_id: Optional[int]
    access_code: Optional[str]
    created_at: Optional[datetime]
    decided_at: Optional[datetime]

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class VehicleRequestDetailOut(VehicleRequestOut):
    """Request plus the vehicle, requester and deciding admin."""
    vehicle: VehicleOut
    user: UserOut
    admin: Optional[UserOut] = None
