# app/schemas/vehicle.py
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Optional


class VehicleOut(BaseModel):
    id: int
    name: str
    make: Optional[str]
    model: Optional[str]
    year: Optional[int]
    plate_number: str
    color: Optional[str]
    seats: Optional[int]

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class VehicleStatsOut(BaseModel):
    total: int
    available: int
    in_use: int
    pending_requests: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class PendingCountOut(BaseModel):
    count: int
