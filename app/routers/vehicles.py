"""Fleet vehicles: full list and availability over a date range."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional
from app.database import get_db
from app.schemas.vehicle import VehicleOut
from app.services.vehicle_service import get_available_vehicles, list_vehicles
from app.utils.dates import parse_datetime

router = APIRouter()


@router.get("/vehicles", response_model=list[VehicleOut], summary="List all vehicles")
def get_vehicles(db: Session = Depends(get_db)):
    return list_vehicles(db)


@router.get("/vehicles/available", response_model=list[VehicleOut],
            summary="Vehicles free for a date range")
def get_available(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    """
    Vehicles with no pending or approved request overlapping [startDate, endDate).
    Accepts ISO dates or datetimes. startDate == endDate checks a single instant.
    """
    if not start_date or not end_date:
        raise HTTPException(status_code=400, detail="Start date and end date are required")

    start = parse_datetime(start_date)
    end = parse_datetime(end_date)
    if start is None or end is None:
        raise HTTPException(status_code=400, detail="Invalid date format")
    if end < start:
        raise HTTPException(status_code=400, detail="End date must not be before start date")

    return get_available_vehicles(db, start, end)
