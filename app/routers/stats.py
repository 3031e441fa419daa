"""Dashboard stats: fleet snapshot and pending request count."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.vehicle import PendingCountOut, VehicleStatsOut
from app.services.request_service import count_pending
from app.services.vehicle_service import get_vehicle_stats

router = APIRouter()


@router.get("/stats/vehicles", response_model=VehicleStatsOut, summary="Fleet usage right now")
def vehicle_stats(db: Session = Depends(get_db)):
    return get_vehicle_stats(db)


@router.get("/stats/pending-requests", response_model=PendingCountOut,
            summary="Number of requests awaiting a decision")
def pending_requests(db: Session = Depends(get_db)):
    return {"count": count_pending(db)}
