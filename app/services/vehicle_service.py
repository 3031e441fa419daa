"""
Vehicle queries: listing, availability over a date range, and fleet stats.

A request blocks its vehicle when it is pending or approved and its range
overlaps the queried one. Ranges are half-open [start, end): a booking that
ends exactly when another starts does not conflict.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session
from app.models.enums import BLOCKING_STATUSES, RequestStatus
from app.models.vehicle import Vehicle
from app.models.vehicle_request import VehicleRequest
from app.utils.dates import utcnow
from app.utils.logger import get_logger

logger = get_logger(__name__)


def list_vehicles(db: Session) -> list[Vehicle]:
    return db.query(Vehicle).order_by(Vehicle.id).all()


def get_vehicle(db: Session, vehicle_id: int) -> Optional[Vehicle]:
    return db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()


def _overlaps(start: datetime, end: datetime):
    return and_(VehicleRequest.start_date < end, VehicleRequest.end_date > start)


def get_available_vehicles(db: Session, start: datetime, end: datetime) -> list[Vehicle]:
    """
    Vehicles with no pending or approved request overlapping [start, end).
    Rejected requests never block. start == end is a point-in-time query.
    """
    busy = select(VehicleRequest.vehicle_id).where(
        VehicleRequest.status.in_(BLOCKING_STATUSES),
        _overlaps(start, end),
    )
    vehicles = db.query(Vehicle).filter(~Vehicle.id.in_(busy)).order_by(Vehicle.id).all()
    logger.debug(f"[AVAILABILITY] {start} → {end}: {len(vehicles)} free")
    return vehicles


def is_vehicle_available(db: Session, vehicle_id: int, start: datetime, end: datetime) -> bool:
    return any(v.id == vehicle_id for v in get_available_vehicles(db, start, end))


def get_vehicle_stats(db: Session) -> dict:
    """Fleet snapshot right now: total, free, in use, and open requests."""
    now = utcnow()
    total = db.query(func.count(Vehicle.id)).scalar() or 0
    in_use = db.query(func.count(func.distinct(VehicleRequest.vehicle_id))).filter(
        VehicleRequest.status == RequestStatus.approved.value,
        _overlaps(now, now),
    ).scalar() or 0
    pending = db.query(func.count(VehicleRequest.id)).filter(
        VehicleRequest.status == RequestStatus.pending.value,
    ).scalar() or 0
    available = len(get_available_vehicles(db, now, now))
    return {"total": total, "available": available, "in_use": in_use,
            "pending_requests": pending}
