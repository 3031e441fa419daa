"""
Vehicle request lifecycle: creation, listing, and the one-time admin decision.

pending → approved  (4-digit access code issued)
pending → rejected  (no code)

The availability check and the insert in create_request are not run in one
transaction, so two simultaneous submissions for the same window can both
be admitted.
"""

import random
from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.config import settings
from app.models.enums import DecisionStatus, RequestStatus, UserRole
from app.models.vehicle_request import VehicleRequest
from app.schemas.vehicle_request import VehicleRequestCreate
from app.services.errors import (
    ConflictError, InvalidAdminError, InvalidDateRangeError, NotFoundError, UnknownUserError,
)
from app.services.user_service import get_user
from app.services.vehicle_service import is_vehicle_available
from app.utils.dates import utcnow
from app.utils.logger import get_logger

logger = get_logger(__name__)


def generate_access_code() -> str:
    """Four random digits, 1000-9999. Not unique, not cryptographically strong."""
    return str(random.randint(1000, 9999))


def get_request(db: Session, request_id: int) -> Optional[VehicleRequest]:
    return db.query(VehicleRequest).filter(VehicleRequest.id == request_id).first()


def list_requests(db: Session, user_id: Optional[int] = None,
                  status: Optional[RequestStatus] = None) -> list[VehicleRequest]:
    """All requests, newest first. Filter by requester and/or status."""
    q = db.query(VehicleRequest)
    if user_id is not None:
        q = q.filter(VehicleRequest.user_id == user_id)
    if status is not None:
        q = q.filter(VehicleRequest.status == status.value)
    return q.order_by(VehicleRequest.created_at.desc(), VehicleRequest.id.desc()).all()


def count_pending(db: Session) -> int:
    return db.query(func.count(VehicleRequest.id)).filter(
        VehicleRequest.status == RequestStatus.pending.value
    ).scalar() or 0


def create_request(db: Session, data: VehicleRequestCreate) -> VehicleRequest:
    """
    Validate dates and availability, then store a pending request.
    Raises InvalidDateRangeError, UnknownUserError or ConflictError.
    """
    if data.start_date >= data.end_date:
        raise InvalidDateRangeError("End date must be after start date")
    if data.start_date < utcnow():
        raise InvalidDateRangeError("Start date cannot be in the past")
    if not get_user(db, data.user_id):
        raise UnknownUserError("Unknown user")

    if not is_vehicle_available(db, data.vehicle_id, data.start_date, data.end_date):
        logger.warning(
            f"[REQUESTS] Vehicle {data.vehicle_id} busy for {data.start_date} → {data.end_date}"
        )
        raise ConflictError("Vehicle is not available for the selected dates")

    request = VehicleRequest(
        vehicle_id=data.vehicle_id,
        user_id=data.user_id,
        start_date=data.start_date,
        end_date=data.end_date,
        purpose=data.purpose,
        status=RequestStatus.pending.value,
        created_at=utcnow(),
    )
    db.add(request)
    db.commit()
    db.refresh(request)
    logger.info(f"[REQUESTS] #{request.id} created by user {request.user_id} "
                f"for vehicle {request.vehicle_id}")
    return request


def _resolve_admin_id(db: Session, admin_id: Optional[int]) -> Optional[int]:
    admin_id = admin_id if admin_id is not None else settings.DEFAULT_ADMIN_ID
    if admin_id is None:
        return None
    admin = get_user(db, admin_id)
    if not admin or admin.role != UserRole.admin.value:
        raise InvalidAdminError(f"User {admin_id} is not an admin")
    return admin.id


def decide_request(db: Session, request_id: int, status: DecisionStatus,
                   admin_id: Optional[int] = None) -> VehicleRequest:
    """
    Apply an admin decision to a pending request.
    Raises NotFoundError for unknown ids and ConflictError if already decided.
    """
    request = get_request(db, request_id)
    if not request:
        raise NotFoundError("Request not found")
    if request.status != RequestStatus.pending.value:
        raise ConflictError("Request has already been decided")

    request.admin_id = _resolve_admin_id(db, admin_id)
    request.status = status.value
    request.access_code = generate_access_code() if status == DecisionStatus.approved else None
    request.decided_at = utcnow()
    db.commit()
    db.refresh(request)
    logger.info(f"[REQUESTS] #{request.id} {request.status} by admin {request.admin_id}")
    return request
