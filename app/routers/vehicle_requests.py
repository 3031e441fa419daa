"""Vehicle requests: submit, list, inspect, and the admin approve/reject decision."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from app.database import get_db
from app.models.enums import RequestStatus
from app.schemas.vehicle_request import (
    StatusUpdate, VehicleRequestCreate, VehicleRequestDetailOut, VehicleRequestOut,
)
from app.services import request_service
from app.services.errors import NotFoundError

router = APIRouter()


@router.get("/requests", response_model=list[VehicleRequestDetailOut],
            summary="List requests, filterable by user and status")
def get_requests(
    user_id: Optional[int] = Query(None, alias="userId"),
    status: Optional[RequestStatus] = None,
    db: Session = Depends(get_db),
):
    return request_service.list_requests(db, user_id=user_id, status=status)


@router.get("/requests/{request_id}", response_model=VehicleRequestDetailOut,
            summary="Request with vehicle, user and admin details")
def get_request(request_id: int, db: Session = Depends(get_db)):
    request = request_service.get_request(db, request_id)
    if not request:
        raise NotFoundError("Request not found")
    return request


@router.post("/requests", response_model=VehicleRequestOut,
             status_code=201, summary="Submit a vehicle request")
def create_request(body: VehicleRequestCreate, db: Session = Depends(get_db)):
    """
    Creates a pending request. 400 for bad or past dates, 409 if the vehicle
    already has a pending or approved request overlapping the range.
    """
    return request_service.create_request(db, body)


@router.patch("/requests/{request_id}/status", response_model=VehicleRequestDetailOut,
              summary="Approve or reject a pending request")
def update_request_status(request_id: int, body: StatusUpdate, db: Session = Depends(get_db)):
    """Approving issues a 4-digit access code. A decided request can't be changed again."""
    return request_service.decide_request(db, request_id, body.status, body.admin_id)
