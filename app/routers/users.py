from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.user import UserOut
from app.services.user_service import list_users
from typing import Optional

router = APIRouter()


@router.get("/users", response_model=list[UserOut], summary="List users, filterable by email")
def get_users(email: Optional[str] = None, db: Session = Depends(get_db)):
    return list_users(db, email=email)
