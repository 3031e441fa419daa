"""Local account endpoints: login check and registration."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.user import AuthResponse, UserCreate, UserLogin
from app.services.errors import AuthenticationFailedError
from app.services.user_service import authenticate, create_user
from app.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.post("/auth/login", response_model=AuthResponse, summary="Check credentials")
def login(body: UserLogin, db: Session = Depends(get_db)):
    """Returns the user (without password) when email and password match."""
    user = authenticate(db, body.email, body.password)
    if not user:
        logger.warning(f"[AUTH] Failed login for {body.email}")
        raise AuthenticationFailedError("Invalid credentials")
    return {"user": user}


@router.post("/auth/register", response_model=AuthResponse,
             status_code=status.HTTP_201_CREATED, summary="Register a user")
def register(body: UserCreate, db: Session = Depends(get_db)):
    """Creates a user. 409 if the email is already registered."""
    return {"user": create_user(db, body)}
