"""
User storage helpers: registration, lookup and password checks.
Used by the auth and users routers and by request_service.
"""

from typing import Optional
from passlib.context import CryptContext
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.models.user import User
from app.schemas.user import UserCreate
from app.services.errors import ConflictError
from app.utils.dates import utcnow
from app.utils.logger import get_logger

logger = get_logger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Case-insensitive email lookup. Returns None if not found."""
    return db.query(User).filter(func.lower(User.email) == email.lower()).first()


def list_users(db: Session, email: Optional[str] = None) -> list[User]:
    q = db.query(User)
    if email:
        q = q.filter(func.lower(User.email) == email.lower())
    return q.order_by(User.id).all()


def create_user(db: Session, data: UserCreate) -> User:
    """Register a user. Raises ConflictError if the email is already taken."""
    if get_user_by_email(db, data.email):
        logger.warning(f"[USERS] Registration refused, email exists: {data.email}")
        raise ConflictError("User already exists")

    user = User(
        email=data.email.lower(),
        password_hash=get_password_hash(data.password),
        name=data.name,
        role=data.role.value,
        department=data.department,
        created_at=utcnow(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"[USERS] Registered {user.email} as {user.role}")
    return user


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    """Returns the user if email and password match, otherwise None."""
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user
