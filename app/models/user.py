"""
Users table: employees who book vehicles and admins who decide requests.
Passwords are stored as passlib hashes, never in plain text.
"""

from sqlalchemy import Column, Integer, String, DateTime
from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(200), nullable=False)
    role = Column(String(20), nullable=False, default="employee")  # admin | employee
    department = Column(String(100))
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<User {self.id} email={self.email} role={self.role}>"
