"""
Fleet vehicles table.
Read-only through the API; rows are seeded by scripts/setup/init_db.py.
"""

from sqlalchemy import Column, Integer, String, DateTime
from app.database import Base


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    make = Column(String(100))
    model = Column(String(100))
    year = Column(Integer)
    plate_number = Column(String(50), unique=True, nullable=False, index=True)
    color = Column(String(50))
    seats = Column(Integer)
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<Vehicle {self.plate_number} name={self.name}>"
