"""
Vehicle requests table: one employee's ask to use a vehicle for a date range.
Created as pending, decided exactly once by an admin (approved | rejected).
Access codes are only ever set on approval.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base


class VehicleRequest(Base):
    __tablename__ = "vehicle_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    start_date = Column(DateTime, nullable=False, index=True)
    end_date = Column(DateTime, nullable=False, index=True)
    purpose = Column(Text)
    status = Column(String(20), nullable=False, default="pending", index=True)  # pending | approved | rejected
    admin_id = Column(Integer, ForeignKey("users.id"))   # set on decision
    access_code = Column(String(4))                       # set on approval only
    created_at = Column(DateTime)
    decided_at = Column(DateTime)

    vehicle = relationship("Vehicle")
    user = relationship("User", foreign_keys=[user_id])
    admin = relationship("User", foreign_keys=[admin_id])

    def __repr__(self):
        return f"<VehicleRequest {self.id} vehicle={self.vehicle_id} status={self.status}>"
