from enum import Enum


class UserRole(str, Enum):
    admin = "admin"
    employee = "employee"


class RequestStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class DecisionStatus(str, Enum):
    """The only statuses an admin decision may set."""
    approved = "approved"
    rejected = "rejected"


# Statuses that hold a vehicle for their date range
BLOCKING_STATUSES = (RequestStatus.pending.value, RequestStatus.approved.value)
