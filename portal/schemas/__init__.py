"""Pydantic models for sessions, visitor passes, community records and results."""

from portal.schemas.session import Session
from portal.schemas.visitor import VisitorCreate, VisitorPassRead, VisitorRegistration
from portal.schemas.community import (
    DashboardStats,
    Notice,
    Payment,
    Poll,
    PortalUser,
    PropertyListing,
    Resident,
    ServiceRequest,
)
from portal.schemas.results import (
    AuthResult,
    ListResult,
    OperationResult,
    RegistrationResult,
    SessionState,
    StatsResult,
    VisitorListResult,
)

__all__ = [
    "Session",
    "VisitorCreate", "VisitorPassRead", "VisitorRegistration",
    "DashboardStats", "Notice", "Payment", "Poll", "PortalUser",
    "PropertyListing", "Resident", "ServiceRequest",
    "AuthResult", "ListResult", "OperationResult", "RegistrationResult",
    "SessionState", "StatsResult", "VisitorListResult",
]
