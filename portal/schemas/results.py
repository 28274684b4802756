"""Typed results returned by gateway and service operations.

Operations never raise for expected refusals or transport trouble; they
return one of these with ``success`` False and ``failure`` set.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

from portal.errors import FailureKind, PortalError
from portal.schemas.community import DashboardStats
from portal.schemas.session import Session
from portal.schemas.visitor import VisitorPassRead, VisitorRegistration

T = TypeVar("T")


class OperationResult(BaseModel):
    success: bool = True
    message: str = ""
    failure: FailureKind | None = None

    @property
    def retryable(self) -> bool:
        return self.failure is FailureKind.TRANSPORT

    @classmethod
    def failed(cls, error: PortalError | str, kind: FailureKind = FailureKind.REJECTED, **payload):
        if isinstance(error, PortalError):
            kind = error.kind or kind
        return cls(success=False, message=str(error), failure=kind, **payload)


class AuthResult(OperationResult):
    session: Session | None = None


class SessionState(BaseModel):
    logged_in: bool = False
    session: Session | None = None


class RegistrationResult(OperationResult):
    registration: VisitorRegistration | None = None


class ListResult(OperationResult, Generic[T]):
    data: list[T] = []


class VisitorListResult(ListResult[VisitorPassRead]):
    pass


class StatsResult(OperationResult):
    data: DashboardStats | None = None
