"""Exceptions for the community portal client."""

from __future__ import annotations

from enum import Enum


CONNECTION_ERROR = "Connection error"


class FailureKind(str, Enum):
    """Why an operation failed, as reported on result objects."""

    REJECTED = "rejected"    # bad credentials, missing field, not allowed
    TRANSPORT = "transport"  # network, timeout, unreadable response


class PortalError(Exception):
    """Base exception for the portal."""

    kind: FailureKind | None = None


class TransportFailure(PortalError):
    """The Directory Service could not be reached or answered garbage. Safe to retry."""

    kind = FailureKind.TRANSPORT


class DirectoryTransportError(TransportFailure):
    """Raised by the directory client for timeouts, HTTP errors and bad JSON."""

    def __init__(self, message: str, action: str = "", status_code: int | None = None):
        self.action = action
        self.status_code = status_code
        super().__init__(message)


class ExpectedRejection(PortalError):
    """A normal refusal that is shown to the user verbatim."""

    kind = FailureKind.REJECTED


class ValidationRejection(ExpectedRejection):
    """A required field was missing or blank."""

    def __init__(self, message: str, field: str = ""):
        self.field = field
        super().__init__(message)


class NotAuthenticated(ExpectedRejection):
    pass


class PermissionDenied(ExpectedRejection):
    pass


class ConfigError(PortalError):
    """Configuration error"""
    pass
