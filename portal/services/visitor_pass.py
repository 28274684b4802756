"""Visitor passes: one-time passcodes for pre-registered visitors.

A pass carries a six-digit OTP valid for 24 hours from issuance. Whether a
pass has expired is never stored; it is recomputed from ``OTPExpiry`` each
time passes are read.
"""

from __future__ import annotations

import logging
import random
import secrets
from datetime import datetime, timedelta, timezone
from urllib.parse import quote

from pydantic import ValidationError

from portal.directory.client import DirectoryClient, failure_message, unusable_reason, unwrap_list
from portal.errors import CONNECTION_ERROR, FailureKind, TransportFailure, ValidationRejection
from portal.schemas.results import RegistrationResult, VisitorListResult
from portal.schemas.session import Session
from portal.schemas.visitor import VisitorCreate, VisitorPassRead, VisitorRegistration

logger = logging.getLogger(__name__)

OTP_MIN = 100000
OTP_MAX = 999999
OTP_VALIDITY = timedelta(hours=24)

_REQUIRED_FIELDS = (
    ("name", "Visitor name is required"),
    ("phone", "Visitor phone is required"),
    ("visit_date", "Visit date is required"),
)

_system_random = secrets.SystemRandom()


def generate_otp(rng: random.Random | None = None) -> str:
    """Uniform draw from 100000-999999, so always exactly six digits."""
    return str((rng or _system_random).randint(OTP_MIN, OTP_MAX))


def _as_utc(dt: datetime) -> datetime:
    return dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt


def compute_expiry(issued_at: datetime, validity: timedelta = OTP_VALIDITY) -> datetime:
    return _as_utc(issued_at) + validity


def is_expired(expiry: datetime, now: datetime | None = None) -> bool:
    """True at or after ``expiry``. Naive datetimes are read as UTC."""
    now = now or datetime.now(timezone.utc)
    return _as_utc(now) >= _as_utc(expiry)


def _hours(validity: timedelta) -> str:
    hours = validity.total_seconds() / 3600
    return f"{hours:g} hour" + ("" if hours == 1 else "s")


def share_message(otp: str, community_name: str = "Green Avenue", validity: timedelta = OTP_VALIDITY) -> str:
    """Text a resident forwards to the visitor."""
    return (
        f"🏠 *{community_name} Visitor Pass*\n\n"
        f"🎫 OTP: *{otp}*\n\n"
        "✅ Show this OTP at the gate.\n"
        f"⏰ Valid for {_hours(validity)}."
    )


def whatsapp_share_url(otp: str, community_name: str = "Green Avenue", validity: timedelta = OTP_VALIDITY) -> str:
    return "https://wa.me/?text=" + quote(share_message(otp, community_name, validity))


def validate_visitor(visitor: VisitorCreate) -> None:
    for field, message in _REQUIRED_FIELDS:
        if not getattr(visitor, field).strip():
            raise ValidationRejection(message, field=field)


class VisitorPassIssuer:
    def __init__(
        self,
        directory: DirectoryClient,
        validity: timedelta = OTP_VALIDITY,
        rng: random.Random | None = None,
    ):
        self.directory = directory
        self.validity = validity
        self.rng = rng

    async def register_visitor(
        self,
        visitor: VisitorCreate,
        session: Session,
        now: datetime | None = None,
    ) -> RegistrationResult:
        """Issue an OTP for ``visitor`` and persist the pass under the session's site."""
        try:
            validate_visitor(visitor)
        except ValidationRejection as e:
            return RegistrationResult.failed(e)

        issued_at = _as_utc(now or datetime.now(timezone.utc))
        otp = generate_otp(self.rng)
        expiry = compute_expiry(issued_at, self.validity)
        record = {
            "VisitorName": visitor.name.strip(),
            "VisitorPhone": visitor.phone.strip(),
            "VisitDate": visitor.visit_date.strip(),
            "Purpose": visitor.purpose.strip(),
            "OTP": otp,
            "OTPExpiry": expiry.isoformat(),
            "SiteNumber": session.site,
            "RegisteredBy": session.identifier,
        }

        try:
            payload = await self.directory.call("registerVisitor", record, session.to_directory_user())
        except TransportFailure as e:
            logger.warning("Visitor registration for site %s failed: %s", session.site, e)
            return RegistrationResult.failed(CONNECTION_ERROR, kind=FailureKind.TRANSPORT)

        if not isinstance(payload, dict):
            return RegistrationResult.failed(CONNECTION_ERROR, kind=FailureKind.TRANSPORT)
        if not payload.get("success"):
            return RegistrationResult.failed(failure_message(payload, "Could not register visitor"))

        logger.info("Registered visitor %s for site %s, valid until %s", record["VisitorName"], session.site, expiry.isoformat())
        return RegistrationResult(
            registration=VisitorRegistration(
                otp=otp,
                expiry=expiry,
                visitor_name=record["VisitorName"],
                visitor_phone=record["VisitorPhone"],
                visit_date=record["VisitDate"],
                purpose=record["Purpose"],
                site=session.site,
            )
        )

    async def list_visitors(self, session: Session, now: datetime | None = None) -> VisitorListResult:
        """Passes visible to ``session``, each with ``expired`` computed against ``now``."""
        try:
            payload = await self.directory.call("getMyVisitors", session.to_directory_user())
        except TransportFailure as e:
            logger.warning("Listing visitors for site %s failed: %s", session.site, e)
            return VisitorListResult.failed(CONNECTION_ERROR, kind=FailureKind.TRANSPORT)

        rows = unwrap_list(payload)
        if rows is None:
            message, kind = unusable_reason(payload)
            logger.warning("getMyVisitors for site %s: %s", session.site, message)
            return VisitorListResult.failed(message, kind=kind)

        now = now or datetime.now(timezone.utc)
        passes = []
        for row in rows:
            try:
                visitor_pass = VisitorPassRead.model_validate(row)
            except ValidationError as e:
                logger.warning("Skipping malformed visitor row %r: %s", row.get("ID") if isinstance(row, dict) else row, e.error_count())
                continue
            visitor_pass.expired = is_expired(visitor_pass.otp_expiry, now)
            passes.append(visitor_pass)
        return VisitorListResult(data=passes)
