from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from portal.schemas.community import CellStr


class VisitorCreate(BaseModel):
    name: str = ""
    phone: str = ""
    visit_date: str = ""  # YYYY-MM-DD
    purpose: str = ""


class VisitorRegistration(BaseModel):
    """Returned once, right after issuance, for immediate display."""

    otp: str
    expiry: datetime
    visitor_name: str
    visitor_phone: str
    visit_date: str
    purpose: str = ""
    site: str = ""


class VisitorPassRead(BaseModel):
    id: CellStr = Field(default="", alias="ID")
    visitor_name: CellStr = Field(alias="VisitorName")
    visitor_phone: CellStr = Field(default="", alias="VisitorPhone")
    visit_date: CellStr = Field(default="", alias="VisitDate")
    purpose: CellStr = Field(default="", alias="Purpose")
    otp: CellStr = Field(alias="OTP")
    otp_expiry: datetime = Field(alias="OTPExpiry")
    status: CellStr = Field(default="Pending", alias="Status")
    site: CellStr = Field(default="", alias="SiteNumber")
    expired: bool = False

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("otp_expiry")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v
