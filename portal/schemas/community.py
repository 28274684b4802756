"""Read-only community records served by the Directory Service."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, BeforeValidator, Field


def _to_str(v):
    # Spreadsheet cells come back as numbers
    return "" if v is None else str(v)


CellStr = Annotated[str, BeforeValidator(_to_str)]


class _WireModel(BaseModel):
    model_config = {"populate_by_name": True, "extra": "ignore"}


class Resident(_WireModel):
    site: CellStr = ""
    name: str = ""
    phone: CellStr = ""
    email: str = ""
    role: str = ""


class Notice(_WireModel):
    id: CellStr = Field(default="", alias="ID")
    type: str = Field(default="General", alias="Type")  # General | Event | Appreciation
    title: str = Field(default="", alias="Title")
    message: str = Field(default="", alias="Message")
    posted_by: str = Field(default="", alias="PostedBy")
    posted_at: str = Field(default="", alias="PostedAt")


class PropertyListing(_WireModel):
    id: CellStr = Field(default="", alias="ID")
    listing_type: str = Field(default="", alias="Type")  # rent | sale
    property_type: str = Field(default="", alias="PropertyType")
    site: CellStr = Field(default="", alias="SiteNumber")
    floor: str = Field(default="", alias="Floor")
    bhk: str = Field(default="", alias="BHK")
    facing: str = Field(default="", alias="Facing")
    contact: CellStr = Field(default="", alias="Contact")
    facilities: str = Field(default="", alias="Facilities")
    submitted_by: str = Field(default="", alias="SubmittedBy")
    submitted_at: str = Field(default="", alias="SubmittedAt")


class Poll(_WireModel):
    id: CellStr = Field(default="", alias="ID")
    question: str = Field(default="", alias="Question")
    options: list[str] = []
    votes: dict[str, int] = {}
    total_votes: int = Field(default=0, alias="totalVotes")
    has_voted: bool = Field(default=False, alias="hasVoted")
    user_vote: str | None = Field(default=None, alias="userVote")
    end_date: str = Field(default="", alias="EndDate")
    is_expired: bool = Field(default=False, alias="isExpired")
    created_by: str = Field(default="", alias="CreatedBy")

    def share(self, option: str) -> float:
        """Percentage of votes cast for ``option``."""
        if not self.total_votes:
            return 0.0
        return round(100.0 * self.votes.get(option, 0) / self.total_votes, 1)


class DashboardStats(_WireModel):
    total_residents: int = Field(default=0, alias="totalResidents")
    total_notices: int = Field(default=0, alias="totalNotices")
    pending_visitors: int = Field(default=0, alias="pendingVisitors")
    open_requests: int = Field(default=0, alias="openRequests")
    pending_payments: int = Field(default=0, alias="pendingPayments")
    active_listings: int = Field(default=0, alias="activeListings")


class Payment(_WireModel):
    id: CellStr = Field(default="", alias="ID")
    month: str = Field(default="", alias="Month")
    year: CellStr = Field(default="", alias="Year")
    amount: CellStr = Field(default="", alias="Amount")
    status: str = Field(default="Pending", alias="Status")
    submitted_at: str = Field(default="", alias="SubmittedAt")


class ServiceRequest(_WireModel):
    id: CellStr = Field(default="", alias="ID")
    type: str = Field(default="", alias="Type")
    message: str = Field(default="", alias="Message")
    status: str = Field(default="Open", alias="Status")
    priority: str = Field(default="Normal", alias="Priority")
    submitted_at: str = Field(default="", alias="SubmittedAt")


class PortalUser(_WireModel):
    email: str = ""
    site: CellStr = ""
    name: str = ""
    role: str = ""
    status: str = "Active"
    phone: CellStr = ""
