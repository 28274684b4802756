"""Community feeds: directory, notices, listings, polls, dashboard, payments, requests, users."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pydantic import BaseModel, ValidationError

from portal.directory.client import DirectoryClient, unusable_reason, unwrap_list
from portal.errors import CONNECTION_ERROR, FailureKind, PermissionDenied, TransportFailure
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
from portal.schemas.results import ListResult, StatsResult
from portal.schemas.session import Session

logger = logging.getLogger(__name__)

ADMIN_REQUIRED = "Admin access required"


class CommunityService:
    def __init__(self, directory: DirectoryClient):
        self.directory = directory

    async def _fetch_list(self, model: type[BaseModel], action: str, *params: Any) -> ListResult:
        try:
            payload = await self.directory.call(action, *params)
        except TransportFailure as e:
            logger.warning("%s failed: %s", action, e)
            return ListResult[model].failed(CONNECTION_ERROR, kind=FailureKind.TRANSPORT)

        rows = unwrap_list(payload)
        if rows is None:
            message, kind = unusable_reason(payload)
            logger.warning("%s: %s", action, message)
            return ListResult[model].failed(message, kind=kind)

        items = []
        for row in rows:
            try:
                items.append(model.model_validate(row))
            except ValidationError:
                logger.warning("Skipping malformed %s row from %s", model.__name__, action)
        return ListResult[model](data=items)

    async def get_directory(self) -> ListResult[Resident]:
        return await self._fetch_list(Resident, "getCommunityDirectory")

    async def get_notices(self) -> ListResult[Notice]:
        return await self._fetch_list(Notice, "getNotices")

    async def get_properties(self) -> ListResult[PropertyListing]:
        return await self._fetch_list(PropertyListing, "getProperties")

    async def get_polls(self) -> ListResult[Poll]:
        return await self._fetch_list(Poll, "getPolls")

    async def get_payments(self, session: Session) -> ListResult[Payment]:
        return await self._fetch_list(Payment, "getMyPayments", session.to_directory_user())

    async def get_requests(self, session: Session) -> ListResult[ServiceRequest]:
        return await self._fetch_list(ServiceRequest, "getMyRequests", session.to_directory_user())

    async def get_users(self, session: Session) -> ListResult[PortalUser]:
        """All portal accounts. Only Admin sessions may ask."""
        if not session.is_admin:
            return ListResult[PortalUser].failed(PermissionDenied(ADMIN_REQUIRED))
        return await self._fetch_list(PortalUser, "getAllUsers", session.to_directory_user())

    async def get_stats(self) -> StatsResult:
        try:
            payload = await self.directory.call("getDashboardStats")
        except TransportFailure as e:
            logger.warning("getDashboardStats failed: %s", e)
            return StatsResult.failed(CONNECTION_ERROR, kind=FailureKind.TRANSPORT)

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict) or payload.get("success") is False:
            message, kind = unusable_reason(payload)
            return StatsResult.failed(message, kind=kind)
        try:
            return StatsResult(data=DashboardStats.model_validate(data))
        except ValidationError:
            return StatsResult.failed("Directory returned no usable data", kind=FailureKind.TRANSPORT)

    async def get_dashboard(self) -> tuple[StatsResult, ListResult[Notice]]:
        """Stats and notices for the home page, fetched together."""
        stats, notices = await asyncio.gather(self.get_stats(), self.get_notices())
        return stats, notices


def search_residents(residents: list[Resident], query: str) -> list[Resident]:
    """Match on name (case-insensitive), site number or phone."""
    if not query:
        return list(residents)
    needle = query.lower()
    return [
        r for r in residents
        if needle in r.name.lower() or query in r.site or query in r.phone
    ]
