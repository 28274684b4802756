"""In-process stand-in for the spreadsheet-backed Directory Service.

Speaks both wire strategies on ``/exec`` and keeps its records in memory,
so the portal runs end to end without the deployed script. Used in mock
mode, in the integration tests, and by ``portal mock-server``.
"""

from __future__ import annotations

import copy
import inspect
import json
import logging
from datetime import datetime, timezone
from itertools import count
from typing import Any, Callable

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from portal.directory import mock_data
from portal.services.visitor_pass import is_expired

logger = logging.getLogger(__name__)

_PUBLIC_USER_FIELDS = ("email", "site", "name", "role", "phone")
_OBJECT_PARAMS = ("user", "record")


class ScriptCall(BaseModel):
    function: str
    parameters: list[Any] = []


def _is_admin(user: dict | None) -> bool:
    return bool(user) and str(user.get("role", "")).lower() == "admin"


class MockDirectory:
    """Mutable in-memory state plus one handler per action name."""

    def __init__(self, now: datetime | None = None):
        self.users = copy.deepcopy(mock_data.USERS)
        self.notices = copy.deepcopy(mock_data.NOTICES)
        self.properties = copy.deepcopy(mock_data.PROPERTIES)
        self.polls = copy.deepcopy(mock_data.POLLS)
        self.payments = copy.deepcopy(mock_data.PAYMENTS)
        self.requests = copy.deepcopy(mock_data.REQUESTS)
        self.visitors = mock_data.seed_visitors(now)
        self._visitor_ids = count(len(self.visitors) + 1)
        self.calls: list[str] = []

        self.handlers: dict[str, Callable[..., Any]] = {
            "validateLogin": self.validate_login,
            "getCommunityDirectory": self.get_directory,
            "getNotices": self.get_notices,
            "getMyVisitors": self.get_visitors,
            "registerVisitor": self.register_visitor,
            "getProperties": self.get_properties,
            "getPolls": self.get_polls,
            "getDashboardStats": self.get_stats,
            "getMyPayments": self.get_payments,
            "getMyRequests": self.get_requests,
            "getAllUsers": self.get_users,
        }

    def dispatch(self, action: str, params: list) -> Any:
        self.calls.append(action)
        handler = self.handlers.get(action)
        if handler is None:
            return {"success": False, "message": f"Unknown action: {action}"}
        try:
            bound = inspect.signature(handler).bind(*params)
        except TypeError:
            logger.warning("Bad parameters for %s: %r", action, params)
            return {"success": False, "message": f"Bad parameters for {action}"}
        for name in _OBJECT_PARAMS:
            if name in bound.arguments and not isinstance(bound.arguments[name], dict):
                logger.warning("%s expects an object for %s, got %r", action, name, bound.arguments[name])
                return {"success": False, "message": f"Bad parameters for {action}: {name} must be an object"}
        return handler(*bound.args)

    # ── Auth ──────────────────────────────────────────────

    def validate_login(self, identifier: str, password: str) -> dict:
        ident = str(identifier).strip().lower()
        for user in self.users:
            if ident not in (user["email"].lower(), user["phone"]):
                continue
            if user["password"] != password:
                break
            if user["status"] != "Active":
                return {"success": False, "message": "Account is inactive. Contact the association."}
            return {"success": True, "user": {k: user[k] for k in _PUBLIC_USER_FIELDS}}
        return {"success": False, "message": "Invalid credentials"}

    # ── Community feeds ───────────────────────────────────

    def get_directory(self) -> dict:
        return {"success": True, "data": [{k: u[k] for k in _PUBLIC_USER_FIELDS} for u in self.users]}

    def get_notices(self) -> dict:
        return {"success": True, "data": self.notices}

    def get_properties(self) -> dict:
        return {"success": True, "data": self.properties}

    def get_polls(self) -> dict:
        return {"success": True, "data": self.polls}

    def get_stats(self) -> dict:
        return {
            "success": True,
            "data": {
                "totalResidents": len(self.users),
                "totalNotices": len(self.notices),
                "pendingVisitors": sum(1 for v in self.visitors if v["Status"] == "Pending"),
                "openRequests": sum(1 for r in self.requests if r["Status"] == "Open"),
                "pendingPayments": sum(1 for p in self.payments if p["Status"] == "Pending"),
                "activeListings": len(self.properties),
            },
        }

    def get_payments(self, user: dict) -> dict:
        return {"success": True, "data": [p for p in self.payments if p["SiteNumber"] == str(user.get("site"))]}

    def get_requests(self, user: dict) -> dict:
        return {"success": True, "data": [r for r in self.requests if r["SiteNumber"] == str(user.get("site"))]}

    def get_users(self, user: dict) -> dict:
        if not _is_admin(user):
            return {"success": False, "message": "Unauthorized"}
        return {"success": True, "data": [{k: v for k, v in u.items() if k != "password"} for u in self.users]}

    # ── Visitors ──────────────────────────────────────────

    def get_visitors(self, user: dict) -> dict:
        now = datetime.now(timezone.utc)
        rows = self.visitors if _is_admin(user) else [
            v for v in self.visitors if v["SiteNumber"] == str(user.get("site"))
        ]
        data = []
        for row in rows:
            expiry = datetime.fromisoformat(row["OTPExpiry"])
            data.append({**row, "otpExpired": is_expired(expiry, now)})
        return {"success": True, "data": data}

    def register_visitor(self, record: dict, user: dict) -> dict:
        for field, label in (("VisitorName", "visitor name"), ("VisitorPhone", "visitor phone"), ("VisitDate", "visit date")):
            if not str(record.get(field) or "").strip():
                return {"success": False, "message": f"Missing {label}"}
        row = {
            "ID": str(next(self._visitor_ids)),
            "VisitorName": record["VisitorName"],
            "VisitorPhone": record["VisitorPhone"],
            "VisitDate": record["VisitDate"],
            "Purpose": record.get("Purpose", ""),
            "OTP": record["OTP"],
            "OTPExpiry": record["OTPExpiry"],
            "Status": "Pending",
            "SiteNumber": str(record.get("SiteNumber") or user.get("site", "")),
            "RegisteredBy": user.get("email", ""),
        }
        self.visitors.append(row)
        return {"success": True, "id": row["ID"], "otp": row["OTP"], "expiry": row["OTPExpiry"]}


def create_mock_app(directory: MockDirectory | None = None) -> FastAPI:
    directory = directory or MockDirectory()
    app = FastAPI(title="Green Avenue Directory (mock)", version="0.2.0")
    app.state.directory = directory

    @app.get("/exec")
    async def exec_get(action: str = Query(...), data: str = Query(default="[]")):
        try:
            params = json.loads(data)
        except ValueError:
            return JSONResponse(status_code=400, content={"success": False, "message": "Malformed data parameter"})
        if not isinstance(params, list):
            params = [params]
        return directory.dispatch(action, params)

    @app.post("/exec")
    async def exec_post(body: ScriptCall):
        return directory.dispatch(body.function, body.parameters)

    return app
