"""CLI for the Green Avenue portal: log in, register visitors, read community feeds."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
import sys
from pathlib import Path

from portal.config import get_settings
from portal.dependencies import Portal, build_portal
from portal.errors import ConfigError, NotAuthenticated
from portal.schemas.results import OperationResult
from portal.schemas.session import Session
from portal.schemas.visitor import VisitorCreate
from portal.services import assistant
from portal.services.community import search_residents
from portal.services.visitor_pass import whatsapp_share_url


def _open_portal(args) -> Portal:
    settings = get_settings(Path(args.config) if args.config else None)
    try:
        return build_portal(settings)
    except ConfigError as e:
        print(f"Configuration error: {e}")
        sys.exit(2)


def _fail(result: OperationResult) -> None:
    msg = result.message or "Request failed"
    if result.retryable:
        msg += ". Please try again."
    print(msg)
    sys.exit(1)


def _require_session(portal: Portal) -> Session:
    try:
        return portal.auth.require_session()
    except NotAuthenticated as e:
        print(f"{e}. Run: portal login <email>")
        sys.exit(1)


async def cmd_login(args):
    """Authenticate and store the session locally."""
    password = args.password or getpass.getpass("Password: ")
    async with _open_portal(args) as portal:
        result = await portal.auth.authenticate(args.identifier, password)
    if not result.success:
        _fail(result)
    s = result.session
    print(f"Welcome back, {s.display_name}! ({s.role}, site {s.site})")


async def cmd_whoami(args):
    async with _open_portal(args) as portal:
        s = _require_session(portal)
    print(f"{s.display_name} <{s.identifier}>")
    print(f"  Role: {s.role}")
    print(f"  Site: {s.site}")
    if s.phone:
        print(f"  Phone: {s.phone}")


async def cmd_logout(args):
    async with _open_portal(args) as portal:
        portal.auth.logout()
    print("Logged out.")


async def cmd_visitors_add(args):
    """Pre-register a visitor and show the one-time passcode."""
    async with _open_portal(args) as portal:
        session = _require_session(portal)
        visitor = VisitorCreate(name=args.name, phone=args.phone, visit_date=args.date, purpose=args.purpose)
        result = await portal.visitors.register_visitor(visitor, session)
        community = portal.settings.community_name
        validity = portal.visitors.validity
    if not result.success:
        _fail(result)

    reg = result.registration
    print(f"Visitor registered: {reg.visitor_name} on {reg.visit_date}")
    print(f"\n  OTP: {reg.otp}\n")
    print(f"Valid until {reg.expiry:%Y-%m-%d %H:%M %Z}. Show this OTP at the gate.")
    print(f"Share: {whatsapp_share_url(reg.otp, community, validity)}")


async def cmd_visitors_list(args):
    async with _open_portal(args) as portal:
        session = _require_session(portal)
        result = await portal.visitors.list_visitors(session)
    if not result.success:
        _fail(result)
    if not result.data:
        print("No visitors registered yet.")
        return
    print(f"{'Visitor':<20} {'Phone':<12} {'Date':<11} {'OTP':<7} {'Validity':<8} Status")
    for v in result.data:
        validity = "Expired" if v.expired else "Valid"
        print(f"{v.visitor_name:<20} {v.visitor_phone:<12} {v.visit_date:<11} {v.otp:<7} {validity:<8} {v.status}")


async def cmd_notices(args):
    async with _open_portal(args) as portal:
        result = await portal.community.get_notices()
    if not result.success:
        _fail(result)
    for n in result.data:
        print(f"[{n.type}] {n.title} — {n.posted_at}")
        print(f"  {n.message}")


async def cmd_directory(args):
    async with _open_portal(args) as portal:
        _require_session(portal)
        result = await portal.community.get_directory()
    if not result.success:
        _fail(result)
    residents = search_residents(result.data, args.search)
    print(f"{len(result.data)} residents")
    for r in residents:
        print(f"  Site {r.site:<4} {r.name:<20} {r.phone:<12} {r.role}")


async def cmd_properties(args):
    async with _open_portal(args) as portal:
        result = await portal.community.get_properties()
    if not result.success:
        _fail(result)
    for p in result.data:
        if args.type and p.listing_type != args.type:
            continue
        label = "For Rent" if p.listing_type == "rent" else "For Sale"
        print(f"Site {p.site}: {p.property_type} • {p.bhk} • {p.floor} ({label})")
        print(f"  Facing {p.facing}; {p.facilities}; contact {p.contact}")


async def cmd_polls(args):
    async with _open_portal(args) as portal:
        result = await portal.community.get_polls()
    if not result.success:
        _fail(result)
    for poll in result.data:
        state = "Ended" if poll.is_expired else "Active"
        print(f"{poll.question} [{state}, ends {poll.end_date}]")
        for option in poll.options:
            mine = " (your vote)" if poll.user_vote == option else ""
            print(f"  {option:<24} {poll.share(option):5.1f}%{mine}")
        print(f"  {poll.total_votes} votes")


async def cmd_dashboard(args):
    async with _open_portal(args) as portal:
        session = _require_session(portal)
        stats, notices = await portal.community.get_dashboard()
    print(f"Welcome, {session.display_name}")
    if stats.success:
        d = stats.data
        print(f"  Residents: {d.total_residents}   Notices: {d.total_notices}   Pending visitors: {d.pending_visitors}")
        print(f"  Open requests: {d.open_requests}   Pending payments: {d.pending_payments}   Listings: {d.active_listings}")
    else:
        print(f"  Stats unavailable: {stats.message}")
    if notices.success:
        print("Recent notices:")
        for n in notices.data[:3]:
            print(f"  [{n.type}] {n.title}")


async def cmd_payments(args):
    async with _open_portal(args) as portal:
        session = _require_session(portal)
        result = await portal.community.get_payments(session)
    if not result.success:
        _fail(result)
    for p in result.data:
        print(f"{p.month} {p.year}: ₹{p.amount} — {p.status} (submitted {p.submitted_at})")


async def cmd_requests(args):
    async with _open_portal(args) as portal:
        session = _require_session(portal)
        result = await portal.community.get_requests(session)
    if not result.success:
        _fail(result)
    for r in result.data:
        print(f"[{r.status}] {r.type} ({r.priority}): {r.message}")


async def cmd_users(args):
    """Admin panel: list every portal account."""
    async with _open_portal(args) as portal:
        session = _require_session(portal)
        result = await portal.community.get_users(session)
    if not result.success:
        _fail(result)
    for u in result.data:
        print(f"{u.email:<26} site {u.site:<4} {u.name:<20} {u.role:<7} {u.status}")


async def cmd_chat(args):
    """Talk to the scripted assistant. Works without logging in."""
    async with _open_portal(args) as portal:
        state = portal.auth.get_session()
    name = state.session.display_name if state.logged_in else None

    if args.message:
        print(assistant.reply(args.message))
        return

    print(assistant.greeting_for(name))
    print(f"Try: {', '.join(assistant.SUGGESTIONS)}  (Ctrl-D to leave)")
    while True:
        try:
            line = input("> ").strip()
        except EOFError:
            print()
            break
        if not line:
            continue
        print(assistant.reply(line))
        if assistant.match_intent(line) == "farewell":
            break


def cmd_mock_server(args):
    """Serve the in-process Directory Service stand-in over HTTP."""
    import uvicorn

    from portal.directory.mock_service import create_mock_app

    print(f"Mock directory at http://{args.host}:{args.port}/exec")
    uvicorn.run(create_mock_app(), host=args.host, port=args.port)


_ASYNC_COMMANDS = {
    "login": cmd_login,
    "whoami": cmd_whoami,
    "logout": cmd_logout,
    "notices": cmd_notices,
    "directory": cmd_directory,
    "properties": cmd_properties,
    "polls": cmd_polls,
    "dashboard": cmd_dashboard,
    "payments": cmd_payments,
    "requests": cmd_requests,
    "users": cmd_users,
    "chat": cmd_chat,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Green Avenue community portal CLI")
    parser.add_argument("--config", default="", help="Path to config.yaml")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command")

    lg = subparsers.add_parser("login", help="Log in with email or phone")
    lg.add_argument("identifier", help="Email address or phone number")
    lg.add_argument("--password", default="", help="Password (prompted if not given)")

    subparsers.add_parser("whoami", help="Show the current session")
    subparsers.add_parser("logout", help="Clear the local session")

    vs = subparsers.add_parser("visitors", help="Visitor passes")
    vsub = vs.add_subparsers(dest="visitors_command")
    va = vsub.add_parser("add", help="Pre-register a visitor and issue an OTP")
    va.add_argument("--name", required=True, help="Visitor name")
    va.add_argument("--phone", required=True, help="Visitor phone")
    va.add_argument("--date", required=True, help="Visit date (YYYY-MM-DD)")
    va.add_argument("--purpose", default="", help="Purpose of visit")
    vsub.add_parser("list", help="List visitor passes with OTP validity")

    subparsers.add_parser("notices", help="Community notices")
    dr = subparsers.add_parser("directory", help="Resident directory")
    dr.add_argument("--search", default="", help="Filter by name, site or phone")
    pr = subparsers.add_parser("properties", help="Property listings")
    pr.add_argument("--type", choices=["rent", "sale"], default=None)
    subparsers.add_parser("polls", help="Community polls")
    subparsers.add_parser("dashboard", help="Stats and recent notices")
    subparsers.add_parser("payments", help="Your maintenance payments")
    subparsers.add_parser("requests", help="Your service requests")
    subparsers.add_parser("users", help="All users (Admin only)")

    ch = subparsers.add_parser("chat", help="Chat with the assistant")
    ch.add_argument("--message", "-m", default="", help="Ask one question and exit")

    ms = subparsers.add_parser("mock-server", help="Serve the mock Directory Service")
    ms.add_argument("--host", default="127.0.0.1")
    ms.add_argument("--port", type=int, default=8765)
    return parser


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        sys.exit(1)

    level = "DEBUG" if args.verbose else get_settings(Path(args.config) if args.config else None).log_level
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.command == "mock-server":
        cmd_mock_server(args)
    elif args.command == "visitors":
        if args.visitors_command == "add":
            asyncio.run(cmd_visitors_add(args))
        elif args.visitors_command == "list":
            asyncio.run(cmd_visitors_list(args))
        else:
            parser.parse_args(["visitors", "--help"])
    else:
        asyncio.run(_ASYNC_COMMANDS[args.command](args))


if __name__ == "__main__":
    main()
