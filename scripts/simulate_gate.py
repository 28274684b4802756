"""Simulate a resident pre-registering a visitor and the gate checking the OTP.

Logs in, registers a visitor, then lists passes and confirms the new OTP
shows up as valid. Runs against whatever config.yaml points at, so it
works both in mock mode and against the deployed Directory Service.

Usage:
    python scripts/simulate_gate.py [--email admin@greenavenue.com] [--password admin123]
"""

import argparse
import asyncio
import sys
from datetime import date, timedelta
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from portal.dependencies import build_portal
from portal.directory.mock_data import DEMO_EMAIL, DEMO_PASSWORD
from portal.schemas.visitor import VisitorCreate
from portal.services.session_store import MemorySessionStore


async def simulate(email: str, password: str) -> int:
    async with build_portal(store=MemorySessionStore()) as portal:
        login = await portal.auth.authenticate(email, password)
        if not login.success:
            print(f"Login failed: {login.message}")
            return 1
        session = login.session
        print(f"Logged in as {session.display_name} (site {session.site})")

        tomorrow = (date.today() + timedelta(days=1)).isoformat()
        visitor = VisitorCreate(name="Gate Test Visitor", phone="9000000000", visit_date=tomorrow, purpose="Smoke test")
        issued = await portal.visitors.register_visitor(visitor, session)
        if not issued.success:
            print(f"Registration failed: {issued.message}")
            return 1
        otp = issued.registration.otp
        print(f"Issued OTP {otp}, valid until {issued.registration.expiry.isoformat()}")

        listed = await portal.visitors.list_visitors(session)
        if not listed.success:
            print(f"Listing failed: {listed.message}")
            return 1

    match = next((v for v in listed.data if v.otp == otp), None)
    if match is None:
        print("Gate check FAILED: OTP not found in visitor list")
        return 1
    if match.expired:
        print("Gate check FAILED: OTP already expired")
        return 1
    print(f"Gate check OK: {match.visitor_name} admitted with OTP {otp}")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Visitor OTP smoke test")
    parser.add_argument("--email", default=DEMO_EMAIL)
    parser.add_argument("--password", default=DEMO_PASSWORD)
    args = parser.parse_args()
    sys.exit(asyncio.run(simulate(args.email, args.password)))


if __name__ == "__main__":
    main()
