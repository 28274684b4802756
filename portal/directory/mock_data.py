"""Seed records for the in-process Directory Service stand-in."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

DEMO_EMAIL = "admin@greenavenue.com"
DEMO_PASSWORD = "admin123"
RESIDENT_PASSWORD = "resident123"

USERS = [
    {"email": DEMO_EMAIL, "site": "1", "name": "Admin User", "role": "Admin", "status": "Active", "phone": "9876543210", "password": DEMO_PASSWORD},
    {"email": "rahul@email.com", "site": "2", "name": "Rahul Sharma", "role": "Owner", "status": "Active", "phone": "9876543211", "password": RESIDENT_PASSWORD},
    {"email": "priya@email.com", "site": "3", "name": "Priya Singh", "role": "Owner", "status": "Active", "phone": "9876543212", "password": RESIDENT_PASSWORD},
    {"email": "amit@email.com", "site": "4", "name": "Amit Patel", "role": "Tenant", "status": "Inactive", "phone": "9876543213", "password": RESIDENT_PASSWORD},
    {"email": "sneha@email.com", "site": "5", "name": "Sneha Reddy", "role": "Owner", "status": "Active", "phone": "9876543214", "password": RESIDENT_PASSWORD},
]

NOTICES = [
    {"ID": "1", "Type": "General", "Title": "Water Tank Cleaning", "Message": "Water tank cleaning scheduled for this Sunday. Please store water accordingly.", "PostedBy": DEMO_EMAIL, "PostedAt": "27/12/2024, 10:00 AM"},
    {"ID": "2", "Type": "Event", "Title": "New Year Celebration", "Message": "Join us for New Year celebration at the community hall on 31st December.", "PostedBy": DEMO_EMAIL, "PostedAt": "26/12/2024, 2:00 PM"},
    {"ID": "3", "Type": "Appreciation", "Title": "Thank You Volunteers", "Message": "Thank you to all volunteers who helped in the community cleanup drive!", "PostedBy": DEMO_EMAIL, "PostedAt": "25/12/2024, 11:00 AM"},
]

PROPERTIES = [
    {"ID": "1", "Type": "rent", "PropertyType": "Apartment", "SiteNumber": "15", "Floor": "2nd", "BHK": "2 BHK", "Facing": "East", "Contact": "9876543210", "Facilities": "Parking, Lift", "SubmittedBy": "owner@email.com", "SubmittedAt": "27/12/2024"},
    {"ID": "2", "Type": "sale", "PropertyType": "House", "SiteNumber": "42", "Floor": "Ground", "BHK": "3 BHK", "Facing": "North", "Contact": "9876543211", "Facilities": "Garden, Parking", "SubmittedBy": "seller@email.com", "SubmittedAt": "26/12/2024"},
]

POLLS = [
    {
        "ID": "1",
        "Question": "Should we install CCTV cameras at all entry points?",
        "options": ["Yes", "No", "Need more discussion"],
        "votes": {"Yes": 25, "No": 5, "Need more discussion": 10},
        "totalVotes": 40,
        "hasVoted": False,
        "userVote": None,
        "EndDate": "2024-12-31",
        "isExpired": False,
        "CreatedBy": DEMO_EMAIL,
    },
    {
        "ID": "2",
        "Question": "Preferred timing for community meetings?",
        "options": ["Weekday Evening", "Saturday Morning", "Sunday Morning"],
        "votes": {"Weekday Evening": 15, "Saturday Morning": 30, "Sunday Morning": 20},
        "totalVotes": 65,
        "hasVoted": True,
        "userVote": "Saturday Morning",
        "EndDate": "2024-12-25",
        "isExpired": True,
        "CreatedBy": DEMO_EMAIL,
    },
]

PAYMENTS = [
    {"ID": "1", "SiteNumber": "1", "Month": "December", "Year": "2024", "Amount": "1500", "Status": "Approved", "SubmittedAt": "15/12/2024"},
    {"ID": "2", "SiteNumber": "1", "Month": "November", "Year": "2024", "Amount": "1500", "Status": "Approved", "SubmittedAt": "14/11/2024"},
    {"ID": "3", "SiteNumber": "1", "Month": "January", "Year": "2025", "Amount": "1500", "Status": "Pending", "SubmittedAt": "27/12/2024"},
]

REQUESTS = [
    {"ID": "1", "SiteNumber": "1", "Type": "Maintenance", "Message": "Street light not working near site 25", "Status": "Open", "Priority": "High", "SubmittedAt": "27/12/2024"},
    {"ID": "2", "SiteNumber": "1", "Type": "Security", "Message": "Gate not closing properly", "Status": "Resolved", "Priority": "Normal", "SubmittedAt": "20/12/2024"},
]


def seed_visitors(now: datetime | None = None) -> list[dict]:
    """One pass still valid and one that lapsed a day ago, relative to ``now``."""
    now = now or datetime.now(timezone.utc)
    return [
        {"ID": "1", "VisitorName": "John Doe", "VisitorPhone": "9999999999", "VisitDate": "2024-12-28", "Purpose": "Delivery", "OTP": "123456", "OTPExpiry": (now + timedelta(days=1)).isoformat(), "Status": "Pending", "SiteNumber": "1"},
        {"ID": "2", "VisitorName": "Jane Smith", "VisitorPhone": "8888888888", "VisitDate": "2024-12-27", "Purpose": "Family visit", "OTP": "654321", "OTPExpiry": (now - timedelta(days=1)).isoformat(), "Status": "Completed", "SiteNumber": "1"},
    ]
