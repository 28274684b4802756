"""Scripted chat assistant.

An ordered table of (intent, predicate, response) checked once against the
lower-cased message. Several predicates can match the same text ("pay
the gym fee" hits both payment and facilities), so table order decides;
the first match wins and anything unmatched gets the fallback.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

SUGGESTIONS = ["Visitor OTP", "Payment info", "Emergency", "Facilities"]

FALLBACK = "fallback"


def greeting_for(name: str | None = None) -> str:
    return f"Hi {name or 'there'}! 👋 I'm your Green Avenue assistant. How can I help you today?"


def _pattern(regex: str) -> Callable[[str], bool]:
    compiled = re.compile(regex)
    return lambda msg: compiled.search(msg) is not None


def _contains(*words: str) -> Callable[[str], bool]:
    return lambda msg: any(w in msg for w in words)


@dataclass(frozen=True)
class Intent:
    name: str
    matches: Callable[[str], bool]
    response: str


INTENTS: tuple[Intent, ...] = (
    Intent(
        "greeting",
        _pattern(r"^(hi|hello|hey|good morning|good evening)"),
        "Hello! 😊 Welcome to Green Avenue. I can help you with:\n\n"
        "• 🎫 Visitor registration\n• 💰 Payment queries\n• 📢 Community notices\n"
        "• 🔧 Service requests\n• 📞 Emergency contacts\n\nWhat would you like to know?",
    ),
    Intent(
        "visitor",
        _contains("visitor", "guest"),
        "🎫 **Visitor Management**\n\nTo register a visitor:\n1. Go to **Visitors** page\n"
        "2. Click **Add Visitor**\n3. Enter visitor details\n4. Share the OTP with your guest\n\n"
        "The OTP is valid for 24 hours. You can also share it via WhatsApp!\n\nNeed help with anything else?",
    ),
    Intent(
        "payment",
        _contains("payment", "maintenance", "fee", "pay"),
        "💰 **Maintenance Payments**\n\n• Monthly maintenance: ₹1,500\n• Due date: 5th of every month\n"
        "• Late fee: ₹100 after 10th\n\n**Payment Methods:**\n• UPI: greenavenue@paytm\n"
        "• Bank Transfer: HDFC XXXX1234\n• QR Code: Available on Payments page\n\n"
        "Go to **Payments** page to submit your payment receipt.",
    ),
    Intent(
        "emergency",
        _contains("emergency", "urgent", "help"),
        "🚨 **Emergency Contacts**\n\n• 🚔 Police: 100\n• 🚒 Fire: 101\n• 🚑 Ambulance: 102\n"
        "• 🛡️ Security: 9876543210\n• 👨‍💼 Association: 9876543211\n\n"
        "For non-emergencies, submit a **Service Request**.",
    ),
    Intent(
        "rules",
        _contains("rule", "regulation", "guideline"),
        "📋 **Community Guidelines**\n\n• 🔇 Quiet hours: 10 PM - 7 AM\n• 🚗 Parking: Designated spots only\n"
        "• 🐕 Pets: Keep on leash in common areas\n• 🚮 Garbage: Segregate & dispose by 8 AM\n"
        "• 🏗️ Renovations: Prior approval needed\n\nCheck **Notices** for latest updates!",
    ),
    Intent(
        "facilities",
        _contains("facility", "amenity", "gym", "pool", "park"),
        "🏢 **Community Facilities**\n\n• 🏋️ Gym: 6 AM - 10 PM\n• 🏊 Pool: 6 AM - 8 PM\n"
        "• 🌳 Park: Always open\n• 🎉 Clubhouse: Book via requests\n• 🚗 Parking: 2 spots per unit\n\n"
        "Book facilities through **Service Requests**.",
    ),
    Intent(
        "contact",
        _contains("contact", "support", "call", "reach"),
        "📞 **Contact Information**\n\n• **Office Hours:** 9 AM - 6 PM\n"
        "• **Association Email:** info@greenavenue.com\n• **Security:** 9876543210\n"
        "• **Maintenance:** 9876543211\n\nOr submit a **Service Request** anytime!",
    ),
    Intent(
        "events",
        _contains("event", "festival", "celebration"),
        "🎉 **Upcoming Events**\n\nCheck the **Notices** section for:\n• Community gatherings\n"
        "• Festival celebrations\n• Annual general meetings\n• Sports tournaments\n\n"
        "Want to organize an event? Contact the association!",
    ),
    Intent(
        "property",
        _contains("rent", "sale", "property", "flat"),
        "🏠 **Property Listings**\n\nLooking to rent or buy?\n→ Check **Properties** page\n\n"
        "Want to list your property?\n1. Go to **Properties**\n2. Click **Add Listing**\n3. Fill in details\n\n"
        "*Note: Only owners can list properties.*",
    ),
    Intent(
        "polls",
        _contains("poll", "vote", "survey"),
        "🗳️ **Community Polls**\n\nActive polls are on the **Polls** page.\n\n• Each resident gets one vote\n"
        "• Vote before the deadline\n• Results shown after voting ends\n\nYour voice matters! 🎯",
    ),
    Intent(
        "thanks",
        _pattern(r"(thank|thanks|thx)"),
        "You're welcome! 😊 Happy to help. Is there anything else you'd like to know about Green Avenue?",
    ),
    Intent(
        "farewell",
        _pattern(r"(bye|goodbye|see you|later)"),
        "Goodbye! 👋 Have a great day. Feel free to chat anytime you need help!",
    ),
)

_FALLBACK_TEMPLATE = (
    "I understand you're asking about \"{message}\". 🤔\n\nHere's what I can help with:\n\n"
    "• 🎫 Visitor registration\n• 💰 Payment information\n• 📢 Notices & events\n"
    "• 🔧 Service requests\n• 📞 Emergency contacts\n• 🏢 Facility bookings\n"
    "• 📋 Rules & guidelines\n\nTry asking about any of these topics!"
)


def _first_match(message: str) -> Intent | None:
    msg = message.lower()
    for intent in INTENTS:
        if intent.matches(msg):
            return intent
    return None


def match_intent(message: str) -> str:
    intent = _first_match(message)
    return intent.name if intent else FALLBACK


def reply(message: str) -> str:
    intent = _first_match(message)
    if intent is None:
        return _FALLBACK_TEMPLATE.format(message=message)
    return intent.response
