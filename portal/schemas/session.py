from __future__ import annotations

from pydantic import BaseModel


class Session(BaseModel):
    """Authenticated identity persisted locally after login."""

    identifier: str
    name: str = ""
    role: str = "Owner"  # Admin | Owner | Tenant
    site: str = ""
    phone: str = ""
    email: str = ""

    model_config = {"extra": "ignore"}

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        source = self.email or self.identifier
        if "@" in source:
            return source.split("@", 1)[0]
        return source

    @property
    def is_admin(self) -> bool:
        return self.role.lower() == "admin"

    @classmethod
    def from_directory_user(cls, identifier: str, user: dict) -> "Session":
        """Normalise the ``user`` object returned by ``validateLogin``."""
        email = str(user.get("email") or (identifier if "@" in identifier else ""))
        session = cls(
            identifier=identifier,
            name=str(user.get("name") or ""),
            role=str(user.get("role") or "Owner"),
            site=str(user.get("site") or ""),
            phone=str(user.get("phone") or ""),
            email=email,
        )
        if not session.name:
            session.name = session.display_name
        return session

    def to_directory_user(self) -> dict:
        """Shape expected by the Directory Service for per-user calls."""
        return {
            "email": self.email or self.identifier,
            "name": self.name,
            "role": self.role,
            "site": self.site,
            "phone": self.phone,
        }
