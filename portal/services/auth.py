"""Authentication gateway: login against the Directory Service, local session, logout."""

from __future__ import annotations

import logging

from portal.directory.client import DirectoryClient, failure_message
from portal.errors import CONNECTION_ERROR, FailureKind, NotAuthenticated, TransportFailure
from portal.schemas.results import AuthResult, SessionState
from portal.schemas.session import Session
from portal.services.session_store import SessionStore

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


class AuthGateway:
    def __init__(self, directory: DirectoryClient, store: SessionStore):
        self.directory = directory
        self.store = store
        self.store.init()

    async def authenticate(self, identifier: str, secret: str) -> AuthResult:
        """Verify credentials remotely; on success persist and return the session."""
        identifier = (identifier or "").strip()
        if not identifier or not secret:
            return AuthResult.failed("Email and password are required")

        try:
            payload = await self.directory.call("validateLogin", identifier, secret)
        except TransportFailure as e:
            logger.warning("Login for %s could not reach the directory: %s", identifier, e)
            return AuthResult.failed(CONNECTION_ERROR, kind=FailureKind.TRANSPORT)

        if not isinstance(payload, dict):
            logger.warning("Login for %s got an unusable response: %r", identifier, type(payload).__name__)
            return AuthResult.failed(CONNECTION_ERROR, kind=FailureKind.TRANSPORT)

        user = payload.get("user")
        if not payload.get("success") or not isinstance(user, dict):
            logger.info("Login rejected for %s", identifier)
            return AuthResult.failed(failure_message(payload, INVALID_CREDENTIALS))

        session = Session.from_directory_user(identifier, user)
        self.store.write(session)
        logger.info("Logged in %s (role=%s, site=%s)", identifier, session.role, session.site)
        return AuthResult(session=session)

    def get_session(self) -> SessionState:
        session = self.store.read()
        return SessionState(logged_in=session is not None, session=session)

    def require_session(self) -> Session:
        session = self.store.read()
        if session is None:
            raise NotAuthenticated("Not logged in")
        return session

    def logout(self) -> None:
        self.store.clear()
        logger.info("Session cleared")
