"""Wiring: build the directory client, session store and services from settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache

from portal.config import Settings, get_settings
from portal.directory.client import DirectoryClient
from portal.directory.transports import get_transport
from portal.errors import ConfigError
from portal.services.auth import AuthGateway
from portal.services.community import CommunityService
from portal.services.session_store import FileSessionStore, SessionStore
from portal.services.visitor_pass import VisitorPassIssuer

logger = logging.getLogger(__name__)


@lru_cache
def get_settings_dep() -> Settings:
    return get_settings()


def build_directory_client(settings: Settings) -> DirectoryClient:
    """Real service over HTTP, or the in-process stand-in when mock mode is on."""
    cfg = settings.directory
    transport = get_transport(cfg.transport)
    if cfg.mock_mode:
        from portal.directory.mock_service import create_mock_app

        logger.info("Directory in mock mode (%s transport)", transport.name)
        return DirectoryClient.in_process(create_mock_app(), transport=transport, timeout=cfg.timeout_seconds)

    if not cfg.url:
        raise ConfigError("directory.url is not set (or enable directory.mock_mode)")
    return DirectoryClient(cfg.url, transport=transport, timeout=cfg.timeout_seconds)


def build_session_store(settings: Settings) -> SessionStore:
    return FileSessionStore(settings.session.path, key=settings.session.key)


@dataclass
class Portal:
    """Everything a front end needs, sharing one directory client."""

    settings: Settings
    directory: DirectoryClient
    auth: AuthGateway
    visitors: VisitorPassIssuer
    community: CommunityService

    async def aclose(self) -> None:
        await self.directory.aclose()

    async def __aenter__(self) -> "Portal":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def build_portal(
    settings: Settings | None = None,
    store: SessionStore | None = None,
    directory: DirectoryClient | None = None,
) -> Portal:
    settings = settings or get_settings_dep()
    directory = directory or build_directory_client(settings)
    return Portal(
        settings=settings,
        directory=directory,
        auth=AuthGateway(directory, store or build_session_store(settings)),
        visitors=VisitorPassIssuer(directory, validity=timedelta(hours=settings.visitor.otp_validity_hours)),
        community=CommunityService(directory),
    )
