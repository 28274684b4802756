"""Login, session and logout through the in-process Directory Service."""

from __future__ import annotations

import httpx
import pytest
import pytest_asyncio

from portal.directory.client import DirectoryClient
from portal.directory.mock_data import DEMO_EMAIL, DEMO_PASSWORD, RESIDENT_PASSWORD
from portal.directory.mock_service import MockDirectory, create_mock_app
from portal.errors import CONNECTION_ERROR, FailureKind, NotAuthenticated
from portal.services.auth import AuthGateway
from portal.services.session_store import FileSessionStore, MemorySessionStore


@pytest_asyncio.fixture
async def directory():
    mock = MockDirectory()
    client = DirectoryClient.in_process(create_mock_app(mock))
    client.mock = mock
    yield client
    await client.aclose()


@pytest.fixture
def gateway(directory, tmp_path):
    return AuthGateway(directory, FileSessionStore(tmp_path / "session.json"))


def _unreachable_gateway(handler) -> AuthGateway:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AuthGateway(DirectoryClient("https://script.example/exec", http=http), MemorySessionStore())


async def test_login_by_email_persists_session(gateway):
    result = await gateway.authenticate(DEMO_EMAIL, DEMO_PASSWORD)
    assert result.success
    assert result.session.role == "Admin"
    assert result.session.site == "1"
    assert result.session.is_admin

    state = gateway.get_session()
    assert state.logged_in
    assert state.session == result.session


async def test_login_by_phone(gateway):
    result = await gateway.authenticate("9876543211", RESIDENT_PASSWORD)
    assert result.success
    assert result.session.identifier == "9876543211"
    assert result.session.name == "Rahul Sharma"
    assert result.session.email == "rahul@email.com"


async def test_email_is_case_insensitive_and_trimmed(gateway):
    result = await gateway.authenticate("  Admin@GreenAvenue.com ", DEMO_PASSWORD)
    assert result.success


async def test_wrong_password_is_rejected(gateway):
    result = await gateway.authenticate(DEMO_EMAIL, "nope")
    assert not result.success
    assert result.message == "Invalid credentials"
    assert result.failure is FailureKind.REJECTED
    assert not gateway.get_session().logged_in


async def test_inactive_account_shows_service_message(gateway):
    result = await gateway.authenticate("amit@email.com", RESIDENT_PASSWORD)
    assert not result.success
    assert "inactive" in result.message


@pytest.mark.parametrize("identifier,secret", [("", "x"), ("   ", "x"), (DEMO_EMAIL, "")])
async def test_blank_fields_never_reach_the_network(gateway, directory, identifier, secret):
    result = await gateway.authenticate(identifier, secret)
    assert not result.success
    assert result.failure is FailureKind.REJECTED
    assert directory.mock.calls == []


async def test_failed_login_keeps_existing_session(gateway):
    await gateway.authenticate(DEMO_EMAIL, DEMO_PASSWORD)
    await gateway.authenticate("rahul@email.com", "wrong")
    assert gateway.get_session().session.identifier == DEMO_EMAIL


async def test_logout_clears_session(gateway):
    await gateway.authenticate(DEMO_EMAIL, DEMO_PASSWORD)
    gateway.logout()
    assert gateway.get_session().logged_in is False
    gateway.logout()
    assert gateway.get_session().session is None


async def test_session_survives_a_new_gateway(directory, tmp_path):
    path = tmp_path / "session.json"
    await AuthGateway(directory, FileSessionStore(path)).authenticate(DEMO_EMAIL, DEMO_PASSWORD)
    again = AuthGateway(directory, FileSessionStore(path))
    assert again.get_session().session.site == "1"


async def test_get_session_makes_no_network_call(gateway, directory):
    gateway.get_session()
    assert directory.mock.calls == []


async def test_require_session_raises_when_logged_out(gateway):
    with pytest.raises(NotAuthenticated):
        gateway.require_session()


async def test_transport_failure_is_connection_error():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    gateway = _unreachable_gateway(handler)
    result = await gateway.authenticate(DEMO_EMAIL, DEMO_PASSWORD)
    assert result.message == CONNECTION_ERROR
    assert result.failure is FailureKind.TRANSPORT
    assert result.retryable
    assert gateway.get_session().logged_in is False


async def test_non_object_payload_is_connection_error():
    gateway = _unreachable_gateway(lambda r: httpx.Response(200, json=["unexpected"]))
    result = await gateway.authenticate(DEMO_EMAIL, DEMO_PASSWORD)
    assert result.failure is FailureKind.TRANSPORT


async def test_success_without_user_is_rejected():
    gateway = _unreachable_gateway(lambda r: httpx.Response(200, json={"success": True}))
    result = await gateway.authenticate(DEMO_EMAIL, DEMO_PASSWORD)
    assert result.message == "Invalid credentials"
    assert result.failure is FailureKind.REJECTED
