"""Directory client against the in-process service and scripted transports."""

from __future__ import annotations

import json

import httpx
import pytest
import pytest_asyncio

from portal.directory.client import DirectoryClient, unusable_reason, unwrap_list
from portal.directory.mock_service import MockDirectory, create_mock_app
from portal.directory.transports import JsonPostTransport, QueryStringTransport
from portal.errors import DirectoryTransportError, FailureKind

URL = "https://script.example/macros/s/abc/exec"


def _scripted(handler) -> DirectoryClient:
    """Client whose HTTP layer is answered by ``handler(request)``."""
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return DirectoryClient(URL, http=http)


@pytest_asyncio.fixture(params=[QueryStringTransport, JsonPostTransport], ids=["get", "post"])
async def mock_client(request):
    directory = MockDirectory()
    client = DirectoryClient.in_process(create_mock_app(directory), transport=request.param())
    client.mock = directory
    yield client
    await client.aclose()


# ── wire shape ───────────────────────────────────────────────────────

async def test_get_puts_action_and_json_list_in_query():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["action"] = request.url.params["action"]
        seen["data"] = json.loads(request.url.params["data"])
        return httpx.Response(200, json={"success": True})

    async with _scripted(handler) as client:
        await client.call("validateLogin", "admin@greenavenue.com", "admin123")

    assert seen == {"method": "GET", "action": "validateLogin", "data": ["admin@greenavenue.com", "admin123"]}


async def test_post_sends_function_and_parameters():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True})

    client = _scripted(handler)
    client.transport = JsonPostTransport()
    async with client:
        await client.call("getMyVisitors", {"site": "1"})

    assert seen["method"] == "POST"
    assert seen["content_type"] == "application/json"
    assert seen["body"] == {"function": "getMyVisitors", "parameters": [{"site": "1"}]}


async def test_no_params_sends_empty_list():
    seen = {}

    def handler(request):
        seen["data"] = request.url.params["data"]
        return httpx.Response(200, json=[])

    async with _scripted(handler) as client:
        assert await client.call("getNotices") == []
    assert seen["data"] == "[]"


# ── failures ─────────────────────────────────────────────────────────

async def test_timeout_is_transport_error():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    async with _scripted(handler) as client:
        with pytest.raises(DirectoryTransportError) as exc:
            await client.call("getNotices")
    assert exc.value.kind is FailureKind.TRANSPORT
    assert exc.value.action == "getNotices"


async def test_connect_error_is_transport_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    async with _scripted(handler) as client:
        with pytest.raises(DirectoryTransportError):
            await client.call("getNotices")


async def test_http_error_status_is_transport_error():
    async with _scripted(lambda r: httpx.Response(500, text="boom")) as client:
        with pytest.raises(DirectoryTransportError) as exc:
            await client.call("getNotices")
    assert exc.value.status_code == 500


async def test_non_json_body_is_transport_error():
    html = "<html><body>Sign in to continue</body></html>"
    async with _scripted(lambda r: httpx.Response(200, text=html)) as client:
        with pytest.raises(DirectoryTransportError):
            await client.call("getNotices")


async def test_null_body_is_returned_as_none():
    async with _scripted(lambda r: httpx.Response(200, text="null")) as client:
        assert await client.call("getNotices") is None


async def test_each_call_is_attempted_once():
    attempts = []

    def handler(request):
        attempts.append(request)
        return httpx.Response(503)

    async with _scripted(handler) as client:
        with pytest.raises(DirectoryTransportError):
            await client.call("getNotices")
    assert len(attempts) == 1


# ── against the in-process service ──────────────────────────────────

async def test_login_over_both_transports(mock_client):
    payload = await mock_client.call("validateLogin", "admin@greenavenue.com", "admin123")
    assert payload["success"] is True
    assert payload["user"]["role"] == "Admin"
    assert "password" not in payload["user"]
    assert mock_client.mock.calls == ["validateLogin"]


async def test_unknown_action_is_refused(mock_client):
    payload = await mock_client.call("dropAllTables")
    assert payload == {"success": False, "message": "Unknown action: dropAllTables"}


async def test_wrong_arity_is_refused(mock_client):
    payload = await mock_client.call("validateLogin", "only-one")
    assert payload["success"] is False


async def test_malformed_data_parameter_is_http_400():
    app = create_mock_app()
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://directory.local") as http:
        response = await http.get("/exec", params={"action": "getNotices", "data": "{not json"})
    assert response.status_code == 400


# ── payload helpers ─────────────────────────────────────────────────

def test_unwrap_list_shapes():
    assert unwrap_list([1, 2]) == [1, 2]
    assert unwrap_list({"success": True, "data": [1]}) == [1]
    assert unwrap_list({"data": []}) == []
    assert unwrap_list({"success": False, "data": [1]}) is None
    assert unwrap_list({"success": True}) is None
    assert unwrap_list(None) is None
    assert unwrap_list("rows") is None


def test_unusable_reason():
    assert unusable_reason({"success": False, "message": "Unauthorized"}) == ("Unauthorized", FailureKind.REJECTED)
    assert unusable_reason(None)[1] is FailureKind.TRANSPORT
    assert unusable_reason({"success": True})[1] is FailureKind.TRANSPORT


async def test_session_lookup_is_not_a_service_action(mock_client):
    payload = await mock_client.call("getSession")
    assert payload["success"] is False
    assert payload["message"] == "Unknown action: getSession"


@pytest.mark.parametrize("action,params", [
    ("getMyVisitors", [None]),
    ("getMyPayments", ["rahul@email.com"]),
    ("registerVisitor", [{"VisitorName": "A"}, None]),
    ("registerVisitor", ["not a record", {"site": "1"}]),
])
async def test_non_object_user_or_record_is_refused(mock_client, action, params):
    payload = await mock_client.call(action, *params)
    assert payload["success"] is False
    assert "must be an object" in payload["message"]


async def test_too_many_parameters_is_refused(mock_client):
    payload = await mock_client.call("getNotices", "extra")
    assert payload == {"success": False, "message": "Bad parameters for getNotices"}
