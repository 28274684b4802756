"""Wire strategies for calling the spreadsheet-backed Directory Service.

Both strategies carry the same thing: an action name and a list of
positional parameters.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod

import httpx

from portal.errors import ConfigError


class DirectoryTransport(ABC):
    """How an (action, parameters) call is put on the wire."""

    name: str = ""

    @abstractmethod
    async def send(self, http: httpx.AsyncClient, url: str, action: str, params: list) -> httpx.Response:
        ...


class QueryStringTransport(DirectoryTransport):
    """``GET url?action=<name>&data=<json list>``.

    Mutating calls use GET as well so browsers skip the CORS preflight
    that Apps Script web apps do not answer.
    """

    name = "get"

    async def send(self, http: httpx.AsyncClient, url: str, action: str, params: list) -> httpx.Response:
        query = {"action": action, "data": json.dumps(params, default=str)}
        return await http.get(url, params=query)


class JsonPostTransport(DirectoryTransport):
    """``POST url`` with ``{"function": <name>, "parameters": [...]}``."""

    name = "post"

    async def send(self, http: httpx.AsyncClient, url: str, action: str, params: list) -> httpx.Response:
        body = json.dumps({"function": action, "parameters": params}, default=str)
        return await http.post(url, content=body, headers={"Content-Type": "application/json"})


_TRANSPORTS: dict[str, type[DirectoryTransport]] = {
    QueryStringTransport.name: QueryStringTransport,
    JsonPostTransport.name: JsonPostTransport,
}


def get_transport(name: str) -> DirectoryTransport:
    try:
        return _TRANSPORTS[name.lower()]()
    except KeyError:
        raise ConfigError(f"Unknown directory transport: {name!r} (expected one of {sorted(_TRANSPORTS)})")
