"""Client side of the spreadsheet-backed Directory Service."""

from portal.directory.client import DirectoryClient
from portal.directory.transports import DirectoryTransport, JsonPostTransport, QueryStringTransport, get_transport

__all__ = [
    "DirectoryClient",
    "DirectoryTransport", "JsonPostTransport", "QueryStringTransport", "get_transport",
]
