"""
Domain models for the Icinga dashboard.

This module defines the core data structures used throughout the application:
the queried object types, decoded query parameters, the rows shown in the
status table and the outcome of a single upstream request.
"""

from enum import Enum
from typing import List, NamedTuple, Optional, Tuple
from urllib.parse import parse_qsl

# State used when the upstream does not report a usable state
UNKNOWN_STATE = 5
# State used when the upstream reports a state above the known range
OUT_OF_RANGE_STATE = 6


class ObjectType(str, Enum):
    """
    Icinga object types the dashboard can query.

    Inheriting from 'str' allows enum members to be used directly
    when building upstream URL paths.
    """

    HOSTS = "hosts"
    SERVICES = "services"


class QueryParameters(NamedTuple):
    """
    Decoded ``application/x-www-form-urlencoded`` query string.

    Same-named parameters keep their order of appearance.

    Attributes:
        pairs: The decoded (name, value) pairs in query string order.
    """

    pairs: Tuple[Tuple[str, str], ...]

    @classmethod
    def parse(cls, query_string: str) -> "QueryParameters":
        """
        Decode a raw query string. Never fails: invalid percent-encoding is
        replaced with U+FFFD.
        """
        return cls(
            pairs=tuple(
                parse_qsl(query_string, keep_blank_values=True, errors="replace")
            )
        )

    def get_last(self, name: str) -> Optional[str]:
        """Return the value of the last occurrence of ``name``, or None."""
        value: Optional[str] = None
        for key, candidate in self.pairs:
            if key == name:
                value = candidate
        return value


class MonitoredRow(NamedTuple):
    """
    A single line of the status table.

    Attributes:
        host: Name of the host (the owning host for services).
        service: Name of the service, empty for hosts.
        output: Output of the last check, empty if none was reported.
        state: Icinga state, 0 (OK/UP) and up; see UNKNOWN_STATE and OUT_OF_RANGE_STATE.
    """

    host: str
    service: str
    output: str
    state: int

    def sort_key(self) -> Tuple[int, str, str, str]:
        """Most severe state first, then host, service and output ascending."""
        return (-self.state, self.host, self.service, self.output)


def sort_rows(rows: List[MonitoredRow]) -> List[MonitoredRow]:
    """Return the rows in display order."""
    return sorted(rows, key=MonitoredRow.sort_key)


class UpstreamResponse(NamedTuple):
    """
    The outcome of a single request to the Icinga API.

    Attributes:
        url: The URL that was requested.
        error: Transport error (connection, TLS, timeout, reading the body), or None.
        status_code: The HTTP status code received, or None if an error occurred.
        body: The complete response body, empty if an error occurred.
    """

    url: str
    error: Optional[Exception]
    status_code: Optional[int]
    body: bytes
