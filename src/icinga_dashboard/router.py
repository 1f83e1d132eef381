"""
Request routing for the Icinga dashboard.

Routing works on the raw, still percent-encoded request path so that an
encoded slash inside a segment does not split it.
"""

from enum import Enum
from typing import List, NamedTuple, Optional
from urllib.parse import unquote


class RouteKind(str, Enum):
    """The handlers a request can be dispatched to."""

    INDEX = "index"
    TABLE = "table"
    STATIC = "static"
    NOT_FOUND = "not_found"


class Route(NamedTuple):
    """
    The result of routing a request path.

    Attributes:
        kind: Which handler serves the request.
        file_name: The requested asset name for STATIC routes, otherwise None.
    """

    kind: RouteKind
    file_name: Optional[str] = None


def decode_path_segments(raw_path: str) -> List[str]:
    """
    Split a raw path on '/' and percent-decode each segment.

    Leading empty segments are dropped. Invalid UTF-8 is replaced, never rejected.
    """
    segments = [unquote(piece, errors="replace") for piece in raw_path.split("/")]
    while segments and not segments[0]:
        segments.pop(0)
    return segments


def route(raw_path: str) -> Route:
    """
    Map a raw request path to the handler serving it.

    Every path maps to exactly one route; paths without a dedicated
    handler map to NOT_FOUND.
    """
    segments = decode_path_segments(raw_path)

    if not segments:
        return Route(RouteKind.INDEX)
    if segments == ["table"]:
        return Route(RouteKind.TABLE)
    if len(segments) == 2 and segments[0] == "static":
        return Route(RouteKind.STATIC, file_name=segments[1])
    return Route(RouteKind.NOT_FOUND)
