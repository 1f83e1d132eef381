"""
Core interfaces for the Icinga dashboard.

This module defines the abstract base class separating the request handling
pipeline from the network I/O it performs, so the pipeline can be exercised
without a running Icinga instance.
"""

import abc
from typing import Any, Dict

from yarl import URL

from .domain import UpstreamResponse


class ObjectQueryClient(abc.ABC):
    """
    Abstract interface for a component that queries the Icinga object API.

    Its responsibility is to encapsulate the network I/O for one query
    and return a structured result.
    """

    @abc.abstractmethod
    async def query(
        self, url: URL, username: str, password: str, body: Dict[str, Any]
    ) -> UpstreamResponse:
        """
        Sends a filtered object query to the Icinga API.

        Args:
            url: The object endpoint, e.g. ``https://icinga:5665/v1/objects/hosts``.
            username: Username for HTTP Basic authentication.
            password: Password for HTTP Basic authentication.
            body: The JSON request body, e.g. ``{"filter": "..."}``.

        Returns:
            UpstreamResponse: The status and complete body, or the transport error.

        Raises:
            Exception: Implementations should handle network errors internally and include
                them in the UpstreamResponse rather than raising them.
        """
        pass
