"""
BackendService Port - Interface for the host's HTTP transport.

The adapter never talks to the network itself; every request goes through
this port so the host (or a standalone httpx implementation) owns timeouts,
cookies and authentication.
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class BackendRequest(BaseModel):
    """A single request routed through the host."""

    url: str
    method: str = "POST"
    data: Any = None
    headers: dict[str, str] = Field(default_factory=dict)


class BackendResponse(BaseModel):
    """A successful (2xx) reply."""

    status: int
    data: Any = None


class BackendRequestError(Exception):
    """
    Raised by the transport for HTTP error replies and network failures.

    Attributes:
        status: HTTP status code, or None when no response was received
        data: Decoded response body, if any
    """

    def __init__(self, message: str, status: int | None = None, data: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data

    @property
    def backend_message(self) -> str | None:
        """The `message` field of a structured error body."""
        if isinstance(self.data, dict) and self.data.get("message"):
            return str(self.data["message"])
        return None


class BackendService(ABC):
    """
    Abstract interface for the host's datasource request facility.
    """

    @abstractmethod
    async def datasource_request(self, request: BackendRequest) -> BackendResponse:
        """
        Send a request and return the decoded reply.

        Raises:
            BackendRequestError: on HTTP status >= 400 or transport failure
        """
        ...
