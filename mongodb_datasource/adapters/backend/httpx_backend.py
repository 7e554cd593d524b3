"""
Httpx Backend - BackendService over plain HTTP.

Lets the adapter run outside a dashboard host, talking to the host's HTTP API
(or any compatible proxy) directly.
"""

from typing import Any

import httpx
from pydantic import BaseModel, PrivateAttr

from mongodb_datasource.core.ports.backend_service import (
    BackendRequest,
    BackendRequestError,
    BackendResponse,
    BackendService,
)


class HttpxBackendService(BaseModel, BackendService):
    """
    Transport that resolves relative request URLs against ``base_url``.
    Configured via Pydantic model fields.
    """
    base_url: str
    timeout: float = 30.0
    headers: dict[str, str] = {}

    _client: httpx.AsyncClient | None = PrivateAttr(default=None)

    def model_post_init(self, __context):
        """Normalize URL after initialization."""
        self.base_url = self.base_url.rstrip("/")

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=self.headers,
            )
        return self._client

    def resolve(self, url: str) -> str:
        if url.startswith(("http://", "https://")):
            return url
        return f"{self.base_url}/{url.lstrip('/')}"

    async def datasource_request(self, request: BackendRequest) -> BackendResponse:
        client = await self._get_client()

        try:
            response = await client.request(
                request.method,
                self.resolve(request.url),
                json=request.data,
                headers=request.headers,
            )
        except httpx.HTTPError as e:
            raise BackendRequestError(str(e) or type(e).__name__) from e

        data = self._decode(response)
        if response.status_code >= 400:
            raise BackendRequestError(
                f"HTTP {response.status_code}",
                status=response.status_code,
                data=data,
            )

        return BackendResponse(status=response.status_code, data=data)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text or None

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
