"""
HttpTransport: TransportBase implemented on httpx.AsyncClient.

Authenticates with the Civo API key as a bearer token and turns every httpx
failure into a classified TransportError before it leaves this module.
"""

from types import TracebackType

import httpx

from civo_images.config import Settings
from civo_images.core.exceptions import classify_transport_error
from civo_images.core.hooks import attach_request_id, bound_request_id, log_response
from civo_images.infra.transport.base import TransportBase


class HttpTransport(TransportBase):
    """
    Production transport talking to the Civo REST API.

    ``transport`` lets callers swap the network layer, e.g. an
    ``httpx.ASGITransport`` serving a fake API in tests.
    """

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=settings.civo_api_url,
            timeout=httpx.Timeout(settings.civo_request_timeout_s),
            headers={
                "Authorization": f"bearer {settings.civo_api_key.get_secret_value()}",
                "Accept": "application/json",
                "User-Agent": f"{settings.app_name}/{settings.app_version}",
            },
            event_hooks={"request": [attach_request_id], "response": [log_response]},
            transport=transport,
        )

    async def get(self, path: str) -> bytes:
        return await self._send("GET", path)

    async def post(self, path: str, json_body: object) -> bytes:
        return await self._send("POST", path, json=json_body)

    async def delete(self, path: str) -> bytes:
        return await self._send("DELETE", path)

    async def _send(self, method: str, path: str, **kwargs: object) -> bytes:
        with bound_request_id():
            try:
                response = await self._client.request(
                    method, path, **kwargs  # type: ignore[arg-type]
                )
                response.raise_for_status()
            except httpx.HTTPError as exc:
                raise classify_transport_error(exc) from exc
        return response.content

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()
