"""
Shared fixtures for all tests.

Service tests run against StubTransport, an in-memory transport replaying
canned bodies. Transport tests run the real HttpTransport against a fake Civo
API served in-process through httpx.ASGITransport, so no network is needed.
"""

import json
from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi import Body, FastAPI, Query, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import SecretStr

from civo_images.config import Settings
from civo_images.infra.transport.base import TransportBase
from civo_images.infra.transport.http_client import HttpTransport
from civo_images.services.disk_image_service import DiskImageService

TEST_API_KEY = "test-api-key"

# Fixed IDs for deterministic catalog data
CATALOG = [
    {
        "id": "9a1d3e5c-0000-4000-8000-000000000001",
        "name": "ubuntu-focal",
        "version": "v20.4.0",
        "state": "available",
        "distribution": "ubuntu",
        "description": "Ubuntu 20.04 LTS",
        "label": "focal",
        "os": "linux",
        "created_at": "2023-05-02T10:15:00Z",
        "distribution_default": False,
    },
    {
        "id": "9a1d3e5c-0000-4000-8000-000000000002",
        "name": "ubuntu-jammy",
        "version": "v22.4.0",
        "state": "available",
        "distribution": "ubuntu",
        "description": "Ubuntu 22.04 LTS",
        "label": "jammy",
        "distribution_default": True,
    },
    {
        "id": "9a1d3e5c-0000-4000-8000-000000000003",
        "name": "debian-11",
        "version": "v11.0.0",
        "state": "available",
        "distribution": "debian",
        "description": "Debian Bullseye",
        "label": "bullseye",
    },
    {
        "id": "9a1d3e5c-0000-4000-8000-000000000004",
        "name": "k3s-v1.27",
        "version": "v1.27.0",
        "state": "available",
        "distribution": "k3s",
        "description": "k3s node image",
        "label": "k3s",
    },
    {
        "id": "9a1d3e5c-0000-4000-8000-000000000005",
        "name": "talos-v1.5",
        "version": "v1.5.0",
        "state": "available",
        "distribution": "talos",
        "description": "Talos node image",
        "label": "talos",
    },
]

CUSTOM_CATALOG = [
    {
        "id": "9a1d3e5c-0000-4000-8000-0000000000c1",
        "name": "custom-rocky-9",
        "version": "v9.2.0",
        "state": "available",
        "distribution": "rocky",
        "description": "Team-built Rocky Linux",
        "label": "rocky",
        "disk_image_url": "https://storage.example.com/rocky-9.qcow2",
        "disk_image_size_bytes": 1073741824,
        "created_by": "ops@example.com",
    },
    {
        "id": "9a1d3e5c-0000-4000-8000-0000000000c2",
        "name": "custom-k3s-hardened",
        "version": "v1.0.0",
        "state": "available",
        "distribution": "k3s",
        "description": "Hardened k3s",
        "label": "k3s",
    },
]


class StubTransport(TransportBase):
    """Replays canned bodies keyed by ``(method, path)`` and records every call."""

    def __init__(self) -> None:
        self.responses: dict[tuple[str, str], bytes | Exception] = {}
        self.calls: list[tuple[str, str, object]] = []

    def serve(self, method: str, path: str, reply: bytes | Exception | list | dict) -> None:
        if isinstance(reply, (list, dict)):
            reply = json.dumps(reply).encode()
        self.responses[(method, path)] = reply

    async def get(self, path: str) -> bytes:
        return self._reply("GET", path, None)

    async def post(self, path: str, json_body: object) -> bytes:
        return self._reply("POST", path, json_body)

    async def delete(self, path: str) -> bytes:
        return self._reply("DELETE", path, None)

    def _reply(self, method: str, path: str, body: object) -> bytes:
        self.calls.append((method, path, body))
        reply = self.responses[(method, path)]
        if isinstance(reply, Exception):
            raise reply
        return reply


def build_fake_api() -> FastAPI:
    """A minimal in-memory stand-in for the Civo disk image endpoints."""
    app = FastAPI()
    app.state.images = {image["id"]: dict(image) for image in CATALOG}
    app.state.custom_images = {image["id"]: dict(image) for image in CUSTOM_CATALOG}
    app.state.received = []
    app.state.force_status = None

    def _error(status_code: int, code: str, reason: str) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"code": code, "reason": reason})

    @app.middleware("http")
    async def authenticate(request: Request, call_next):  # type: ignore[no-untyped-def]
        app.state.received.append(
            {
                "method": request.method,
                "path": request.url.path,
                "query": request.url.query,
                "headers": dict(request.headers),
            }
        )
        if request.headers.get("authorization") != f"bearer {TEST_API_KEY}":
            return _error(401, "authentication_invalid_key", "The API key provided is invalid")
        if app.state.force_status is not None:
            return _error(app.state.force_status, "forced_failure", "Forced failure for test")
        return await call_next(request)

    @app.get("/v2/disk_images")
    async def list_disk_images(
        image_type: str | None = Query(None, alias="type"),
    ) -> list[dict[str, Any]]:
        images = list(app.state.images.values())
        if image_type == "custom":
            images += list(app.state.custom_images.values())
        return images

    @app.get("/v2/disk_images/{image_id}")
    async def get_disk_image(image_id: str) -> Response:
        if image_id == "malformed":
            return PlainTextResponse("<html>gateway hiccup</html>")
        image = app.state.images.get(image_id) or app.state.custom_images.get(image_id)
        if image is None:
            return _error(404, "database_disk_image_not_found", "The disk image was not found")
        return JSONResponse(content=image)

    @app.post("/v2/disk_images")
    async def create_disk_image(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
        app.state.last_payload = payload
        image_id = "9a1d3e5c-0000-4000-8000-0000000000n1"
        app.state.custom_images[image_id] = {
            "id": image_id,
            "name": payload["name"],
            "version": payload["version"],
            "state": "uploading",
            "distribution": payload["distribution"],
        }
        return {
            "id": image_id,
            "name": payload["name"],
            "distribution": payload["distribution"],
            "version": payload["version"],
            "region": payload.get("region", "LON1"),
            "status": "pending",
            "disk_image_url": f"https://upload.example.com/{image_id}?signature=abc",
            "image_size": payload["image_size_bytes"],
        }

    @app.delete("/v2/disk_images/{image_id}", status_code=204)
    async def delete_disk_image(image_id: str) -> Response:
        if app.state.custom_images.pop(image_id, None) is None:
            return _error(404, "database_disk_image_not_found", "The disk image was not found")
        return Response(status_code=204)

    return app


# --- Fixtures ---


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        civo_api_key=SecretStr(TEST_API_KEY),
        civo_api_url="http://civo.test",
        civo_request_timeout_s=5.0,
    )


@pytest.fixture
def stub_transport() -> StubTransport:
    return StubTransport()


@pytest.fixture
def service(stub_transport: StubTransport) -> DiskImageService:
    return DiskImageService(stub_transport)


@pytest.fixture
def fake_api() -> FastAPI:
    return build_fake_api()


@pytest_asyncio.fixture(scope="function")
async def http_transport(
    test_settings: Settings, fake_api: FastAPI
) -> AsyncGenerator[HttpTransport, None]:
    """Return an HttpTransport wired to the fake API."""
    transport = HttpTransport(test_settings, transport=httpx.ASGITransport(app=fake_api))
    async with transport:
        yield transport


@pytest.fixture
def http_service(http_transport: HttpTransport) -> DiskImageService:
    return DiskImageService(http_transport)
