"""Shared fixtures — a local aiohttp server standing in for the Moondream API."""
import asyncio
import json
import struct
import zlib
from dataclasses import dataclass, field

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer


def tiny_png(width: int = 10, height: int = 10) -> bytes:
    """A valid all-black greyscale PNG of the given size."""

    def chunk(kind: bytes, data: bytes) -> bytes:
        body = kind + data
        return struct.pack(">I", len(data)) + body + struct.pack(">I", zlib.crc32(body))

    header = struct.pack(">IIBBBBB", width, height, 8, 0, 0, 0, 0)
    rows = b"".join(b"\x00" + b"\x00" * width for _ in range(height))
    return (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", header)
        + chunk(b"IDAT", zlib.compress(rows))
        + chunk(b"IEND", b"")
    )


@dataclass
class RecordedRequest:
    path: str
    headers: dict[str, str]
    body: dict


@dataclass
class CannedResponse:
    status: int
    text: str
    content_type: str = "application/json"
    delay: float = 0.0


@dataclass
class MockService:
    url: str = ""
    requests: list[RecordedRequest] = field(default_factory=list)
    responses: dict[str, CannedResponse] = field(default_factory=dict)

    def respond(self, path: str, body=None, status: int = 200, text: str | None = None, delay: float = 0.0) -> None:
        match text:
            case None:
                self.responses[path] = CannedResponse(status, json.dumps(body), delay=delay)
            case raw:
                self.responses[path] = CannedResponse(status, raw, "text/plain", delay)

    async def handle(self, request: web.Request) -> web.Response:
        self.requests.append(
            RecordedRequest(request.path, dict(request.headers), await request.json())
        )
        canned = self.responses.get(request.path, CannedResponse(404, "", "text/plain"))
        if canned.delay:
            await asyncio.sleep(canned.delay)
        return web.Response(status=canned.status, text=canned.text, content_type=canned.content_type)


@pytest.fixture
def png() -> bytes:
    return tiny_png()


@pytest.fixture
async def service():
    svc = MockService()
    app = web.Application()
    app.router.add_post("/{name}", svc.handle)
    server = TestServer(app)
    await server.start_server()
    svc.url = f"http://{server.host}:{server.port}"
    yield svc
    await server.close()
