import asyncio
import contextlib
import socket
import ssl

import pytest
import trustme

from squall.models import Scheme, TargetSpec


class FakeResolver:
    """Stands in for aiohttp's resolver so tests never touch real DNS."""

    def __init__(self, results=None, exc=None):
        self.results = results
        self.exc = exc
        self.calls = 0

    async def resolve(self, host, port=0, family=socket.AF_INET):
        self.calls += 1
        if self.exc is not None:
            raise self.exc
        if self.results is not None:
            return self.results
        return [
            {
                "hostname": host,
                "host": "127.0.0.1",
                "port": port,
                "family": socket.AF_INET,
                "proto": 0,
                "flags": 0,
            }
        ]

    async def close(self):
        pass


def responder(payload: bytes, received: list | None = None):
    """Connection handler that reads one request, sends payload and closes."""

    async def handle(reader, writer):
        request = await reader.readuntil(b"\r\n\r\n")
        if received is not None:
            received.append(request)
        if payload:
            writer.write(payload)
            await writer.drain()
        writer.close()
        with contextlib.suppress(ConnectionError, ssl.SSLError):
            await writer.wait_closed()

    return handle


@contextlib.asynccontextmanager
async def serve(handler, ssl_context=None):
    server = await asyncio.start_server(handler, "127.0.0.1", 0, ssl=ssl_context)
    port = server.sockets[0].getsockname()[1]
    async with server:
        yield port


def local_target(port: int, resource: str = "/", scheme: Scheme = Scheme.HTTP) -> TargetSpec:
    return TargetSpec(scheme=scheme, host="localhost", port=port, resource=resource)


@pytest.fixture
def fake_resolver():
    return FakeResolver()


@pytest.fixture
def closed_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture(scope="session")
def tls_contexts():
    """(server, client) contexts sharing a throwaway CA that vouches for localhost."""
    ca = trustme.CA()
    server_ctx = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
    ca.issue_cert("localhost").configure_cert(server_ctx)
    client_ctx = ssl.create_default_context()
    ca.configure_trust(client_ctx)
    return server_ctx, client_ctx
