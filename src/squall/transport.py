import asyncio
import logging
import socket
import ssl

import aiohttp
from aiohttp.abc import AbstractResolver

from .errors import (
    ConnectFailedError,
    ResolutionFailedError,
    TlsHandshakeFailedError,
    TransportIOError,
)
from .models import TargetSpec

logger = logging.getLogger(__name__)


async def resolve_address(
    target: TargetSpec, resolver: AbstractResolver | None = None
) -> tuple[str, int]:
    """Resolve the target host and return the first (address, family) found."""
    own_resolver = resolver is None
    if own_resolver:
        resolver = aiohttp.ThreadedResolver()
    try:
        results = await resolver.resolve(target.host, target.port, socket.AF_UNSPEC)
    except (OSError, UnicodeError) as e:
        # getaddrinfo raises UnicodeError for empty or over-long labels.
        raise ResolutionFailedError(f"Could not resolve {target.host}: {e}") from e
    finally:
        if own_resolver:
            await resolver.close()

    if not results:
        raise ResolutionFailedError(f"No address found for {target.host}")

    first = results[0]
    logger.debug(
        f"Resolved {target.host} to {first['host']} ({len(results)} candidate(s))"
    )
    return first["host"], first["family"]


class Connection:
    """One exclusively owned byte stream to the target, TLS-wrapped if needed."""

    def __init__(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter, address: str
    ) -> None:
        self.reader = reader
        self.writer = writer
        self.address = address

    async def write_all(self, data: bytes) -> None:
        try:
            self.writer.write(data)
            await self.writer.drain()
        except OSError as e:
            raise TransportIOError(f"Write to {self.address} failed: {e}") from e

    async def close(self) -> None:
        if self.writer.is_closing():
            return
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except OSError as e:
            # Peers often drop TLS without close_notify.
            logger.debug(f"Error while closing connection to {self.address}: {e}")


async def open_connection(
    target: TargetSpec,
    resolver: AbstractResolver | None = None,
    ssl_context: ssl.SSLContext | None = None,
) -> Connection:
    address, family = await resolve_address(target, resolver)

    try:
        reader, writer = await asyncio.open_connection(address, target.port, family=family)
    except OSError as e:
        raise ConnectFailedError(
            f"Connection to {address}:{target.port} failed: {e}"
        ) from e
    logger.debug(f"Connected to {address}:{target.port}")

    if target.secure:
        context = ssl_context or ssl.create_default_context()
        try:
            await writer.start_tls(context, server_hostname=target.host)
        except (ssl.SSLError, OSError, EOFError, ValueError) as e:
            writer.close()
            raise TlsHandshakeFailedError(
                f"TLS handshake with {target.host} failed: {e}"
            ) from e
        logger.debug(f"TLS established with {target.host}")

    return Connection(reader, writer, f"{address}:{target.port}")
