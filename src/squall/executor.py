import logging
import ssl

from aiohttp.abc import AbstractResolver

from .errors import SquallError
from .models import RequestOutcome, TargetSpec
from .reader import CHUNK_SIZE, read_response
from .transport import Connection, open_connection
from .utils import now

logger = logging.getLogger(__name__)


def build_request(target: TargetSpec) -> bytes:
    return (
        f"GET {target.resource} HTTP/1.1\r\n"
        f"Host: {target.host}\r\n"
        "Connection: close\r\n"
        "\r\n"
    ).encode("utf-8")


async def execute_request(
    target: TargetSpec,
    resolver: AbstractResolver | None = None,
    request: bytes | None = None,
    chunk_size: int = CHUNK_SIZE,
    keep_body: bool = False,
    ssl_context: ssl.SSLContext | None = None,
) -> RequestOutcome:
    """
    Run one connect/send/drain/close cycle and time it.

    Failures are returned on the outcome, never raised. ``elapsed`` covers
    the time spent up to the point of failure.
    """
    if request is None:
        request = build_request(target)

    start = now()
    conn: Connection | None = None
    try:
        conn = await open_connection(target, resolver, ssl_context)
        await conn.write_all(request)
        summary = await read_response(conn.reader, chunk_size, keep_body)
        elapsed = now() - start
    except SquallError as e:
        elapsed = now() - start
        logger.debug(f"Request to {target.url} failed after {elapsed:.3f}s: {e}")
        return RequestOutcome(
            elapsed=elapsed, error=e.kind, detail=str(e), started_at=start
        )
    finally:
        if conn is not None:
            await conn.close()

    logger.debug(
        f"Fetched {target.url}: status={summary.status_code}, "
        f"size={summary.byte_count} bytes, latency={elapsed:.3f}s"
    )
    return RequestOutcome(
        elapsed=elapsed,
        byte_count=summary.byte_count,
        status_code=summary.status_code,
        status_error=summary.status_error,
        started_at=start,
        body=summary.body,
    )
