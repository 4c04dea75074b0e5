import asyncio
import logging
import re

from .errors import MalformedStatusLineError, TransportIOError
from .models import ErrorKind, ResponseSummary

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1000

STATUS_LINE_RE = re.compile(rb"^HTTP/(\d(?:\.\d)?) (\d{3})(?: [^\r\n]*)?\r\n")


def parse_status_line(chunk: bytes) -> int:
    """Return the status code from a chunk that starts with a full status line."""
    m = STATUS_LINE_RE.match(chunk)
    if not m:
        preview = chunk[:40].decode("latin-1")
        raise MalformedStatusLineError(f"No HTTP status line in {preview!r}")
    return int(m.group(2))


async def read_response(
    reader: asyncio.StreamReader,
    chunk_size: int = CHUNK_SIZE,
    keep_body: bool = False,
) -> ResponseSummary:
    """
    Drain the stream until EOF.

    The status code is taken from the first non-empty chunk only; a malformed
    or split status line is recorded on the summary and counting carries on.
    There is no timeout: a peer that never closes blocks here.
    """
    byte_count = 0
    status_code: int | None = None
    status_error: ErrorKind | None = None
    seen_first = False
    body: bytearray | None = bytearray() if keep_body else None

    while True:
        try:
            chunk = await reader.read(chunk_size)
        except OSError as e:
            raise TransportIOError(f"Read failed after {byte_count} bytes: {e}") from e
        if not chunk:
            break

        if not seen_first:
            seen_first = True
            try:
                status_code = parse_status_line(chunk)
            except MalformedStatusLineError as e:
                status_error = e.kind
                logger.debug(f"Status extraction failed: {e}")

        byte_count += len(chunk)
        if body is not None:
            body.extend(chunk)

    if not seen_first:
        status_error = ErrorKind.MALFORMED_STATUS_LINE
        logger.debug("Peer closed without sending any bytes")

    return ResponseSummary(
        byte_count=byte_count,
        status_code=status_code,
        status_error=status_error,
        body=bytes(body) if body is not None else None,
    )
