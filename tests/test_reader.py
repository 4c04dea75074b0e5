import asyncio

import pytest

from squall.errors import MalformedStatusLineError
from squall.models import ErrorKind
from squall.reader import parse_status_line, read_response

RESPONSE = b"HTTP/1.1 200 OK\r\nContent-Length: 5\r\n\r\nhello"


async def _read(payload: bytes, **kwargs):
    reader = asyncio.StreamReader()
    if payload:
        reader.feed_data(payload)
    reader.feed_eof()
    return await read_response(reader, **kwargs)


def test_parse_status_line():
    assert parse_status_line(RESPONSE) == 200
    assert parse_status_line(b"HTTP/1.0 404 Not Found\r\n") == 404
    assert parse_status_line(b"HTTP/2 204\r\n") == 204


@pytest.mark.parametrize(
    "chunk",
    [
        b"",
        b"garbage\r\n",
        b"HTTP/1.1 20 OK\r\n",
        b"HTTP/1.1 200 OK",  # line not terminated in this chunk
        b"<html>HTTP/1.1 200 OK\r\n",
    ],
)
def test_parse_status_line_rejects(chunk):
    with pytest.raises(MalformedStatusLineError):
        parse_status_line(chunk)


def test_read_counts_bytes_and_status():
    summary = asyncio.run(_read(RESPONSE))
    assert summary.byte_count == len(RESPONSE)
    assert summary.status_code == 200
    assert summary.status_error is None
    assert summary.body is None


def test_read_keeps_body_when_asked():
    summary = asyncio.run(_read(RESPONSE, keep_body=True))
    assert summary.body == RESPONSE


def test_read_many_chunks():
    payload = b"HTTP/1.1 503 Service Unavailable\r\n\r\n" + b"x" * 4321
    summary = asyncio.run(_read(payload, chunk_size=1000))
    assert summary.byte_count == len(payload)
    assert summary.status_code == 503


def test_status_line_split_across_chunks_keeps_counting():
    summary = asyncio.run(_read(RESPONSE, chunk_size=8))
    assert summary.status_code is None
    assert summary.status_error is ErrorKind.MALFORMED_STATUS_LINE
    assert summary.byte_count == len(RESPONSE)


def test_status_only_taken_from_first_chunk():
    payload = b"not http at all\r\n" + b"HTTP/1.1 200 OK\r\n"
    summary = asyncio.run(_read(payload, chunk_size=17))
    assert summary.status_code is None
    assert summary.byte_count == len(payload)


def test_empty_stream():
    summary = asyncio.run(_read(b""))
    assert summary.byte_count == 0
    assert summary.status_code is None
    assert summary.status_error is ErrorKind.MALFORMED_STATUS_LINE
