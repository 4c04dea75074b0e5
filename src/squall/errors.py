from .models import ErrorKind


class SquallError(Exception):
    """Base class for every failure squall knows how to classify."""

    kind: ErrorKind


class InvalidUrlError(SquallError):
    kind = ErrorKind.INVALID_URL


class InvalidProtocolError(SquallError):
    kind = ErrorKind.INVALID_PROTOCOL


class ResolutionFailedError(SquallError):
    kind = ErrorKind.RESOLUTION_FAILED


class ConnectFailedError(SquallError):
    kind = ErrorKind.CONNECT_FAILED


class TlsHandshakeFailedError(SquallError):
    kind = ErrorKind.TLS_HANDSHAKE_FAILED


class TransportIOError(SquallError):
    kind = ErrorKind.IO_ERROR


class MalformedStatusLineError(SquallError):
    kind = ErrorKind.MALFORMED_STATUS_LINE
