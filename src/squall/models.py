import enum
from dataclasses import dataclass, field
from typing import Any
from collections.abc import Callable


class Scheme(enum.Enum):
    HTTP = "http"
    HTTPS = "https"

    @property
    def default_port(self) -> int:
        return 443 if self is Scheme.HTTPS else 80


class ErrorKind(str, enum.Enum):
    INVALID_URL = "InvalidUrl"
    INVALID_PROTOCOL = "InvalidProtocol"
    RESOLUTION_FAILED = "ResolutionFailed"
    CONNECT_FAILED = "ConnectFailed"
    TLS_HANDSHAKE_FAILED = "TlsHandshakeFailed"
    IO_ERROR = "IoError"
    MALFORMED_STATUS_LINE = "MalformedStatusLine"


@dataclass(frozen=True)
class TargetSpec:
    scheme: Scheme
    host: str
    port: int
    resource: str = "/"
    scheme_defaulted: bool = False

    @property
    def secure(self) -> bool:
        return self.scheme is Scheme.HTTPS

    @property
    def url(self) -> str:
        return f"{self.scheme.value}://{self.host}{self.resource}"


@dataclass
class ResponseSummary:
    byte_count: int
    status_code: int | None
    status_error: ErrorKind | None = None
    body: bytes | None = None


@dataclass
class RequestOutcome:
    elapsed: float
    byte_count: int = 0
    status_code: int | None = None
    error: ErrorKind | None = None
    detail: str | None = None
    status_error: ErrorKind | None = None
    started_at: float = 0.0
    body: bytes | None = field(default=None, repr=False)

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class AggregateReport:
    total: int
    succeeded: int
    failed: int
    distinct_error_codes: frozenset[str]
    min_bytes: int
    max_bytes: int
    latencies_sorted: tuple[float, ...]
    mean_latency: float | None
    median_latency: float | None
    min_latency: float | None = None
    max_latency: float | None = None
    std_latency: float | None = None
    p90: float | None = None
    p95: float | None = None
    p99: float | None = None
    status_counts: dict[int, int] = field(default_factory=dict)

    @property
    def success_rate(self) -> float:
        return self.succeeded / self.total if self.total else 0.0


# Timeline: lane -> list of (start, end, ok)
TimelineType = dict[int, list[tuple[float, float, bool]]]

# Metrics callback: callable accepting the report as a dict
MetricsCallback = Callable[[dict[str, Any]], None]
