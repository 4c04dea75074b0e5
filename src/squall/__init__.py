__all__ = [
    "LoadProfiler",
    "aggregate",
    "decompose_url",
    "execute_request",
    "render_latency_histogram",
    "render_report",
    "render_timeline",
]


from .core import LoadProfiler
from .executor import execute_request
from .metrics import aggregate
from .rendering import render_latency_histogram, render_report, render_timeline
from .url import decompose_url
