from collections.abc import Iterable

from .models import AggregateReport, RequestOutcome, TimelineType
from .utils import format_bytes, to_ms


def render_report(report: AggregateReport) -> str:
    codes = ", ".join(sorted(report.distinct_error_codes)) or "none"
    lines = [
        f"Requests:        {report.total}",
        f"Success rate:    {report.success_rate * 100:.1f}%",
        f"Failed:          {report.failed}",
    ]
    if report.succeeded:
        lines += [
            f"Min size:        {report.min_bytes} bytes ({format_bytes(report.min_bytes)})",
            f"Max size:        {report.max_bytes} bytes ({format_bytes(report.max_bytes)})",
        ]
    else:
        lines += ["Min size:        n/a", "Max size:        n/a"]
    lines += [
        f"Min latency:     {to_ms(report.min_latency)}",
        f"Max latency:     {to_ms(report.max_latency)}",
        f"Mean latency:    {to_ms(report.mean_latency)}",
        f"Median latency:  {to_ms(report.median_latency)}",
        f"Error codes:     {codes}",
    ]
    return "\n".join(lines)


def render_latency_histogram(latencies: Iterable[float], bins: int = 20) -> str:
    latencies = list(latencies)
    if not latencies:
        return "No latency data."
    lo, hi = min(latencies), max(latencies)
    if hi <= lo:
        return f"Histogram: single value {lo * 1000:.2f}ms"

    width = 40
    counts = [0] * bins
    for x in latencies:
        j = int((x - lo) / (hi - lo) * bins)
        if j == bins:
            j -= 1
        counts[j] += 1

    peak = max(counts)
    lines = []
    for i, c in enumerate(counts):
        left = (lo + (hi - lo) * (i / bins)) * 1000
        right = (lo + (hi - lo) * ((i + 1) / bins)) * 1000
        bar = "#" * max(1, int((c / peak) * width)) if c else ""
        lines.append(f"{left:9.2f}ms - {right:9.2f}ms | {bar} ({c})")
    return "Latency Histogram\n" + "\n".join(lines)


def build_timeline(
    outcomes: Iterable[RequestOutcome], t0: float, lanes: int = 16
) -> TimelineType:
    """Spread request spans, in start order, round-robin over ``lanes`` rows."""
    timeline: TimelineType = {}
    ordered = sorted(outcomes, key=lambda o: o.started_at)
    for i, o in enumerate(ordered):
        start_rel = o.started_at - t0
        timeline.setdefault(i % lanes, []).append(
            (start_rel, start_rel + o.elapsed, o.ok)
        )
    return timeline


def render_timeline(timeline: TimelineType, width: int = 80) -> str:
    if not timeline:
        return "No timeline data."

    max_t = 0.0
    for segs in timeline.values():
        for _, end_rel, _ in segs:
            if end_rel > max_t:
                max_t = end_rel
    if max_t <= 0:
        max_t = 1.0

    lines = ["Request Timeline (relative seconds, '=' ok, 'x' failed)"]
    for lane in sorted(timeline.keys()):
        buf = [" "] * width
        for start_rel, end_rel, ok in timeline[lane]:
            a = int(start_rel / max_t * (width - 1))
            b = int(end_rel / max_t * (width - 1))
            a, b = max(0, a), max(a, b)
            for k in range(a, min(b, width - 1) + 1):
                if buf[k] != "x":
                    buf[k] = "=" if ok else "x"
        lines.append(f"L{lane:02d} |{''.join(buf)}|")
    lines.append(f"0s{' ' * (width - 6)}~ {max_t:.2f}s")
    return "\n".join(lines)
