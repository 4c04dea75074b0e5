import math
import logging
from collections import defaultdict
from collections.abc import Callable, Iterable
from .models import AggregateReport, ErrorKind, RequestOutcome

logger = logging.getLogger(__name__)


def upper_median(sorted_values: list[float] | tuple[float, ...]) -> float | None:
    """Element at index ``len // 2``; no averaging for even lengths."""
    if not sorted_values:
        return None
    return sorted_values[len(sorted_values) // 2]


def aggregate(
    outcomes: Iterable[RequestOutcome],
    metrics_callback: Callable[[dict], None] | None = None,
) -> AggregateReport:
    """
    Reduce a fully collected list of outcomes into one report.

    Every attempt contributes its elapsed time to the latency figures, failed
    ones included. Byte statistics only look at successful outcomes.
    """
    outcomes = list(outcomes)
    total = len(outcomes)
    successes = [o for o in outcomes if o.ok]
    succeeded = len(successes)
    failed = total - succeeded
    logger.debug(
        f"Aggregating outcomes: total={total}, success={succeeded}, errors={failed}"
    )

    codes: set[str] = set()
    status_counts: dict[int, int] = defaultdict(int)
    for o in outcomes:
        if not o.ok:
            codes.add(o.error.value)
            continue
        if o.status_code is None:
            codes.add((o.status_error or ErrorKind.MALFORMED_STATUS_LINE).value)
        else:
            status_counts[o.status_code] += 1
            if o.status_code != 200:
                codes.add(str(o.status_code))

    sizes = [o.byte_count for o in successes]
    sl = sorted(o.elapsed for o in outcomes)
    n = len(sl)

    stats_dict = {
        "total": total,
        "succeeded": succeeded,
        "failed": failed,
        "distinct_error_codes": frozenset(codes),
        "min_bytes": min(sizes) if sizes else 0,
        "max_bytes": max(sizes) if sizes else 0,
        "latencies_sorted": tuple(sl),
        "mean_latency": None,
        "median_latency": None,
        "min_latency": None,
        "max_latency": None,
        "std_latency": None,
        "p90": None,
        "p95": None,
        "p99": None,
        "status_counts": dict(status_counts),
    }

    if n == 0:
        if metrics_callback:
            metrics_callback(stats_dict)
        logger.info("No requests recorded. Returning empty report.")
        return AggregateReport(**stats_dict)

    mean = sum(sl) / n
    sum_sq = sum(x * x for x in sl)
    std = math.sqrt(max(0.0, (sum_sq / n) - (mean * mean)))

    def pct(p):
        return sl[max(0, min(n - 1, int(p * (n - 1))))]

    stats_dict.update(
        {
            "mean_latency": mean,
            "median_latency": upper_median(sl),
            "min_latency": sl[0],
            "max_latency": sl[-1],
            "std_latency": std,
            "p90": pct(0.90),
            "p95": pct(0.95),
            "p99": pct(0.99),
        }
    )

    if metrics_callback:
        metrics_callback(stats_dict)

    if not succeeded:
        logger.warning(f"All {total} requests failed: {sorted(codes)}")

    logger.info(
        f"Report computed: success={succeeded}, errors={failed}, "
        f"mean={mean:.3f}s, median={stats_dict['median_latency']:.3f}s, "
        f"success_rate={succeeded / total * 100:.1f}%"
    )

    return AggregateReport(**stats_dict)
