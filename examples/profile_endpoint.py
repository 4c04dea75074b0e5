"""
Quick sanity run: profile a public endpoint with a burst of concurrent GETs.
Run: uv run examples/profile_endpoint.py [URL] [COUNT]
"""
import asyncio
import sys

from squall import LoadProfiler, decompose_url, render_latency_histogram, render_report
from squall.logging_config import setup_logging

URL = "https://example.com/"
COUNT = 20


async def main():
    url = sys.argv[1] if len(sys.argv) > 1 else URL
    count = int(sys.argv[2]) if len(sys.argv) > 2 else COUNT

    profiler = LoadProfiler(decompose_url(url), count)
    report = await profiler.run()

    print(render_report(report))
    print()
    print(render_latency_histogram(report.latencies_sorted, bins=12))


if __name__ == "__main__":
    setup_logging("INFO")
    asyncio.run(main())
