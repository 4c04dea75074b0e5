import asyncio
import logging
import ssl

import aiohttp
from aiohttp.abc import AbstractResolver
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from .executor import build_request, execute_request
from .metrics import aggregate
from .models import AggregateReport, MetricsCallback, RequestOutcome, TargetSpec
from .reader import CHUNK_SIZE
from .utils import now

logger = logging.getLogger(__name__)

LARGE_COUNT_WARNING = 1000


class LoadProfiler:
    """
    Fire ``count`` independent GET requests at one target and aggregate them.

    Every request gets its own task and its own connection, all started at
    once. There is no cap on concurrency and no cancellation: ``run`` returns
    only after every task has finished, so a peer that never closes stalls
    the whole run.
    """

    def __init__(
        self,
        target: TargetSpec,
        count: int,
        resolver: AbstractResolver | None = None,
        chunk_size: int = CHUNK_SIZE,
        use_progress_bar: bool = True,
        metrics_callback: MetricsCallback | None = None,
        large_count_warning: int = LARGE_COUNT_WARNING,
        ssl_context: ssl.SSLContext | None = None,
    ) -> None:
        if count < 1:
            raise ValueError(f"count must be a positive integer, got {count}")

        self.target = target
        self.count = count
        self.resolver = resolver
        self.chunk_size = chunk_size
        self.use_progress_bar = use_progress_bar
        self.metrics_callback = metrics_callback
        self.large_count_warning = large_count_warning
        self.ssl_context = ssl_context

        # Runtime state
        self.outcomes: list[RequestOutcome] = []
        self._t0: float | None = None

        logger.info(
            f"Initialized profiler for {target.url} "
            f"(port {target.port}, secure={target.secure}) with {count} requests"
        )

    @property
    def t0(self) -> float | None:
        return self._t0

    async def run(self) -> AggregateReport:
        if self.count > self.large_count_warning:
            logger.warning(
                f"Opening {self.count} simultaneous connections; "
                "make sure the open file limit allows it"
            )

        own_resolver = self.resolver is None
        resolver = aiohttp.ThreadedResolver() if own_resolver else self.resolver
        request = build_request(self.target)

        progress = None
        task_id = None
        if self.use_progress_bar:
            progress = Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                MofNCompleteColumn(),
                TimeElapsedColumn(),
                transient=True,
            )
            progress.start()
            task_id = progress.add_task("[cyan]Requesting...", total=self.count)

        self._t0 = now()
        logger.info(f"Dispatching {self.count} requests to {self.target.url}")

        try:
            tasks = [
                asyncio.create_task(
                    execute_request(
                        self.target,
                        resolver=resolver,
                        request=request,
                        chunk_size=self.chunk_size,
                        ssl_context=self.ssl_context,
                    )
                )
                for _ in range(self.count)
            ]
            # Completion order, not submission order.
            for fut in asyncio.as_completed(tasks):
                outcome = await fut
                self.outcomes.append(outcome)
                if progress and task_id is not None:
                    progress.advance(task_id)
        finally:
            if progress:
                progress.stop()
            if own_resolver:
                await resolver.close()

        logger.info(
            f"All {len(self.outcomes)} requests finished in {now() - self._t0:.2f}s"
        )
        return aggregate(self.outcomes, self.metrics_callback)
