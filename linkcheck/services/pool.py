"""Fixed-size thread pool that checks one batch of links.

The submitter fills a job queue, then closes it with one marker per worker.
Workers drain the queue until they see a marker and push every verdict to a
shared result queue. The batch is complete once all worker threads have been
joined; only then is the result queue read.
"""

import logging
import queue
import threading
from typing import List, Optional, Sequence

from linkcheck.core.config import CheckOptions, ConfigurationError
from linkcheck.core.models import LinkStatus, ValidationRequest
from linkcheck.services.checker import LinkChecker

_CLOSED = None


class ValidationPool:
    def __init__(self, checker: LinkChecker, workers: Optional[int] = None):
        if workers is None:
            workers = checker.options.workers
        if workers <= 0:
            raise ConfigurationError(f"worker count must be at least 1, got {workers}")
        self.checker = checker
        self.workers = workers

    @classmethod
    def from_options(cls, options: CheckOptions, transport=None) -> "ValidationPool":
        return cls(LinkChecker(options, transport=transport), options.workers)

    def validate_all(self, links: Sequence[str], base_context: str = "", timeout: Optional[float] = None) -> List[LinkStatus]:
        """Check every link and return one status per link, in completion order.

        Callers that need input order sort on ``LinkStatus.index``.
        """
        if not links:
            return []
        timeout = self.checker.options.timeout if timeout is None else timeout

        jobs: "queue.Queue[Optional[ValidationRequest]]" = queue.Queue()
        results: "queue.Queue[LinkStatus]" = queue.Queue()

        worker_count = min(self.workers, len(links))
        threads = [
            threading.Thread(
                target=self._worker,
                args=(jobs, results),
                name=f"linkcheck-worker-{n}",
                daemon=True,
            )
            for n in range(worker_count)
        ]
        for thread in threads:
            thread.start()

        for index, link in enumerate(links):
            jobs.put(ValidationRequest(index=index, link=link, base_context=base_context, timeout=timeout))
        for _ in threads:
            jobs.put(_CLOSED)

        for thread in threads:
            thread.join()

        collected = []
        while True:
            try:
                collected.append(results.get_nowait())
            except queue.Empty:
                break
        logging.debug(f"Checked {len(collected)} links with {worker_count} workers")
        return collected

    def _worker(self, jobs: "queue.Queue[Optional[ValidationRequest]]", results: "queue.Queue[LinkStatus]") -> None:
        while True:
            request = jobs.get()
            if request is _CLOSED:
                return
            try:
                status = self.checker.check(request.link, request.base_context, request.timeout, index=request.index)
            except Exception as e:
                # A check that blows up still yields a verdict for its link.
                logging.exception(f"Unexpected error while checking {request.link}")
                status = LinkStatus(link=request.link, valid=False, reason=str(e), index=request.index)
            results.put(status)
