# core/pool.py
import os
import queue
import threading
from typing import Any, Callable, List, Optional

from .browser import BrowserSession
from .logger import get_logger
from .models import FetchJob, FetchResult

logger = get_logger(__name__)

FETCH_WORKERS = int(os.getenv("FETCH_WORKERS", "10"))
SETTLE_DELAY_MS = int(os.getenv("SETTLE_DELAY_MS", "500"))

# Tells a worker there are no more jobs.
_STOP = object()


class FetchWorkerPool:
    """
    Fixed-size set of threads, each driving one rendering session.

    Jobs go in through submit(), one FetchResult per job comes out on
    `results`. After close(), workers drain the remaining jobs and exit;
    join() returns once all of them have.
    """

    def __init__(
        self,
        results: "queue.Queue[Any]",
        num_workers: int = FETCH_WORKERS,
        settle_delay: float = SETTLE_DELAY_MS / 1000,
        session_factory: Callable[[], Any] = BrowserSession,
    ):
        if num_workers < 1:
            raise ValueError(f"num_workers must be at least 1, got {num_workers}")
        self.num_workers = num_workers
        self.settle_delay = settle_delay
        self.results = results
        self._session_factory = session_factory
        self._jobs: "queue.Queue[Any]" = queue.Queue(maxsize=1)
        self._threads: List[threading.Thread] = []
        self._closed = False

    def start(self) -> None:
        for n in range(self.num_workers):
            t = threading.Thread(
                target=self._run, args=(n,), name=f"fetch-worker-{n}", daemon=True
            )
            t.start()
            self._threads.append(t)
        logger.debug("Started %d fetch workers.", self.num_workers)

    def submit(self, job: FetchJob) -> None:
        if self._closed:
            raise RuntimeError("cannot submit to a closed pool")
        self._jobs.put(job)

    def close(self) -> None:
        """No further jobs will be submitted."""
        if self._closed:
            return
        self._closed = True
        for _ in self._threads:
            self._jobs.put(_STOP)

    def join(self) -> None:
        for t in self._threads:
            t.join()

    def _open_session(self, worker_id: int) -> tuple[Optional[Any], Optional[Exception]]:
        try:
            session = self._session_factory()
            session.start()
        except Exception as e:
            logger.error("Worker %d could not start its browser session: %s", worker_id, e)
            return None, e
        return session, None

    def _run(self, worker_id: int) -> None:
        session, start_error = self._open_session(worker_id)
        processed = 0
        try:
            while True:
                job = self._jobs.get()
                if job is _STOP:
                    break
                if session is None:
                    result = FetchResult(job=job, error=start_error)
                else:
                    result = self._fetch(session, job)
                self.results.put(result)
                processed += 1
        finally:
            if session is not None:
                session.stop()
            logger.debug("Worker %d exiting after %d jobs.", worker_id, processed)

    def _fetch(self, session: Any, job: FetchJob) -> FetchResult:
        logger.debug("Rendering %s (job %d)", job.url, job.job_id)
        try:
            html = session.render(job.url, self.settle_delay)
        except Exception as e:
            return FetchResult(job=job, error=e)
        return FetchResult(job=job, html=html)
