# core/lookup.py
import datetime
import logging
import os
import queue
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from vendors import ExtractionError, get_price_and_shipping

from .browser import BrowserSession
from .logger import get_logger
from .models import UNRESOLVED, FetchJob, FetchResult, Item, VendorItem
from .pool import FETCH_WORKERS, SETTLE_DELAY_MS, FetchWorkerPool

logger = get_logger(__name__)

DEBUG_DIR = Path(os.getenv("DEBUG_DIR", "./debug_dumps"))

# Closes the result stream once every worker has exited.
_END = object()


@dataclass
class LookupStats:
    submitted: int = 0
    resolved: int = 0
    failed: int = 0
    orphans: int = 0
    # jobs still in the in-flight table after the result stream closed
    pending: int = 0


class InFlightTable:
    """Job id -> the VendorItem its result will update."""

    def __init__(self):
        self._lock = threading.Lock()
        self._jobs: Dict[int, VendorItem] = {}

    def add(self, job: FetchJob, vendor_item: VendorItem) -> None:
        with self._lock:
            self._jobs[job.job_id] = vendor_item

    def pop(self, job: FetchJob) -> Optional[VendorItem]:
        with self._lock:
            return self._jobs.pop(job.job_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)


def _sanitize(name: str) -> str:
    return "".join(ch if ch.isalnum() or ch in "._-" else "_" for ch in name)


def _dump_html(vendor_item: VendorItem, html: str) -> None:
    """Write markup that failed extraction to DEBUG_DIR when DEBUG logging is on."""
    if not logger.isEnabledFor(logging.DEBUG) or not html:
        return

    timestamp = datetime.datetime.now(datetime.timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
    path = DEBUG_DIR / f"{_sanitize(vendor_item.vendor_name)}_{timestamp}.html"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(html, encoding="utf-8")
        logger.debug("Dumped HTML for %s to %s", vendor_item.url, path)
    except OSError as exc:
        logger.debug("Failed to dump HTML to %s: %s", path, exc)


class Correlator:
    """Matches results back to the vendor records that requested them."""

    def __init__(self, table: InFlightTable, stats: LookupStats):
        self.table = table
        self.stats = stats

    def handle(self, result: FetchResult) -> Optional[VendorItem]:
        vi = self.table.pop(result.job)
        if vi is None:
            self.stats.orphans += 1
            logger.error(
                "No vendor item matches result: job %d url=%r",
                result.job.job_id,
                result.job.url,
            )
            return None

        if not result.ok:
            logger.warning("Fetch failed for %s: %s", vi.url, result.error)
            vi.price, vi.shipping = UNRESOLVED, UNRESOLVED
            self.stats.failed += 1
            return vi

        try:
            price, shipping = get_price_and_shipping(result.html, vi.url)
        except ExtractionError as e:
            logger.warning("%s: %s: %s", vi.url, type(e).__name__, e)
            _dump_html(vi, result.html)
            price, shipping = UNRESOLVED, UNRESOLVED
            self.stats.failed += 1
        except Exception:
            logger.exception("%s: unexpected error extracting price", vi.url)
            _dump_html(vi, result.html)
            price, shipping = UNRESOLVED, UNRESOLVED
            self.stats.failed += 1
        else:
            if price == UNRESOLVED:
                logger.info("%s: price lookup is not implemented for this vendor", vi.url)
            else:
                self.stats.resolved += 1

        vi.price, vi.shipping = price, shipping
        return vi


def _dispatch(
    items: List[Item],
    pool: FetchWorkerPool,
    table: InFlightTable,
    stats: LookupStats,
    results: "queue.Queue[Any]",
) -> None:
    try:
        for item in items:
            for vi in item.vendor_items:
                job = FetchJob(url=vi.url)
                # Tracked before submission so its result can always be matched.
                table.add(job, vi)
                pool.submit(job)
                stats.submitted += 1
    except Exception:
        logger.exception("Dispatcher stopped early after %d jobs", stats.submitted)
    finally:
        pool.close()
        pool.join()
        results.put(_END)


def lookup_vendor_prices(
    items: List[Item],
    num_workers: int = FETCH_WORKERS,
    settle_delay: float = SETTLE_DELAY_MS / 1000,
    session_factory: Callable[[], Any] = BrowserSession,
) -> LookupStats:
    """
    Render every vendor page and write price/shipping onto each VendorItem.

    Per-job failures are logged and leave the record UNRESOLVED; nothing
    here aborts the run.
    """
    results: "queue.Queue[Any]" = queue.Queue(maxsize=1)
    table = InFlightTable()
    stats = LookupStats()
    correlator = Correlator(table, stats)

    pool = FetchWorkerPool(
        results,
        num_workers=num_workers,
        settle_delay=settle_delay,
        session_factory=session_factory,
    )
    pool.start()

    dispatcher = threading.Thread(
        target=_dispatch,
        args=(items, pool, table, stats, results),
        name="fetch-dispatcher",
        daemon=True,
    )
    dispatcher.start()

    while True:
        result = results.get()
        if result is _END:
            break
        correlator.handle(result)

    dispatcher.join()

    stats.pending = len(table)
    if stats.pending:
        logger.error("%d jobs never produced a result.", stats.pending)

    logger.info(
        "Price lookup finished: submitted=%d resolved=%d failed=%d orphans=%d",
        stats.submitted,
        stats.resolved,
        stats.failed,
        stats.orphans,
    )
    return stats
