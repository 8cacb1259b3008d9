import argparse
import sys
from typing import Any, Callable, List, Optional

from core.browser import BrowserSession
from core.catalog import CatalogError, load_items, load_items_from_path
from core.logger import get_logger, set_verbose
from core.lookup import lookup_vendor_prices
from core.models import Item
from core.pool import FETCH_WORKERS, SETTLE_DELAY_MS
from core.report_text import build_json_report, build_plaintext_report, build_vendor_reports
from core.selector import items_by_lowest_cost_vendor, items_by_vendor

logger = get_logger(__name__)


class FatalError(Exception):
    def __init__(self, context: str, detail: Any):
        super().__init__(f"{context}: {detail}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="price-compare",
        description="Find the cheapest vendor for every item on a tab-separated shopping list.",
    )
    parser.add_argument(
        "catalog",
        nargs="?",
        help="Shopping list file (reads standard input when omitted)",
    )
    parser.add_argument(
        "-w", "--workers",
        type=int,
        default=FETCH_WORKERS,
        help=f"Number of concurrent browser workers (default: {FETCH_WORKERS})",
    )
    parser.add_argument(
        "--settle-ms",
        type=int,
        default=SETTLE_DELAY_MS,
        help=f"Milliseconds to wait after page load before reading prices (default: {SETTLE_DELAY_MS})",
    )
    output = parser.add_mutually_exclusive_group()
    output.add_argument("--by-vendor", action="store_true", help="Group the report by vendor")
    output.add_argument("--json", action="store_true", help="Print the selection as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def read_catalog(path: Optional[str]) -> List[Item]:
    try:
        if path:
            return load_items_from_path(path)
        return load_items(sys.stdin)
    except CatalogError as e:
        raise FatalError("reading input", e) from e


def render_report(items: List[Item], by_vendor: bool = False, as_json: bool = False) -> str:
    if as_json:
        return build_json_report(items)
    if by_vendor:
        return build_vendor_reports(items_by_vendor(items))
    return build_plaintext_report(items)


def run(args: argparse.Namespace, session_factory: Callable[[], Any] = BrowserSession) -> str:
    items = read_catalog(args.catalog)
    logger.info("Looking up prices for %d items.", len(items))

    try:
        lookup_vendor_prices(
            items,
            num_workers=args.workers,
            settle_delay=args.settle_ms / 1000,
            session_factory=session_factory,
        )
    except Exception as e:
        raise FatalError("looking up prices", e) from e

    cheapest = items_by_lowest_cost_vendor(items)
    return render_report(cheapest, by_vendor=args.by_vendor, as_json=args.json)


def main(argv: Optional[List[str]] = None, session_factory: Callable[[], Any] = BrowserSession) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        set_verbose()
        logger.debug("Debug logging enabled")

    if args.workers < 1:
        logger.error("error: --workers must be at least 1")
        return 1

    try:
        report = run(args, session_factory=session_factory)
    except FatalError as e:
        logger.error("error: %s", e)
        return 1

    print(report)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
