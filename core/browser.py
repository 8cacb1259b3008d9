# core/browser.py
import os
from typing import Optional

from playwright.sync_api import Browser, BrowserContext, Page, Playwright, sync_playwright

from .logger import get_logger

logger = get_logger(__name__)

HEADLESS = os.getenv("BROWSER_HEADLESS", "true").lower() == "true"
NAV_TIMEOUT_MS = int(os.getenv("NAV_TIMEOUT_MS", "60000"))
USER_AGENT = os.getenv(
    "BROWSER_USER_AGENT",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
)


class BrowserSession:
    """
    A headless Chromium page that lives for as long as the worker owning it.

    Playwright's sync API is bound to the thread that started it, so each
    worker thread creates and stops its own session.
    """

    def __init__(
        self,
        headless: bool = HEADLESS,
        nav_timeout_ms: int = NAV_TIMEOUT_MS,
        user_agent: str = USER_AGENT,
    ):
        self.headless = headless
        self.nav_timeout_ms = nav_timeout_ms
        self.user_agent = user_agent

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    def start(self) -> None:
        logger.debug("Starting browser session (headless=%s)", self.headless)
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(
                headless=self.headless,
                args=["--no-sandbox", "--disable-dev-shm-usage"],
            )
            self._context = self._browser.new_context(user_agent=self.user_agent)
            self._page = self._context.new_page()
            # 0 means no deadline
            self._page.set_default_timeout(self.nav_timeout_ms)
        except Exception:
            self.stop()
            raise

    def stop(self) -> None:
        for closeable in (self._context, self._browser):
            if closeable is None:
                continue
            try:
                closeable.close()
            except Exception as e:
                logger.debug("Error closing browser resource: %s", e)
        if self._playwright is not None:
            try:
                self._playwright.stop()
            except Exception as e:
                logger.debug("Error stopping Playwright: %s", e)
        self._page = None
        self._context = None
        self._browser = None
        self._playwright = None

    def __enter__(self) -> "BrowserSession":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("browser session is not started")
        return self._page

    def navigate(self, url: str) -> None:
        self.page.goto(url, wait_until="load")

    def wait(self, seconds: float) -> None:
        if seconds > 0:
            self.page.wait_for_timeout(seconds * 1000)

    def capture(self) -> str:
        """Serialized DOM including everything client-side scripts injected."""
        return self.page.content()

    def render(self, url: str, settle_seconds: float) -> str:
        self.navigate(url)
        self.wait(settle_seconds)
        return self.capture()
