import threading
import time

import pytest


def banggood_page(price: str = "US$12.34", shipping: str | None = None) -> str:
    shipping_html = f'<em class="shipping-price-em">{shipping}</em>' if shipping is not None else ""
    return (
        "<html><head>"
        '<link rel="canonical" href="https://www.banggood.com/Widget-p-1.html">'
        "</head><body>"
        f'<span class="main-price">{price}</span>'
        f"{shipping_html}"
        "</body></html>"
    )


def aliexpress_page() -> str:
    return (
        '<html><head><link rel="canonical" href="https://www.aliexpress.com/item/1.html">'
        "</head><body><div class=\"product-price\">US $3.99</div></body></html>"
    )


def unknown_page() -> str:
    return "<html><body><p>Some other shop</p></body></html>"


class FakeSession:
    """Stands in for BrowserSession: url -> markup, or an exception to raise."""

    def __init__(self, pages, delay=0.0, fail_start=None):
        self.pages = pages
        self.delay = delay
        self.fail_start = fail_start
        self.started = 0
        self.stopped = 0
        self.rendered = []
        self.max_active = 0
        self._active = 0
        self._lock = threading.Lock()

    def start(self):
        self.started += 1
        if self.fail_start is not None:
            raise self.fail_start

    def stop(self):
        self.stopped += 1

    def render(self, url, settle_seconds):
        with self._lock:
            self._active += 1
            self.max_active = max(self.max_active, self._active)
        try:
            if self.delay:
                time.sleep(self.delay)
            page = self.pages.get(url)
            if isinstance(page, BaseException):
                raise page
            if page is None:
                raise RuntimeError(f"net::ERR_NAME_NOT_RESOLVED at {url}")
            self.rendered.append(url)
            return page
        finally:
            with self._lock:
                self._active -= 1


class FakeBrowser:
    """Session factory that remembers every session it handed out."""

    def __init__(self, pages, delay=0.0, fail_start=None):
        self.pages = pages
        self.delay = delay
        self.fail_start = fail_start
        self.sessions = []
        self._lock = threading.Lock()

    def __call__(self):
        session = FakeSession(self.pages, delay=self.delay, fail_start=self.fail_start)
        with self._lock:
            self.sessions.append(session)
        return session

    @property
    def rendered(self):
        return [url for s in self.sessions for url in s.rendered]


@pytest.fixture
def fake_browser():
    def factory(pages, **kwargs):
        return FakeBrowser(pages, **kwargs)
    return factory
