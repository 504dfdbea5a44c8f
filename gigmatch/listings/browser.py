"""Headless browser session for the JavaScript-rendered listings pages."""

from contextlib import contextmanager

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from gigmatch import config
from gigmatch.errors import ResourceError


@contextmanager
def browser_page(headers=None):
    """
    Launch headless Chromium and yield one page.
    The browser is closed on every exit path, including errors raised by
    the caller while the page is in use.
    """
    with sync_playwright() as p:
        try:
            browser = p.chromium.launch(headless=True, args=config.LISTINGS_BROWSER_ARGS)
        except PlaywrightError as e:
            raise ResourceError(f"Browser launch failed: {e}") from e

        try:
            context = browser.new_context(
                ignore_https_errors=True,
                extra_http_headers=headers or config.LISTINGS_HEADERS,
            )
            yield context.new_page()
        finally:
            browser.close()


def load_page_html(page, url, timeout_ms):
    """Navigate to url and return the rendered HTML. Raises PlaywrightError on failure or timeout."""
    page.goto(url, wait_until="networkidle", timeout=timeout_ms)
    return page.content()
