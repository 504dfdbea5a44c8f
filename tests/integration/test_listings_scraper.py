import threading
from pathlib import Path

import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from gigmatch.errors import ResourceError
from gigmatch.listings.ohmyrockness import fetch_upcoming_shows, listing_url, scrape_listings

PAGE_HTML = Path("tests/fixtures/omr_page.html").read_text()
EMPTY_HTML = Path("tests/fixtures/omr_empty.html").read_text()


class FakePage:
    def __init__(self, pages, on_goto=None):
        self.pages = pages
        self.on_goto = on_goto
        self.visited = []
        self._html = ""

    def goto(self, url, wait_until=None, timeout=None):
        self.visited.append((url, timeout))
        if self.on_goto:
            self.on_goto(url)
        result = self.pages[url]
        if isinstance(result, Exception):
            raise result
        self._html = result

    def content(self):
        return self._html


class FakeContext:
    def __init__(self, page):
        self.page = page

    def new_page(self):
        return self.page


class FakeBrowser:
    def __init__(self, page):
        self.page = page
        self.closed = False

    def new_context(self, **kwargs):
        return FakeContext(self.page)

    def close(self):
        self.closed = True


class FakeChromium:
    def __init__(self, browser, launch_error=None):
        self.browser = browser
        self.launch_error = launch_error

    def launch(self, **kwargs):
        if self.launch_error:
            raise self.launch_error
        return self.browser


class FakePlaywright:
    def __init__(self, chromium):
        self.chromium = chromium

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.fixture
def fake_browser(monkeypatch):
    def install(pages, on_goto=None, launch_error=None):
        page = FakePage(pages, on_goto=on_goto)
        browser = FakeBrowser(page)
        playwright = FakePlaywright(FakeChromium(browser, launch_error=launch_error))
        monkeypatch.setattr("gigmatch.listings.browser.sync_playwright", lambda: playwright)
        return browser

    return install


def test_scrape_listings_collects_pages_in_order(fake_browser, monkeypatch):
    monkeypatch.setattr("gigmatch.config.LISTINGS_TIMEZONE", "America/New_York")
    browser = fake_browser({
        listing_url(1): PAGE_HTML,
        listing_url(2): EMPTY_HTML,
    })

    result = scrape_listings(pages=[1, 2], log_func=lambda *_: None, timeout_ms=5000)

    assert [url for url, _ in browser.page.visited] == [listing_url(1), listing_url(2)]
    assert all(timeout == 5000 for _, timeout in browser.page.visited)
    assert len(result.shows) == 4
    assert result.shows[0]["artists"] == ["Radiohead", "Sleater-Kinney"]
    assert [m.show_count for m in result.pages] == [4, 0]
    assert result.pages[0].skipped_rows == 1
    assert result.failed_pages == []
    assert result.cancelled is False
    assert browser.closed is True


def test_scrape_listings_skips_failed_page(fake_browser):
    browser = fake_browser({
        listing_url(1): PlaywrightTimeoutError("Timeout 30000ms exceeded."),
        listing_url(2): PAGE_HTML,
    })
    messages = []

    result = scrape_listings(pages=[1, 2], log_func=messages.append)

    assert result.failed_pages == [1]
    assert result.pages[0].error_messages == ["Timeout 30000ms exceeded."]
    assert len(result.shows) == 4
    assert any("Page 1: ERROR" in m for m in messages)
    assert browser.closed is True


def test_scrape_listings_all_pages_failed(fake_browser):
    browser = fake_browser({
        listing_url(1): PlaywrightError("net::ERR_NAME_NOT_RESOLVED"),
        listing_url(2): PlaywrightTimeoutError("Timeout 30000ms exceeded."),
    })

    with pytest.raises(ResourceError):
        scrape_listings(pages=[1, 2], log_func=lambda *_: None)

    assert browser.closed is True


def test_scrape_listings_launch_failure(fake_browser):
    fake_browser({}, launch_error=PlaywrightError("Executable doesn't exist"))

    with pytest.raises(ResourceError, match="Browser launch failed"):
        scrape_listings(pages=[1], log_func=lambda *_: None)


def test_scrape_listings_closes_browser_on_unexpected_error(fake_browser):
    browser = fake_browser({listing_url(1): RuntimeError("boom")})

    with pytest.raises(RuntimeError):
        scrape_listings(pages=[1], log_func=lambda *_: None)

    assert browser.closed is True


def test_scrape_listings_cancel_between_pages(fake_browser):
    cancel = threading.Event()
    browser = fake_browser(
        {listing_url(1): PAGE_HTML, listing_url(2): PAGE_HTML},
        on_goto=lambda url: cancel.set(),
    )

    result = scrape_listings(pages=[1, 2], cancel_event=cancel, log_func=lambda *_: None)

    assert [url for url, _ in browser.page.visited] == [listing_url(1)]
    assert result.cancelled is True
    assert len(result.shows) == 4
    assert browser.closed is True


def test_scrape_listings_no_pages_does_not_launch(fake_browser):
    fake_browser({}, launch_error=PlaywrightError("should not launch"))
    result = scrape_listings(pages=[], log_func=lambda *_: None)
    assert result.shows == []
    assert result.pages == []


def test_fetch_upcoming_shows_returns_show_dicts(fake_browser):
    fake_browser({listing_url(1): PAGE_HTML})
    shows = fetch_upcoming_shows(pages=[1], log_func=lambda *_: None)
    assert [s["venue"] for s in shows] == [
        "Bowery Ballroom",
        "Webster Hall",
        "Baby's All Right",
        "Forest Hills Stadium",
    ]
