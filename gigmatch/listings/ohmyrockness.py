import time

from bs4 import BeautifulSoup
from playwright.sync_api import Error as PlaywrightError

from gigmatch import config
from gigmatch.errors import ResourceError, ValidationError
from gigmatch.listings.browser import browser_page, load_page_html
from gigmatch.pipeline.metrics import PageMetrics, ScrapeResult
from gigmatch.utils.dates import format_display_date, format_display_time, parse_listing_datetime


def listing_url(page_num):
    return config.LISTINGS_URL.format(page_num)


def is_listed_artist_link(link):
    """
    Artist links we count: those marked "non-profiled" and those with no class.
    The site renders profiled artists with other classes.
    """
    classes = [c for c in link.get("class") or [] if c.strip()]
    return "non-profiled" in classes or not classes


def parse_listing_row(row, tz_name=None):
    """
    Extract one show from a .row.vevent element.
    Raises ValidationError when the row has no venue.
    """
    artists = []
    for link in row.select(".bands.summary a"):
        if not is_listed_artist_link(link):
            continue
        name = link.get_text(strip=True)
        if name:
            artists.append(name)

    date = time_str = config.UNKNOWN
    value_title = row.select_one(".value-title")
    dt = parse_listing_datetime(value_title.get("title") if value_title else None, tz_name=tz_name)
    if dt:
        date = format_display_date(dt)
        time_str = format_display_time(dt)

    venue_el = row.select_one(".fn.org")
    if venue_el is None:
        raise ValidationError(f"row has no venue (artists: {', '.join(artists) or 'none'})")

    return {
        "artists": artists,
        "date": date,
        "time": time_str,
        "venue": venue_el.get_text(strip=True),
    }


def parse_listing_page(html, log_func=None, tz_name=None):
    """
    Parse every show row on one listings page.
    Returns (shows, skipped_row_count).
    """
    log = log_func or print
    soup = BeautifulSoup(html, "html.parser")
    shows = []
    skipped = 0

    for row in soup.select(".row.vevent"):
        try:
            shows.append(parse_listing_row(row, tz_name=tz_name))
        except ValidationError as e:
            skipped += 1
            log(f"    Skipping row: {e}")

    return shows, skipped


def scrape_listings(pages=None, cancel_event=None, log_func=None, timeout_ms=None, tz_name=None):
    """
    Scrape the "just announced" listings pages in order with one headless browser page.

    A page that fails to load or times out is logged and skipped. If every
    page fails, ResourceError is raised once the browser has been closed.
    cancel_event (threading.Event) is checked before each page; when set,
    the run stops early and returns what it collected so far.
    """
    log = log_func or print
    if pages is None:
        pages = range(1, config.LISTINGS_PAGE_COUNT + 1)
    pages = list(pages)
    timeout_ms = config.LISTINGS_PAGE_TIMEOUT_MS if timeout_ms is None else timeout_ms

    result = ScrapeResult()
    if not pages:
        return result

    with browser_page() as page:
        for page_num in pages:
            if cancel_event is not None and cancel_event.is_set():
                log("  Scrape cancelled, closing browser")
                result.cancelled = True
                break

            url = listing_url(page_num)
            metrics = PageMetrics(page=page_num, url=url)
            start_time = time.time()
            log(f"  Scraping page {page_num}...")

            try:
                html = load_page_html(page, url, timeout_ms)
            except PlaywrightError as e:
                metrics.errors = 1
                metrics.error_messages.append(str(e))
                log(f"    Page {page_num}: ERROR - {e}")
            else:
                shows, skipped = parse_listing_page(html, log_func=log, tz_name=tz_name)
                metrics.show_count = len(shows)
                metrics.skipped_rows = skipped
                result.shows.extend(shows)
                log(f"    Page {page_num}: {len(shows)} shows")

            metrics.duration_ms = (time.time() - start_time) * 1000
            result.pages.append(metrics)

    if result.pages and not result.cancelled and not any(m.success for m in result.pages):
        raise ResourceError(f"All {len(result.pages)} listings pages failed to load")

    log(f"  Total shows found: {len(result.shows)}")
    return result


def fetch_upcoming_shows(pages=None, cancel_event=None, log_func=None, timeout_ms=None):
    """Scrape the listings and return just the raw show dicts, in page order."""
    return scrape_listings(
        pages=pages,
        cancel_event=cancel_event,
        log_func=log_func,
        timeout_ms=timeout_ms,
    ).shows
