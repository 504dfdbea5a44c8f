#!/usr/bin/env python3
"""
Scrape just-announced shows from ohmyrockness.com and save them as a
timestamped JSON snapshot (uploaded to R2 when configured).
"""

import argparse
import signal
import sys
import threading
import traceback
from datetime import datetime

from gigmatch import config
from gigmatch.errors import ResourceError
from gigmatch.listings.ohmyrockness import scrape_listings
from gigmatch.pipeline.io import RunLog, save_snapshot
from gigmatch.pipeline.r2 import upload_snapshot_to_r2
from gigmatch.pipeline.validate import validate_show


def log_page_summary(log, pages):
    log("")
    log("=" * 60)
    log("PAGE SUMMARY")
    log("=" * 60)
    log(f"{'Page':<8} {'Shows':>7} {'Skipped':>8} {'Errors':>7} {'Time':>10}")
    log("-" * 60)
    for m in pages:
        time_str = f"{m.duration_ms:.0f}ms"
        log(f"{m.page:<8} {m.show_count:>7} {m.skipped_rows:>8} {m.errors:>7} {time_str:>10}")
    log("-" * 60)
    total_shows = sum(m.show_count for m in pages)
    total_skipped = sum(m.skipped_rows for m in pages)
    total_errors = sum(m.errors for m in pages)
    total_time = sum(m.duration_ms for m in pages)
    log(f"{'TOTAL':<8} {total_shows:>7} {total_skipped:>8} {total_errors:>7} {total_time:.0f}ms")
    log("=" * 60)


def run_scrape(pages=None, snapshot_dir=None, upload=True, cancel_event=None, log=None):
    """
    One scrape run: listings → snapshot → optional R2 upload.
    Returns the snapshot path, or None if the run failed.
    """
    log = log or RunLog()
    run_timestamp = datetime.utcnow()
    log(f"Starting scrape run at {run_timestamp.isoformat()}Z")

    try:
        result = scrape_listings(pages=pages, cancel_event=cancel_event, log_func=log)
    except ResourceError as e:
        log(f"  ERROR: Scrape run failed: {e}", "ERROR")
        log(f"  Traceback:\n{traceback.format_exc()}", "ERROR")
        return None

    log_page_summary(log, result.pages)

    if result.failed_pages:
        log(f"WARNING: Failed to load pages: {', '.join(str(p) for p in result.failed_pages)}", "ERROR")

    invalid_count = sum(1 for show in result.shows if validate_show(show) is None)
    if invalid_count > 0:
        log(f"  {invalid_count} shows will be ignored by matching (invalid records)", "WARNING")

    if result.cancelled:
        log("Scrape was cancelled; saving partial results", "WARNING")

    snapshot_path = save_snapshot(result.shows, directory=snapshot_dir, timestamp=run_timestamp)
    log(f"Shows saved to {snapshot_path}")

    if upload:
        upload_snapshot_to_r2(snapshot_path, log_func=log)

    return snapshot_path


def main(argv=None):
    parser = argparse.ArgumentParser(description="Scrape upcoming shows into a JSON snapshot")
    parser.add_argument("--pages", type=int, default=config.LISTINGS_PAGE_COUNT, help="Number of listing pages to scrape")
    parser.add_argument("--out", default=str(config.SNAPSHOT_DIR), help="Snapshot directory")
    parser.add_argument("--no-upload", action="store_true", help="Skip the R2 upload")
    args = parser.parse_args(argv)

    log = RunLog()
    cancel_event = threading.Event()
    # SIGTERM stops the run at the next page boundary and still closes the browser
    signal.signal(signal.SIGTERM, lambda *_: cancel_event.set())

    try:
        snapshot_path = run_scrape(
            pages=range(1, args.pages + 1),
            snapshot_dir=args.out,
            upload=not args.no_upload,
            cancel_event=cancel_event,
            log=log,
        )
    except KeyboardInterrupt:
        log("Interrupted", "ERROR")
        snapshot_path = None
    finally:
        log(f"Log saved to {log.log_path}")
        log.save()

    return 0 if snapshot_path else 1


if __name__ == "__main__":
    sys.exit(main())
