#!/usr/bin/env python3
"""
Find upcoming shows for a Spotify user's top and liked artists, using the
latest listings snapshot written by scrape.py.
"""

import argparse
import json
import sys
from pathlib import Path

from gigmatch import config
from gigmatch.errors import AuthError, UpstreamError
from gigmatch.pipeline.io import get_upcoming_shows
from gigmatch.pipeline.match import find_matches
from gigmatch.pipeline.validate import show_to_dict
from gigmatch.spotify import get_liked_artists, get_top_artists, search_artist_top_track
from gigmatch.tokens import JsonFileTokenStore
from gigmatch.utils.shows import format_match_lines


def find_user_shows(user_id, store, snapshot_dir=None, log_func=None):
    """Fetch the user's artists and the latest shows, and match them."""
    log = log_func or print
    top_artists = get_top_artists(user_id, store)
    log(f"  Top artists: {len(top_artists)}")
    liked_artists = get_liked_artists(user_id, store, log_func=log)
    shows = get_upcoming_shows(snapshot_dir)
    log(f"  Upcoming shows: {len(shows)}")
    return find_matches(top_artists, shows, liked_artists, log_func=log)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Match upcoming shows against a Spotify user's artists")
    parser.add_argument("--user", required=True, help="User id in the token store")
    parser.add_argument("--tokens", default=str(config.TOKEN_STORE_PATH), help="Path to the token store JSON")
    parser.add_argument("--snapshots", default=str(config.SNAPSHOT_DIR), help="Snapshot directory")
    parser.add_argument("--json", action="store_true", help="Print matches as JSON")
    parser.add_argument("--search", metavar="ARTIST", help="Look up an artist's top track instead of matching")
    args = parser.parse_args(argv)

    store = JsonFileTokenStore(Path(args.tokens))
    # Progress goes to stderr so --json output stays parseable
    log = lambda message: print(message, file=sys.stderr)

    try:
        if args.search:
            print(json.dumps(search_artist_top_track(args.user, args.search, store), indent=2))
            return 0
        matches = find_user_shows(args.user, store, snapshot_dir=args.snapshots, log_func=log)
    except AuthError as e:
        log(f"ERROR: {e}. Log in to Spotify again.")
        return 2
    except UpstreamError as e:
        log(f"ERROR: {e}")
        log(f"  Detail: {e.detail}")
        return 1

    if args.json:
        print(json.dumps([show_to_dict(show) for show in matches], indent=2))
    else:
        print("\n".join(format_match_lines(matches)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
