from functools import cmp_to_key

from gigmatch.pipeline.validate import validate_show
from gigmatch.utils.artists import build_user_artist_set, normalize_artist_name
from gigmatch.utils.dates import parse_show_date


def _compare_show_dates(a, b):
    """
    Order two (date, show) pairs by date. An unparseable date on either side
    compares equal, so it keeps its position relative to its neighbours.
    """
    date_a, date_b = a[0], b[0]
    if date_a is None or date_b is None:
        return 0
    if date_a < date_b:
        return -1
    if date_a > date_b:
        return 1
    return 0


def show_matches(show, user_artists):
    """True if any artist on the show is in the user's normalized artist set."""
    return any(normalize_artist_name(artist) in user_artists for artist in show.artists)


def sort_shows_by_date(shows):
    """Stable ascending sort on the parsed show date."""
    keyed = [(parse_show_date(show.date), show) for show in shows]
    keyed.sort(key=cmp_to_key(_compare_show_dates))
    return [show for _, show in keyed]


def find_matches(top_artists, shows, liked_artists, log_func=None):
    """
    Find upcoming shows featuring any of the user's top or liked artists.

    top_artists / liked_artists: ArtistProfile objects or dicts with a "name".
    shows: raw show records in any historical shape; invalid ones are dropped.
    Returns matching ShowRecords sorted by date. Never raises on bad records.
    """
    shows = list(shows or [])
    user_artists = build_user_artist_set(top_artists, liked_artists)

    valid_shows = []
    for raw in shows:
        show = validate_show(raw, log_func=log_func)
        if show is not None:
            valid_shows.append(show)

    matching = [show for show in valid_shows if show_matches(show, user_artists)]

    if log_func:
        invalid_count = len(shows) - len(valid_shows)
        log_func(
            f"  Matched {len(matching)} of {len(valid_shows)} shows "
            f"against {len(user_artists)} artists ({invalid_count} invalid)"
        )

    return sort_shows_by_date(matching)
