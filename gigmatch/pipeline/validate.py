from collections.abc import Mapping

from gigmatch import config
from gigmatch.errors import ValidationError
from gigmatch.models import ShowRecord

# Older scraper revisions wrapped the record under "name" once or twice.
MAX_WRAPPING_DEPTH = 2


def _find_record_body(raw):
    """
    Walk the known shapes (flat, {name: ...}, {name: {name: ...}}) and return
    the first mapping that carries an "artists" key.
    """
    node = raw
    for _ in range(MAX_WRAPPING_DEPTH + 1):
        if not isinstance(node, Mapping):
            return None
        if "artists" in node:
            return node
        node = node.get("name")
    return None


def _text_field(body, key):
    value = body.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return config.UNKNOWN


def parse_show(raw):
    """
    Convert a raw show record of any historical shape into a ShowRecord.
    Raises ValidationError if the record can't be used for matching.
    """
    if not isinstance(raw, Mapping):
        raise ValidationError(f"show is not an object: {raw!r}")

    body = _find_record_body(raw)
    if body is None:
        raise ValidationError("show has no artists list")

    artists = body["artists"]
    if not isinstance(artists, list):
        raise ValidationError(f"artists is not a list: {artists!r}")
    if not artists:
        raise ValidationError("artists list is empty")

    names = []
    for artist in artists:
        if not isinstance(artist, str) or not artist.strip():
            raise ValidationError(f"invalid artist entry: {artist!r}")
        names.append(artist.strip())

    return ShowRecord(
        artists=names,
        date=_text_field(body, "date"),
        time=_text_field(body, "time"),
        venue=_text_field(body, "venue"),
    )


def validate_show(raw, log_func=None):
    """Return the canonical ShowRecord for raw, or None if it is invalid."""
    try:
        return parse_show(raw)
    except ValidationError as e:
        if log_func:
            log_func(f"  Skipping invalid show: {e}")
        return None


def show_to_dict(show):
    """Flat dict form of a ShowRecord, as written to snapshots."""
    return {
        "artists": list(show.artists),
        "date": show.date,
        "time": show.time,
        "venue": show.venue,
    }
