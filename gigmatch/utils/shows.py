NO_SHOWS_MESSAGE = "No upcoming shows found"


def format_show_lines(show):
    """Three display lines for a show: artists, date and time, venue."""
    return [
        ", ".join(show.artists),
        f"{show.date} at {show.time}",
        show.venue,
    ]


def format_match_lines(matches):
    """Plain-text rendering of a match result, one blank line between shows."""
    if not matches:
        return [NO_SHOWS_MESSAGE]

    lines = []
    for i, show in enumerate(matches):
        if i:
            lines.append("")
        artists, when, venue = format_show_lines(show)
        lines.append(artists)
        lines.append(f"  {when}")
        lines.append(f"  {venue}")
    return lines
