import copy

from gigmatch.models import ArtistProfile, ShowRecord
from gigmatch.pipeline.match import find_matches, sort_shows_by_date


def show(artists, date="2024-01-01", venue="V", time="08:00 PM"):
    return {"artists": artists, "date": date, "time": time, "venue": venue}


def test_find_matches_empty_inputs():
    assert find_matches([], [], []) == []


def test_find_matches_is_case_and_whitespace_insensitive():
    top = [ArtistProfile(name=" Radiohead ")]
    matches = find_matches(top, [show(["radiohead"])], [])
    assert [m.artists for m in matches] == [["radiohead"]]

    # Same the other way round: messy show artist, clean profile
    matches = find_matches([{"name": "radiohead"}], [show(["  RADIOHEAD"])], [])
    assert [m.artists for m in matches] == [["RADIOHEAD"]]


def test_find_matches_uses_liked_artists_too():
    liked = [ArtistProfile(name="Big Thief")]
    shows = [show(["Big Thief", "Opener"]), show(["Somebody Else"])]
    matches = find_matches([], shows, liked)
    assert [m.artists for m in matches] == [["Big Thief", "Opener"]]


def test_find_matches_no_match():
    top = [{"name": "A"}]
    liked = [{"name": "B"}]
    shows = [{"artists": ["C"], "date": "2024-01-01", "venue": "V"}]
    assert find_matches(top, shows, liked) == []


def test_find_matches_skips_invalid_records():
    top = [{"name": "Radiohead"}]
    shows = [None, {}, {"artists": "not-an-array"}, show(["Radiohead"], venue="Good Venue")]
    matches = find_matches(top, shows, [])
    assert matches == [ShowRecord(artists=["Radiohead"], date="2024-01-01", time="08:00 PM", venue="Good Venue")]


def test_find_matches_sorts_by_date():
    top = [{"name": "X"}]
    shows = [
        show(["X"], date="2024-03-01", venue="March"),
        show(["X"], date="2024-01-15", venue="January"),
        show(["X"], date="2024-02-10", venue="February"),
    ]
    matches = find_matches(top, shows, [])
    assert [m.date for m in matches] == ["2024-01-15", "2024-02-10", "2024-03-01"]


def test_find_matches_sorts_mixed_date_formats():
    top = [{"name": "X"}]
    shows = [
        show(["X"], date="3/1/2024"),
        show(["X"], date="2024-01-15"),
    ]
    matches = find_matches(top, shows, [])
    assert [m.date for m in matches] == ["2024-01-15", "3/1/2024"]


def test_find_matches_same_date_keeps_input_order():
    top = [{"name": "X"}]
    shows = [show(["X"], venue=v) for v in ["first", "second", "third"]]
    matches = find_matches(top, shows, [])
    assert [m.venue for m in matches] == ["first", "second", "third"]


def test_unknown_dates_do_not_raise_and_keep_their_place():
    shows = [
        ShowRecord(artists=["X"], date="Unknown", venue="unknown"),
        ShowRecord(artists=["X"], date="2024-01-01", venue="dated"),
    ]
    assert [s.venue for s in sort_shows_by_date(shows)] == ["unknown", "dated"]


def test_find_matches_is_idempotent_and_pure():
    top = [{"name": "X"}, {"name": "Y"}]
    liked = [{"name": "z"}]
    shows = [
        show(["Y"], date="2024-05-01"),
        show(["nobody"]),
        show(["Z"], date="Unknown"),
        {"name": {"name": show(["x"], date="2024-02-01")}},
        None,
    ]
    shows_before = copy.deepcopy(shows)

    first = find_matches(top, shows, liked)
    second = find_matches(top, shows, liked)

    assert first == second
    assert shows == shows_before
    assert len(first) == 3


def test_find_matches_same_record_at_every_wrapping_depth():
    top = [{"name": "Radiohead"}]
    flat = show(["Radiohead"], date="2024-03-01", venue="Bowery Ballroom")
    results = [
        find_matches(top, [raw], [])
        for raw in (flat, {"name": flat}, {"name": {"name": flat}})
    ]
    assert results[0] == results[1] == results[2]
    assert len(results[0]) == 1


def test_find_matches_reports_summary():
    messages = []
    find_matches([{"name": "X"}], [show(["X"]), None], [], log_func=messages.append)
    assert any("Matched 1 of 1 shows" in m for m in messages)
