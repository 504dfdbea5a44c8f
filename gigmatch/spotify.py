"""
Spotify Web API client for the user's listening data.

Every authorized call goes through spotify_get(), which refreshes an expired
token first and, on a 401, refreshes and retries at most once.
"""

import time

import requests

from gigmatch import config
from gigmatch.errors import AuthError, UpstreamError
from gigmatch.models import ArtistProfile
from gigmatch.tokens import UserToken


def _json_body(resp, message):
    """Decoded JSON body, or UpstreamError(message) when it isn't JSON."""
    try:
        return resp.json()
    except ValueError as e:
        print(f"  Warning: Spotify returned a non-JSON body from {resp.url}: {resp.text[:200]}")
        raise UpstreamError(message, detail=str(e)) from e


def _retry_after_seconds(resp):
    """
    Seconds to wait after a 429. Retry-After in its HTTP-date form (or
    anything else non-numeric) falls back to 1 second.
    """
    try:
        seconds = int(resp.headers.get("Retry-After", "1"))
    except ValueError:
        seconds = 1
    return min(max(seconds, 0), config.SPOTIFY_MAX_RETRY_AFTER)


def refresh_access_token(refresh_token):
    """Exchange a refresh token for a new access token. Returns the token response dict."""
    if not refresh_token:
        raise AuthError("No refresh token available")
    if not config.SPOTIFY_CLIENT_ID or not config.SPOTIFY_CLIENT_SECRET:
        raise AuthError("Missing SPOTIFY_CLIENT_ID/SECRET")

    try:
        resp = requests.post(
            config.SPOTIFY_TOKEN_URL,
            data={"grant_type": "refresh_token", "refresh_token": refresh_token},
            auth=(config.SPOTIFY_CLIENT_ID, config.SPOTIFY_CLIENT_SECRET),
            timeout=config.SPOTIFY_TIMEOUT,
        )
    except requests.RequestException as e:
        print(f"  Warning: Spotify token refresh failed: {e}")
        raise UpstreamError("Failed to refresh token", detail=str(e)) from e

    if resp.status_code in (400, 401):
        # invalid_grant: the refresh token was revoked or has expired
        raise AuthError("Refresh token rejected")
    if not resp.ok:
        print(f"  Warning: Spotify token refresh failed: {resp.status_code} {resp.text[:200]}")
        raise UpstreamError("Failed to refresh token", detail=resp.text)

    data = _json_body(resp, "Failed to refresh token")
    if not isinstance(data, dict) or not data.get("access_token"):
        raise UpstreamError("Failed to refresh token", detail="response had no access_token")
    return data


def _refresh_user_token(user_id, store, stale_token):
    """
    Refresh user_id's token under the store's per-user lock.
    If another caller already replaced stale_token, reuse theirs.
    """
    with store.refresh_lock(user_id):
        current = store.get(user_id)
        if current is not None and current.access_token != stale_token.access_token:
            return current

        data = refresh_access_token(stale_token.refresh_token)
        token = UserToken.from_response(
            data,
            refresh_token=stale_token.refresh_token,
            username=stale_token.username,
        )
        store.set(user_id, token)
        return token


def _current_token(user_id, store):
    if not user_id:
        raise AuthError("User not authenticated")
    token = store.get(user_id)
    if token is None or not token.access_token:
        raise AuthError("User not authenticated")
    if store.is_expired(user_id):
        token = _refresh_user_token(user_id, store, token)
    return token


def spotify_get(url, user_id, store, params=None):
    """
    GET a Spotify API URL on behalf of user_id and return the JSON body.
    Raises AuthError if the user can't be authenticated, UpstreamError on
    any other failure.
    """
    token = _current_token(user_id, store)
    refreshed = False
    rate_limited = 0

    while True:
        headers = {"Authorization": f"Bearer {token.access_token}"}
        try:
            resp = requests.get(url, headers=headers, params=params, timeout=config.SPOTIFY_TIMEOUT)
        except requests.RequestException as e:
            print(f"  Warning: Spotify request to {url} failed: {e}")
            raise UpstreamError("Failed to reach Spotify", detail=str(e)) from e

        if resp.status_code == 401:
            if refreshed:
                raise AuthError("Spotify rejected the refreshed token")
            token = _refresh_user_token(user_id, store, token)
            refreshed = True
            continue

        if resp.status_code == 429 and rate_limited < config.SPOTIFY_RATE_LIMIT_RETRIES:
            rate_limited += 1
            time.sleep(_retry_after_seconds(resp))
            continue

        if not resp.ok:
            print(f"  Warning: Spotify request to {url} failed: {resp.status_code} {resp.text[:200]}")
            raise UpstreamError("Spotify request failed", detail=resp.text)

        return _json_body(resp, "Spotify request failed")


def artist_profile_from_api(artist):
    """Map a Spotify artist object (full or simplified) to an ArtistProfile."""
    images = artist.get("images") or []
    return ArtistProfile(
        name=artist.get("name", ""),
        image=images[0].get("url") if images else None,
        genres=tuple(artist.get("genres") or ()),
        url=(artist.get("external_urls") or {}).get("spotify"),
    )


def get_top_artists(user_id, store):
    """The user's top artists (up to 50)."""
    data = spotify_get(
        f"{config.SPOTIFY_API_BASE}/me/top/artists",
        user_id,
        store,
        params={"limit": config.SPOTIFY_TOP_ARTISTS_LIMIT},
    )
    return [artist_profile_from_api(a) for a in data.get("items", [])]


def get_liked_artists(user_id, store, log_func=None):
    """
    Artists of every track in the user's saved tracks, deduplicated on
    (name, image, genres, url) in first-seen order.
    """
    log = log_func or print
    url = f"{config.SPOTIFY_API_BASE}/me/tracks"
    params = {"limit": config.SPOTIFY_SAVED_TRACKS_LIMIT, "offset": 0}

    seen = set()
    artists = []
    pages = 0
    while url:
        data = spotify_get(url, user_id, store, params=params)
        pages += 1
        for item in data.get("items", []):
            track = item.get("track") or {}
            for artist in track.get("artists") or []:
                profile = artist_profile_from_api(artist)
                if profile.dedupe_key in seen:
                    continue
                seen.add(profile.dedupe_key)
                artists.append(profile)
        # "next" already carries limit/offset
        url = data.get("next")
        params = None

    log(f"  Liked artists: {len(artists)} from {pages} page(s) of saved tracks")
    return artists


def search_artist_top_track(user_id, artist_name, store):
    """
    Look up an artist's most popular track.
    Returns {"song_name", "artist_name", "album_cover"}.
    """
    if not artist_name:
        raise ValueError("Artist name is required")

    data = spotify_get(
        f"{config.SPOTIFY_API_BASE}/search",
        user_id,
        store,
        params={"q": artist_name, "type": "artist", "limit": 1},
    )
    items = data.get("artists", {}).get("items", [])
    if not items:
        raise UpstreamError("Artist not found", detail=f"no search results for {artist_name!r}")

    artist_id = items[0]["id"]
    data = spotify_get(
        f"{config.SPOTIFY_API_BASE}/artists/{artist_id}/top-tracks",
        user_id,
        store,
        params={"market": config.SPOTIFY_MARKET},
    )
    tracks = data.get("tracks", [])
    if not tracks:
        raise UpstreamError("No tracks found for this artist", detail=f"artist {artist_id} has no top tracks")

    top_track = tracks[0]
    images = top_track.get("album", {}).get("images") or []
    return {
        "song_name": top_track.get("name"),
        "artist_name": (top_track.get("artists") or [{}])[0].get("name"),
        "album_cover": images[0].get("url") if images else None,
    }
