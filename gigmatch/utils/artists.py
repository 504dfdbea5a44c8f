def normalize_artist_name(name):
    """
    Canonical form of an artist name for matching: trimmed and lowercased.
    Both user artists and show artists must go through this before comparing.
    """
    if not isinstance(name, str):
        return ""
    return name.strip().lower()


def profile_name(profile):
    """Return the name of an ArtistProfile or profile dict, or None."""
    if isinstance(profile, dict):
        name = profile.get("name")
    else:
        name = getattr(profile, "name", None)
    return name if isinstance(name, str) else None


def build_user_artist_set(*artist_lists):
    """Union of normalized names across every given profile list."""
    names = set()
    for artists in artist_lists:
        for profile in artists or []:
            name = profile_name(profile)
            if name is None:
                continue
            normalized = normalize_artist_name(name)
            if normalized:
                names.add(normalized)
    return names
