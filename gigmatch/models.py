from dataclasses import asdict, dataclass, field
from typing import List, Optional

from gigmatch import config


@dataclass(frozen=True)
class ArtistProfile:
    """An artist as returned by Spotify, trimmed to the fields we display."""
    name: str
    image: Optional[str] = None
    genres: tuple = ()
    url: Optional[str] = None

    @property
    def dedupe_key(self):
        return (self.name, self.image, tuple(self.genres), self.url)

    def to_dict(self):
        data = asdict(self)
        data["genres"] = list(self.genres)
        return data


@dataclass
class ShowRecord:
    """Canonical show record, whatever shape the raw listing arrived in."""
    artists: List[str] = field(default_factory=list)
    date: str = config.UNKNOWN
    time: str = config.UNKNOWN
    venue: str = config.UNKNOWN
