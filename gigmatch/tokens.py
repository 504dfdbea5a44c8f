"""
Per-user Spotify credential storage.

TokenStore is the interface the Spotify client depends on. Use
InMemoryTokenStore in tests and short-lived processes, JsonFileTokenStore
when tokens must survive a restart.
"""

import json
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from gigmatch import config


@dataclass
class UserToken:
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: float = 0.0
    username: Optional[str] = None

    @classmethod
    def from_response(cls, data, refresh_token=None, username=None, now=None):
        """Build a token from a Spotify token endpoint response."""
        now = time.time() if now is None else now
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token") or refresh_token,
            expires_at=now + int(data.get("expires_in", 3600)),
            username=username,
        )


class TokenStore(ABC):
    """Keyed credential store with expiry checks and per-user refresh locks."""

    def __init__(self):
        self._locks = {}
        self._locks_guard = threading.Lock()

    @abstractmethod
    def get(self, user_id):
        """The stored UserToken for user_id, or None."""

    @abstractmethod
    def set(self, user_id, token):
        """Store token for user_id, replacing any previous one."""

    def is_expired(self, user_id, now=None):
        """True if the user has no token or it expires within the safety margin."""
        token = self.get(user_id)
        if token is None:
            return True
        now = time.time() if now is None else now
        return now >= token.expires_at - config.SPOTIFY_EXPIRY_MARGIN

    def refresh_lock(self, user_id):
        """Lock held while refreshing user_id's token, so only one refresh runs at a time."""
        with self._locks_guard:
            return self._locks.setdefault(user_id, threading.Lock())


class InMemoryTokenStore(TokenStore):
    def __init__(self, tokens=None):
        super().__init__()
        self._tokens = dict(tokens or {})

    def get(self, user_id):
        return self._tokens.get(user_id)

    def set(self, user_id, token):
        self._tokens[user_id] = token


class JsonFileTokenStore(TokenStore):
    """Tokens persisted to a JSON file keyed by user id."""

    def __init__(self, path=None):
        super().__init__()
        self.path = Path(path or config.TOKEN_STORE_PATH)
        self._write_lock = threading.Lock()

    def _load(self):
        try:
            if self.path.exists():
                with open(self.path, "r") as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    return data
        except (OSError, json.JSONDecodeError) as e:
            print(f"  Warning: Could not load token store: {e}")
        return {}

    def get(self, user_id):
        entry = self._load().get(user_id)
        if not entry:
            return None
        return UserToken(**entry)

    def set(self, user_id, token):
        with self._write_lock:
            data = self._load()
            data[user_id] = asdict(token)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(data, f, indent=2)
