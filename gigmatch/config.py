import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

REPO_ROOT = Path(__file__).resolve().parents[1]
DATA_DIR = Path(os.environ.get("GIGMATCH_DATA_DIR", REPO_ROOT / "data"))
SNAPSHOT_DIR = DATA_DIR / "snapshots"
SNAPSHOT_PREFIX = "shows-"
LOG_PATH = DATA_DIR / "scrape-log.txt"
TOKEN_STORE_PATH = DATA_DIR / "tokens.json"

LOG_RETENTION_DAYS = 14

R2_ACCOUNT_ID = os.environ.get("R2_ACCOUNT_ID")
R2_ACCESS_KEY_ID = os.environ.get("R2_ACCESS_KEY_ID")
R2_SECRET_ACCESS_KEY = os.environ.get("R2_SECRET_ACCESS_KEY")
R2_BUCKET_NAME = os.environ.get("R2_BUCKET_NAME", "gig-match-data")
R2_LATEST_KEY = "shows-latest.json"

SPOTIFY_CLIENT_ID = os.environ.get("SPOTIFY_CLIENT_ID")
SPOTIFY_CLIENT_SECRET = os.environ.get("SPOTIFY_CLIENT_SECRET")
SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"
SPOTIFY_API_BASE = "https://api.spotify.com/v1"
SPOTIFY_TOP_ARTISTS_LIMIT = 50
SPOTIFY_SAVED_TRACKS_LIMIT = 50
SPOTIFY_MARKET = "US"
SPOTIFY_TIMEOUT = 10
SPOTIFY_RATE_LIMIT_RETRIES = 3
# Longest Retry-After we honour, in seconds
SPOTIFY_MAX_RETRY_AFTER = 30
# Tokens within this many seconds of expiry are treated as expired
SPOTIFY_EXPIRY_MARGIN = 60

LISTINGS_URL = "https://www.ohmyrockness.com/shows/just-announced?page={}"
LISTINGS_PAGE_COUNT = int(os.environ.get("LISTINGS_PAGE_COUNT", "5"))
LISTINGS_PAGE_TIMEOUT_MS = int(os.environ.get("LISTINGS_PAGE_TIMEOUT_MS", "30000"))
LISTINGS_TIMEZONE = os.environ.get("LISTINGS_TIMEZONE", "America/New_York")
LISTINGS_BROWSER_ARGS = [
    "--ignore-certificate-errors",
    "--disable-setuid-sandbox",
]
LISTINGS_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Accept-Language": "en-US,en;q=0.9",
}

UNKNOWN = "Unknown"
