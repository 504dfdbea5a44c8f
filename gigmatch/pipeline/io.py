import json
import re
from datetime import datetime, timedelta
from pathlib import Path

from gigmatch import config
from gigmatch.pipeline.r2 import download_from_r2

LOG_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
# "[2024-03-01 20:15:30] [INFO] message", as written by RunLog
LOG_LINE_RE = re.compile(r"^\[(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})\] \[[A-Z]+\] ")


class RunLog:
    """
    Log a message to both console and an in-memory buffer.
    Call save() at the end of a run to append the buffer to the log file.
    """

    def __init__(self, log_path=None):
        self.log_path = Path(log_path or config.LOG_PATH)
        self.lines = []

    def __call__(self, message, level="INFO"):
        timestamp = datetime.utcnow().strftime(LOG_TIMESTAMP_FORMAT)
        print(message)
        self.lines.append(f"[{timestamp}] [{level}] {message}")

    def save(self, retention_days=None):
        existing_log = trim_log_by_time(self.log_path, retention_days=retention_days)
        log_content = existing_log + ["\n--- New Run ---\n"] + [line + "\n" for line in self.lines]

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.log_path, "w") as f:
            f.writelines(log_content)
        return self.log_path


def trim_log_by_time(log_path, retention_days=None, now=None):
    """
    Lines of a RunLog file whose entries are newer than retention_days
    (config.LOG_RETENTION_DAYS by default).

    Lines without a RunLog prefix (run separators, tracebacks) belong to the
    entry above them and are kept or dropped with it.
    """
    log_path = Path(log_path)
    if not log_path.exists():
        return []

    if retention_days is None:
        retention_days = config.LOG_RETENTION_DAYS
    cutoff = (now or datetime.utcnow()) - timedelta(days=retention_days)

    kept_lines = []
    keep_entry = False
    with open(log_path, "r") as f:
        for line in f:
            match = LOG_LINE_RE.match(line)
            if match:
                logged_at = datetime.strptime(match.group(1), LOG_TIMESTAMP_FORMAT)
                keep_entry = logged_at >= cutoff
            if keep_entry:
                kept_lines.append(line)

    return kept_lines


def snapshot_filename(timestamp=None):
    """
    shows-<ISO timestamp>.json with ':' and '.' replaced by '-',
    e.g. shows-2024-03-01T20-15-30-123456.json
    """
    timestamp = timestamp or datetime.utcnow()
    stamp = re.sub(r"[:.]", "-", timestamp.isoformat())
    return f"{config.SNAPSHOT_PREFIX}{stamp}.json"


def save_snapshot(shows, directory=None, timestamp=None):
    """Write one scrape run's raw show list to a new timestamped file."""
    directory = Path(directory or config.SNAPSHOT_DIR)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / snapshot_filename(timestamp)
    with open(path, "w") as f:
        json.dump(shows, f, indent=2)
    return path


def latest_snapshot_path(directory=None):
    """Most recent snapshot file in directory, or None."""
    directory = Path(directory or config.SNAPSHOT_DIR)
    if not directory.exists():
        return None
    snapshots = sorted(directory.glob(f"{config.SNAPSHOT_PREFIX}*.json"))
    # ISO timestamps sort lexically; the R2 copy is not timestamped
    snapshots = [p for p in snapshots if p.name != config.R2_LATEST_KEY]
    return snapshots[-1] if snapshots else None


def load_snapshot(path):
    """Load a snapshot file. Returns [] if it is missing or unreadable."""
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        print(f"  Warning: Could not load snapshot {path}: {e}")
        return []
    return data if isinstance(data, list) else []


def get_upcoming_shows(directory=None):
    """
    Raw shows from the most recent scrape run.
    Falls back to the R2 copy when no local snapshot exists.
    """
    directory = Path(directory or config.SNAPSHOT_DIR)
    path = latest_snapshot_path(directory)
    if path is None:
        r2_path = directory / config.R2_LATEST_KEY
        if download_from_r2(config.R2_LATEST_KEY, r2_path):
            path = r2_path
    if path is None:
        return []
    return load_snapshot(path)
