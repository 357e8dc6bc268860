"""Cache-and-log store for weather data.

Keeps a time-limited cache of raw upstream responses in a JSON snapshot,
appends events to a daily log file and records every weather request in a
usage ledger. Every operation degrades to a cache miss or a skipped line
instead of raising, so an unreadable file never stops the terminal.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path

import structlog
from prometheus_client import Counter

from weather_terminal.config import Settings
from weather_terminal.logging import Severity
from weather_terminal.schemas import CacheEntry, CacheSnapshot, UsageSummary

logger = structlog.get_logger()

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_HEADER = "=== Weather Terminal Log {date:%Y-%m-%d} ==="
USAGE_HEADER = "API Key Usage Statistics"
USAGE_SEPARATOR = " - Request for: "

# Metrics
cache_hits = Counter("weather_cache_hits_total", "Total cache hits")
cache_misses = Counter("weather_cache_misses_total", "Total cache misses")


class WeatherStore:
    """File-backed cache, daily event log and usage ledger."""

    def __init__(
        self,
        settings: Settings,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize store paths and make sure the log files exist."""
        self._cache_file = settings.resolve(settings.cache_file)
        self._usage_file = settings.resolve(settings.usage_file)
        self._log_dir = settings.resolve(settings.log_dir)
        self._ttl = timedelta(seconds=settings.cache_ttl_seconds)
        self._clock = clock
        self.initialize()

    @property
    def cache_file(self) -> Path:
        return self._cache_file

    @property
    def usage_file(self) -> Path:
        return self._usage_file

    def log_file_path(self, day: datetime | None = None) -> Path:
        """Return the log file path for a given day (today by default)."""
        day = day or self._clock()
        return self._log_dir / f"weather_{day:%Y%m%d}.log"

    def initialize(self) -> None:
        """Create the log directory, today's log and the usage ledger.

        Existing files are left untouched. Failures are reported on the
        console only, since the file log is what failed.
        """
        try:
            self._ensure_log_file(self._clock())
            self._ensure_usage_file()
        except OSError as e:
            logger.error("Log store initialization failed", error=str(e))

    # Cache

    def _make_key(self, location: str) -> str:
        """Create cache key from a location name.

        Only case is normalized, so "Paris,FR" and "Paris" stay distinct.
        """
        return location.casefold()

    def _is_expired(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.timestamp > self._ttl

    def _read_snapshot(self) -> dict[str, CacheEntry]:
        """Load the cache snapshot.

        Raises:
            OSError: If the file cannot be read
            ValueError: If the file does not hold a valid snapshot
        """
        if not self._cache_file.exists():
            return {}
        return CacheSnapshot.validate_json(self._cache_file.read_bytes())

    def _write_snapshot(self, snapshot: dict[str, CacheEntry]) -> None:
        """Replace the cache file with the given snapshot in one step."""
        self._cache_file.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._cache_file.parent,
            prefix=f".{self._cache_file.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(CacheSnapshot.dump_json(snapshot, indent=2))
            os.replace(tmp_name, self._cache_file)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get_cached(self, location: str) -> str | None:
        """Get the cached response body for a location.

        Expired entries are removed from the snapshot. A missing or
        unreadable cache file counts as a miss.
        """
        key = self._make_key(location)
        try:
            snapshot = self._read_snapshot()
            entry = snapshot.get(key)
            if entry is not None and self._is_expired(entry):
                del snapshot[key]
                self._write_snapshot(snapshot)
                self.log_event(f"Cached data for {location} expired", Severity.DEBUG)
                entry = None
        except (OSError, ValueError) as e:
            self.log_event(f"Failed to read cache: {e}", Severity.ERROR)
            entry = None

        if entry is None:
            cache_misses.inc()
            return None

        cache_hits.inc()
        self.log_event(f"Using cached data for {location}")
        return entry.data

    def put_cached(self, location: str, payload: str) -> None:
        """Cache a response body for a location, replacing any older entry."""
        key = self._make_key(location)
        try:
            snapshot = self._read_snapshot()
        except (OSError, ValueError) as e:
            self.log_event(f"Discarding unreadable cache: {e}", Severity.WARNING)
            snapshot = {}

        snapshot[key] = CacheEntry(data=payload, timestamp=self._clock())

        try:
            self._write_snapshot(snapshot)
        except OSError as e:
            self.log_event(f"Failed to write cache: {e}", Severity.ERROR)
            return
        self.log_event(f"Data for {location} cached", Severity.DEBUG)

    def purge_expired(self) -> int:
        """Remove every expired entry and return how many were dropped."""
        try:
            snapshot = self._read_snapshot()
            expired = [key for key, entry in snapshot.items() if self._is_expired(entry)]
            if not expired:
                return 0
            for key in expired:
                del snapshot[key]
            self._write_snapshot(snapshot)
        except (OSError, ValueError) as e:
            self.log_event(f"Failed to purge cache: {e}", Severity.ERROR)
            return 0

        self.log_event(f"Purged {len(expired)} expired cache entries", Severity.DEBUG)
        return len(expired)

    # Event log

    def _ensure_log_file(self, day: datetime) -> Path:
        path = self.log_file_path(day)
        if not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(LOG_HEADER.format(date=day) + "\n", encoding="utf-8")
        return path

    def log_event(self, message: str, severity: Severity = Severity.INFO) -> None:
        """Append an event to today's log.

        WARNING and ERROR events are echoed to the console as well.
        """
        now = self._clock()
        line = f"[{now:{TIMESTAMP_FORMAT}}] [{severity.name}] {message}\n"
        try:
            path = self._ensure_log_file(now)
            with path.open("a", encoding="utf-8") as log:
                log.write(line)
        except OSError as e:
            logger.error("Failed to write to log", error=str(e))

        if severity >= Severity.WARNING:
            getattr(logger, severity.name.lower())(message)

    # Usage ledger

    def _ensure_usage_file(self) -> None:
        if not self._usage_file.exists():
            self._usage_file.parent.mkdir(parents=True, exist_ok=True)
            self._usage_file.write_text(USAGE_HEADER + "\n", encoding="utf-8")

    def log_usage(self, location: str) -> None:
        """Record a weather request in the usage ledger."""
        line = f"{self._clock():{TIMESTAMP_FORMAT}}{USAGE_SEPARATOR}{location}\n"
        try:
            self._ensure_usage_file()
            with self._usage_file.open("a", encoding="utf-8") as ledger:
                ledger.write(line)
        except OSError as e:
            self.log_event(f"Failed to log API request: {e}", Severity.ERROR)

    def usage_summary(self) -> UsageSummary | None:
        """Summarise the usage ledger, or None if it is unavailable."""
        if not self._usage_file.exists():
            return None

        try:
            lines = self._usage_file.read_text(encoding="utf-8").splitlines()
        except (OSError, ValueError) as e:
            self.log_event(f"Failed to read usage statistics: {e}", Severity.ERROR)
            return None

        records = [line for line in lines if USAGE_SEPARATOR in line]
        if not records:
            return UsageSummary(total=0)

        timestamp, _, location = records[-1].partition(USAGE_SEPARATOR)
        return UsageSummary(
            total=len(records),
            last_location=location,
            last_timestamp=timestamp,
        )
