"""Release cache: expiring key/value store for GitHub release payloads.

Stands in for the host's transient store. One instance is created at
startup and passed to the UpdateClient; the owner decides when to clear it.
Optionally persisted as JSON so entries survive process restarts.
"""

import json
import logging
import os
import threading
import time
from typing import Callable

from permacanonical.core.models import CachedEntry, ReleaseInfo

logger = logging.getLogger(__name__)

HOUR_IN_SECONDS = 3600


class ReleaseCache:
    """Thread-safe expiring cache of ReleaseInfo values."""

    def __init__(self, path: str | None = None,
                 clock: Callable[[], float] = time.time):
        self.path = path
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, CachedEntry] = {}
        if path:
            self._load()

    # ── Public API ───────────────────────────────────────────────────

    def get(self, key: str) -> ReleaseInfo | None:
        """Return the cached value, or None if absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                logger.debug("Cache miss: %s", key)
                return None
            if entry.is_expired(self._clock()):
                logger.debug("Cache entry expired: %s", key)
                del self._entries[key]
                self._persist()
                return None
            logger.debug("Cache hit: %s", key)
            return entry.value

    def set(self, key: str, value: ReleaseInfo, ttl: float):
        """Store ``value`` under ``key`` for ``ttl`` seconds, replacing any entry."""
        with self._lock:
            self._entries[key] = CachedEntry(
                key=key, value=value, expires_at=self._clock() + ttl,
            )
            self._persist()

    def delete(self, key: str) -> bool:
        """Remove ``key``. Returns True if an entry was removed."""
        with self._lock:
            removed = self._entries.pop(key, None) is not None
            if removed:
                self._persist()
            return removed

    def clear(self):
        with self._lock:
            self._entries.clear()
            self._persist()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    # ── Persistence ──────────────────────────────────────────────────

    def _load(self):
        if not os.path.isfile(self.path):
            return
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            for key, raw in data.items():
                self._entries[key] = CachedEntry(
                    key=key,
                    value=ReleaseInfo.from_api(raw['value']),
                    expires_at=float(raw['expires_at']),
                )
            logger.info("Loaded %d cached releases from %s",
                        len(self._entries), self.path)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("Ignoring unreadable cache file %s: %s", self.path, e)
            self._entries.clear()

    def _persist(self):
        """Write entries to disk. Caller must hold the lock.

        A failed write is logged; the in-memory entries stay authoritative.
        """
        if not self.path:
            return
        data = {
            key: {'value': entry.value.to_dict(), 'expires_at': entry.expires_at}
            for key, entry in self._entries.items()
        }
        tmp_path = self.path + '.tmp'
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.warning("Failed to write cache file %s: %s", self.path, e)
            try:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
            except OSError:
                pass
