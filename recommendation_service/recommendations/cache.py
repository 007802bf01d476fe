"""
Optional per-user profile cache.

The engine itself is stateless. Callers that serve many requests for the
same user can inject a ProfileCache to avoid rebuilding the profile; entries
are invalidated as soon as the user's progress changes.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Dict, Sequence, Tuple

from ..models import Article, Tutorial, UserProfile, UserProgress
from .profile_builder import build_user_profile

logger = logging.getLogger(__name__)

Fingerprint = Tuple


def progress_fingerprint(progress: UserProgress) -> Fingerprint:
    """Cheap summary of the progress fields a profile depends on."""
    return (
        tuple(progress.completed_articles),
        tuple(progress.completed_tutorials),
        tuple(progress.completed_paths),
        progress.total_points,
        progress.last_activity.isoformat(),
        len(progress.completion_history),
    )


class ProfileCache:
    """Thread-safe map of user id to (fingerprint, profile)."""

    def __init__(self, max_entries: int = 1024):
        self.max_entries = max(1, max_entries)
        self._entries: Dict[str, Tuple[Fingerprint, UserProfile]] = {}
        self._lock = Lock()

    def get_or_build(
        self,
        progress: UserProgress,
        articles: Sequence[Article] = (),
        tutorials: Sequence[Tutorial] = (),
    ) -> UserProfile:
        """
        Return the cached profile for this progress, building it on a miss.

        The catalogs are assumed stable for the lifetime of the cache; call
        ``clear()`` after a catalog change.
        """
        fingerprint = progress_fingerprint(progress)
        with self._lock:
            entry = self._entries.get(progress.user_id)
            if entry is not None and entry[0] == fingerprint:
                return entry[1]

        profile = build_user_profile(progress, articles, tutorials)

        with self._lock:
            if progress.user_id not in self._entries and len(self._entries) >= self.max_entries:
                # Evict the oldest insertion
                oldest = next(iter(self._entries))
                del self._entries[oldest]
            self._entries[progress.user_id] = (fingerprint, profile)
        logger.debug("Cached profile for %s", progress.user_id)
        return profile

    def invalidate(self, user_id: str) -> bool:
        """Drop one user's entry; returns True if there was one."""
        with self._lock:
            return self._entries.pop(user_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._entries
