"""Thread-safe caches for interned strings and converted tag lists."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Mapping, Optional

from tally.identity import string_string_map


@dataclass(frozen=True)
class MetricTag:
    """A single name/value tag attached to an emitted metric."""

    name: str
    value: str


class StringInterner:
    """Hands back one shared instance for every equal string."""

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def intern(self, s: str) -> str:
        """Return the canonical instance of ``s``, registering it if new."""
        existing = self._entries.get(s)
        if existing is not None:
            return existing
        with self._lock:
            return self._entries.setdefault(s, s)


class TagCache:
    """Caches converted tag lists keyed by the identity of a tag mapping."""

    def __init__(self) -> None:
        self._entries: dict[int, list[MetricTag]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get(self, key: int) -> Optional[list[MetricTag]]:
        """Return the cached tags for ``key``, or ``None`` if absent."""
        return self._entries.get(key)

    def set(self, key: int, tags: list[MetricTag]) -> list[MetricTag]:
        """Store ``tags`` under ``key`` unless already present.

        Returns whichever value ends up cached: the pre-existing one if any,
        otherwise ``tags``.
        """
        existing = self._entries.get(key)
        if existing is not None:
            return existing
        with self._lock:
            return self._entries.setdefault(key, tags)


def tag_map_key(tags: Mapping[str, str]) -> int:
    """Derive a cache key from a tag mapping, independent of its ordering."""
    return string_string_map(tags)