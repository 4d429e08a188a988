"""Memoised cascade markup keyed by skin id and role set."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Iterable

from skincascade.model.skin import Role

CacheKey = tuple[int, frozenset[Role]]


@dataclass(frozen=True)
class _Entry:
    markup: str
    generation: int
    epoch: int


class StyleCache:
    """Thread-safe memo of resolved markup.

    Each skin id carries a generation counter and the cache as a whole an
    epoch. An entry is served only while both still match the values seen
    when its markup was computed, so a result computed across a concurrent
    invalidation is never returned.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[CacheKey, _Entry] = {}
        self._generations: dict[int, int] = {}
        self._epoch = 0

    @staticmethod
    def key(skin_id: int, roles: Iterable[Role | str]) -> CacheKey:
        return (skin_id, frozenset(Role(r) for r in roles))

    def get(self, skin_id: int, roles: Iterable[Role | str]) -> str | None:
        key = self.key(skin_id, roles)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or not self._is_current(skin_id, entry):
                return None
            return entry.markup

    def get_or_compute(
        self, skin_id: int, roles: Iterable[Role | str], compute: Callable[[], str]
    ) -> str:
        key = self.key(skin_id, roles)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._is_current(skin_id, entry):
                return entry.markup
            generation = self._generations.get(skin_id, 0)
            epoch = self._epoch
        markup = compute()
        with self._lock:
            self._entries[key] = _Entry(markup, generation, epoch)
        return markup

    def invalidate(self, skin_ids: Iterable[int]) -> None:
        """Drop every role-set entry of the given skins."""
        ids = set(skin_ids)
        with self._lock:
            for skin_id in ids:
                self._generations[skin_id] = self._generations.get(skin_id, 0) + 1
            for key in [k for k in self._entries if k[0] in ids]:
                del self._entries[key]

    def invalidate_all(self) -> None:
        with self._lock:
            self._epoch += 1
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _is_current(self, skin_id: int, entry: _Entry) -> bool:
        return (
            entry.epoch == self._epoch
            and entry.generation == self._generations.get(skin_id, 0)
        )
