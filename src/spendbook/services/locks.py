"""Per-document locks serializing read-modify-write cycles."""

from __future__ import annotations

from contextlib import contextmanager
from threading import Lock
from typing import Dict, Hashable, Iterator

__all__ = ["key_lock", "held_keys"]


class _KeyLock:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = Lock()
        self.users = 0


_LOCKS: Dict[Hashable, _KeyLock] = {}
_REGISTRY_LOCK = Lock()


def _acquire_entry(key: Hashable) -> _KeyLock:
    with _REGISTRY_LOCK:
        entry = _LOCKS.get(key)
        if entry is None:
            entry = _LOCKS[key] = _KeyLock()
        entry.users += 1
        return entry


def _release_entry(key: Hashable, entry: _KeyLock) -> None:
    with _REGISTRY_LOCK:
        entry.users -= 1
        if entry.users == 0:
            del _LOCKS[key]


@contextmanager
def key_lock(*key: Hashable) -> Iterator[None]:
    """Hold the lock for one document key, e.g. ``("ledger", user_id, month)``.

    Different keys never wait on each other. A key is forgotten once its last
    holder or waiter leaves.
    """

    entry = _acquire_entry(key)
    try:
        with entry.lock:
            yield
    finally:
        _release_entry(key, entry)


def held_keys() -> list[Hashable]:
    """Keys currently held or waited on."""

    with _REGISTRY_LOCK:
        return list(_LOCKS)
