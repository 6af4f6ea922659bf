"""String-keyed hash table with open addressing and FNV-1a hashing."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

_FNV_OFFSET_BASIS = 14695981039346656037
_FNV_PRIME = 1099511628211
_MASK_64 = 0xFFFFFFFFFFFFFFFF


def fnv1a(key: str) -> int:
    """Return the 64-bit FNV-1a digest of the UTF-8 encoded key."""
    h = _FNV_OFFSET_BASIS
    for byte in key.encode("utf-8"):
        h ^= byte
        h = (h * _FNV_PRIME) & _MASK_64
    return h


@dataclass(slots=True)
class _Entry:
    key: str
    value: Any


class HashTable:
    """Linear-probing table that doubles its capacity when saturated.

    Entries are never removed. Putting an existing key replaces its value.
    """

    def __init__(self, capacity: int = 2) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._slots: list[_Entry | None] = [None] * capacity
        self._count = 0

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def __len__(self) -> int:
        return self._count

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._find(key) is not None

    def __iter__(self) -> Iterator[str]:
        for entry in self._slots:
            if entry is not None:
                yield entry.key

    def items(self) -> Iterator[tuple[str, Any]]:
        for entry in self._slots:
            if entry is not None:
                yield entry.key, entry.value

    # ------------------------------------------------------------------
    # Probing
    # ------------------------------------------------------------------

    def _home(self, key: str) -> int:
        return fnv1a(key) % len(self._slots)

    def _find(self, key: str) -> _Entry | None:
        home = i = self._home(key)
        while True:
            entry = self._slots[i]
            if entry is None:
                return None
            if entry.key == key:
                return entry
            i = (i + 1) % len(self._slots)
            if i == home:
                return None

    def _insert(self, key: str, value: Any) -> bool:
        """Store key in its probe sequence. Return False when no slot is usable."""
        home = i = self._home(key)
        while True:
            entry = self._slots[i]
            if entry is None:
                self._slots[i] = _Entry(key, value)
                self._count += 1
                return True
            if entry.key == key:
                entry.value = value
                return True
            i = (i + 1) % len(self._slots)
            if i == home:
                return False

    def _grow(self) -> None:
        old = self._slots
        self._slots = [None] * (len(old) * 2)
        self._count = 0
        for entry in old:
            if entry is not None:
                self._insert(entry.key, entry.value)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def put(self, key: str, value: Any) -> None:
        """Insert or replace the value stored under key."""
        while not self._insert(key, value):
            self._grow()

    def fetch(self, key: str, default: Any = None) -> Any:
        """Return the value stored under key, or default if absent."""
        entry = self._find(key)
        if entry is None:
            return default
        return entry.value
