from __future__ import annotations

import threading
from typing import Any, Dict, Optional

_MASK_64 = (1 << 64) - 1


def fingerprint(text: str, bits: int = 64) -> str:
    """
    Rolling content hash (h = h * 31 + ch) with wraparound at `bits`.
    Non-cryptographic: only used to key the in-process caches.
    """
    mask = _MASK_64 if bits == 64 else (1 << bits) - 1
    h = 0
    for ch in text:
        h = ((h << 5) - h + ord(ch)) & mask
    return format(h, "x")


class ResultCache:
    """
    Process-lifetime memo: insert-if-absent, no eviction.
    A fresh instance always starts empty.
    """

    def __init__(self, name: str = "cache") -> None:
        self.name = name
        self._data: Dict[str, Any] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            if key in self._data:
                self.hits += 1
                return self._data[key]
            self.misses += 1
            return None

    def put(self, key: str, value: Any) -> Any:
        # values for one key are always identical, so first writer wins
        with self._lock:
            return self._data.setdefault(key, value)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def stats(self) -> Dict[str, Any]:
        return {"name": self.name, "size": len(self._data), "hits": self.hits, "misses": self.misses}
