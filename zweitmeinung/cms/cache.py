"""Cache mémoire à expiration : lookups globaux (catégories FAQ, site config…)."""
import time
from typing import Any, Dict, Optional, Tuple


class TTLCache:
    """
    Dict {clé: (timestamp, valeur)} ; les entrées expirées restent lisibles via get_stale().

    Avec `max_entries`, une nouvelle clé sur un cache plein purge d'abord les
    entrées expirées, puis évince les plus anciennes.
    """

    def __init__(self, ttl: float, max_entries: Optional[int] = None):
        self.ttl = ttl
        self.max_entries = max_entries
        self._data: Dict[str, Tuple[float, Any]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._data.get(key)
        if entry is None:
            return None
        ts, value = entry
        if time.monotonic() - ts >= self.ttl:
            return None
        return value

    def get_stale(self, key: str) -> Optional[Any]:
        entry = self._data.get(key)
        return entry[1] if entry else None

    def set(self, key: str, value: Any) -> None:
        self._data.pop(key, None)
        if self.max_entries is not None and len(self._data) >= self.max_entries:
            self.purge_expired()
            while len(self._data) >= self.max_entries:
                del self._data[next(iter(self._data))]
        self._data[key] = (time.monotonic(), value)

    def purge_expired(self) -> int:
        now = time.monotonic()
        expired = [k for k, (ts, _) in self._data.items() if now - ts >= self.ttl]
        for k in expired:
            del self._data[k]
        return len(expired)

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)

    def stats(self) -> dict:
        now = time.monotonic()
        return {
            "total": len(self._data),
            "expired": sum(1 for ts, _ in self._data.values() if now - ts >= self.ttl),
        }
