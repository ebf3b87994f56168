# in-memory callback store, no extra deps
import threading
from typing import Any, Callable, Dict, List, Tuple

Entry = Tuple[Callable, Any, Dict[str, Any]]

class RAMStore:
    """
    key -> (callback, signature, env). Shared between request threads and
    the gc timer, so every operation holds the lock; last writer wins.
    """
    def __init__(self):
        self._lock = threading.Lock()
        self._data: Dict[str, Entry] = {}

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def get(self, key: str) -> Entry:
        with self._lock:
            callback, signature, env = self._data[key]
        return callback, signature, dict(env)

    def set(self, key: str, callback: Callable, signature: Any, env: Dict[str, Any]):
        with self._lock:
            self._data[key] = (callback, signature, dict(env))

    def unset(self, key: str):
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._data)

    def __len__(self):
        with self._lock:
            return len(self._data)
