import logging
import threading
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from autodial.domain import Unit

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, Tuple[str, ...], bool]


class DiscoveryCache:
    """Memo of discovery results keyed by source, namespace filters and recursion.

    Safe to share between threads running independent passes. The lock guards
    lookups and inserts only; discovery itself runs outside it, so two threads
    may compute the same entry, and the first stored result wins.

    Attributes:
        _lock: Guards _entries.
        _entries: Cached unit lists.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: Dict[CacheKey, List[Unit]] = {}

    @staticmethod
    def make_key(source: str, namespace_filters: Iterable[str], recursive: bool = True) -> CacheKey:
        return source, tuple(sorted({prefix.rstrip(".") for prefix in namespace_filters})), recursive

    def get(self, source: str, namespace_filters: Iterable[str], recursive: bool = True) -> Optional[List[Unit]]:
        """Return a copy of the cached units, or None on a miss."""
        key = self.make_key(source, namespace_filters, recursive)
        with self._lock:
            units = self._entries.get(key)
        return list(units) if units is not None else None

    def put(
        self,
        source: str,
        namespace_filters: Iterable[str],
        units: List[Unit],
        recursive: bool = True,
    ) -> List[Unit]:
        """Store units unless an entry already exists; return the stored entry."""
        key = self.make_key(source, namespace_filters, recursive)
        with self._lock:
            stored = self._entries.setdefault(key, list(units))
        return list(stored)

    def get_or_compute(
        self,
        source: str,
        namespace_filters: Iterable[str],
        compute: Callable[[], List[Unit]],
        recursive: bool = True,
    ) -> List[Unit]:
        """Return cached units, computing and storing them on a miss.

        Args:
            source: Scanned package or module name.
            namespace_filters: Filters the scan used.
            compute: Performs the discovery. Errors propagate and nothing is cached.
            recursive: Whether the scan included subpackages.
        """
        filters = tuple(namespace_filters)
        cached = self.get(source, filters, recursive)
        if cached is not None:
            logger.debug("Discovery cache hit for %s %s", source, filters)
            return cached
        return self.put(source, filters, compute(), recursive)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
