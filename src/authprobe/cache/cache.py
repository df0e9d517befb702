"""Thread-safe in-memory cache of credential-type decisions.

Keys are authority strings as produced by
:func:`~authprobe.detector.authority_key`. A lock guards every read and
write but is never held while a decision is being computed, so a slow
probe for one server does not stall lookups for another. The flip side is
that two callers missing on the same key at the same time may both probe;
the first value stored wins and both callers receive it.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterator, Optional

from authprobe.models import CredentialType

logger = logging.getLogger(__name__)


class DecisionCache:
    """Concurrent mapping of authority key to :class:`CredentialType`.

    Entry lifecycle: absent -> present on the first decision, back to absent
    on :meth:`invalidate` or :meth:`clear`. A present entry is never
    replaced in place.

    Example::

        cache = DecisionCache()
        cred = cache.get_or_compute("https://reports:443", lambda: CredentialType.NTLM)
        cache.invalidate("https://reports:443")
    """

    def __init__(self) -> None:
        self._entries: dict[str, CredentialType] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[CredentialType]:
        """Return the cached decision for *key*, or ``None`` on a miss."""
        with self._lock:
            return self._entries.get(key)

    def add(self, key: str, value: CredentialType) -> CredentialType:
        """Store *value* under *key* unless an entry already exists.

        Returns:
            The value held by the cache after the call, which is the
            existing entry if another caller got there first.
        """
        with self._lock:
            return self._entries.setdefault(key, value)

    def get_or_compute(
        self, key: str, compute: Callable[[], CredentialType]
    ) -> CredentialType:
        """Return the cached decision for *key*, computing it on a miss.

        *compute* runs without the lock held. Concurrent misses on the same
        key are not deduplicated.

        Args:
            key: Authority key.
            compute: Zero-argument callable producing the decision,
                typically a network probe.

        Returns:
            The cached or freshly stored decision.
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug("Decision cache hit: %s -> %s", key, cached.value)
            return cached

        logger.debug("Decision cache miss: %s", key)
        return self.add(key, compute())

    def invalidate(self, key: str) -> None:
        """Remove the entry for *key*. Missing keys are ignored."""
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Remove all entries."""
        with self._lock:
            self._entries.clear()

    def keys(self) -> list[str]:
        """Return a snapshot of the cached authority keys."""
        with self._lock:
            return list(self._entries)

    def items(self) -> list[tuple[str, CredentialType]]:
        """Return a snapshot of ``(key, decision)`` pairs."""
        with self._lock:
            return list(self._entries.items())

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())
