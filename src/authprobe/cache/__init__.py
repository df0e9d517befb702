"""In-memory decision caching for authprobe.

This package provides :class:`DecisionCache`, a thread-safe mapping from
server authority keys to the :class:`~authprobe.models.CredentialType`
detected for that server. Entries have no TTL; they live until they are
invalidated individually or the whole cache is cleared.

The cache is owned by :class:`~authprobe.detector.CredentialTypeDetector`;
the process-wide default detector holds the process-wide cache.
"""

from authprobe.cache.cache import DecisionCache

__all__ = ["DecisionCache"]
