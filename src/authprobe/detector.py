"""Credential-type detection with a per-authority decision cache.

This module ties the pieces together:

1. :func:`authority_key` reduces a URI to ``scheme://host:port``.
2. :class:`~authprobe.cache.DecisionCache` is consulted with that key.
3. On a miss a :class:`~authprobe.client.SyncProber` (or
   :class:`~authprobe.client.AsyncProber`) probes the server.
4. :func:`~authprobe.schemes.map_to_credential_type` picks the decision,
   which is stored and returned.

The module exposes two layers, in the same way :mod:`authprobe.output`
does for output:

1. :class:`CredentialTypeDetector` -- owns a config, a cache and two probers.
2. Module-level functions (:func:`detect_supported_credential_type`,
   :func:`invalidate_cache`, ...) that delegate to a process-wide default
   detector so callers share one cache without passing it around.

No function here raises for network or server problems; see
:mod:`authprobe.schemes` for the fallback policy.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional, Union

import httpx

from authprobe.cache import DecisionCache
from authprobe.client import AsyncProber, SyncProber
from authprobe.models import AuthScheme, CredentialType, ProbeConfig
from authprobe.schemes import map_to_credential_type

logger = logging.getLogger(__name__)

URI = Union[str, httpx.URL]

_DEFAULT_PORTS = {"http": 80, "https": 443}


def authority_key(uri: URI) -> str:
    """Return the cache key for *uri*: lower-cased ``scheme://host:port``.

    Path, query, fragment and userinfo are dropped, and a missing port is
    filled in with the scheme's default, so ``http://Host/a`` and
    ``http://host:80/b`` share a key while ``http://host:8080`` and
    ``https://host:80`` do not.

    Input that does not parse into a scheme and host is keyed by its own
    lower-cased text, so it still gets a stable entry.

    Example::

        >>> authority_key("HTTP://Reports.Example.com/ReportServer?x=1")
        'http://reports.example.com:80'
    """
    try:
        url = uri if isinstance(uri, httpx.URL) else httpx.URL(uri)
    except (httpx.InvalidURL, TypeError, ValueError):
        return str(uri).strip().lower()

    scheme = url.scheme.lower()
    host = url.host.lower()
    if not scheme or not host:
        return str(uri).strip().lower()

    if ":" in host:
        host = f"[{host}]"
    port = url.port or _DEFAULT_PORTS.get(scheme)
    if port is None:
        return f"{scheme}://{host}"
    return f"{scheme}://{host}:{port}"


class CredentialTypeDetector:
    """Detect and cache the credential type each server expects.

    Args:
        config: Probe settings shared by both probers.
        cache: Decision cache to use. A private one is created when omitted.
        transport: Optional :mod:`httpx` transport for blocking probes.
        async_transport: Optional async transport for awaited probes.

    Example::

        detector = CredentialTypeDetector(ProbeConfig(timeout=10))
        detector.detect_supported_credential_type("https://reports/ReportServer")
    """

    def __init__(
        self,
        config: Optional[ProbeConfig] = None,
        cache: Optional[DecisionCache] = None,
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config or ProbeConfig()
        self._cache = cache if cache is not None else DecisionCache()
        self._prober = SyncProber(self._config, transport=transport)
        self._async_prober = AsyncProber(self._config, transport=async_transport)

    @property
    def config(self) -> ProbeConfig:
        """Probe settings used on cache misses."""
        return self._config

    @property
    def cache(self) -> DecisionCache:
        """The decision cache backing this detector."""
        return self._cache

    def detect_supported_credential_type(self, uri: URI) -> CredentialType:
        """Return the credential type to use for *uri*, probing on a cache miss.

        Blocks the calling thread for up to the configured timeout on a miss;
        a hit returns immediately without network activity.
        """
        key = authority_key(uri)
        return self._cache.get_or_compute(
            key, lambda: map_to_credential_type(self._prober.probe(uri))
        )

    async def detect_supported_credential_type_async(self, uri: URI) -> CredentialType:
        """Awaitable variant of :meth:`detect_supported_credential_type`."""
        key = authority_key(uri)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Decision cache hit: %s -> %s", key, cached.value)
            return cached

        logger.debug("Decision cache miss: %s", key)
        schemes = await self._async_prober.probe(uri)
        return self._cache.add(key, map_to_credential_type(schemes))

    def get_supported_authentication_schemes(self, uri: URI) -> AuthScheme:
        """Probe *uri* and return the raw advertised schemes.

        Always probes; the decision cache holds mapped credential types only.
        """
        return self._prober.probe(uri)

    async def get_supported_authentication_schemes_async(self, uri: URI) -> AuthScheme:
        """Awaitable variant of :meth:`get_supported_authentication_schemes`."""
        return await self._async_prober.probe(uri)

    def detect_with_schemes(self, uri: URI) -> tuple[CredentialType, AuthScheme]:
        """Probe *uri* once and return both the decision and the raw schemes.

        The mapped decision is recorded in the cache like any other. If the
        authority already has an entry, that entry wins and is returned, so
        the pair can disagree when the server changed since it was cached.
        """
        schemes = self._prober.probe(uri)
        key = authority_key(uri)
        decision = self._cache.add(key, map_to_credential_type(schemes))
        logger.debug("Recorded %s -> %s from %s", key, decision.value, schemes.describe())
        return decision, schemes

    def invalidate_cache(self, uri: URI) -> None:
        """Forget the decision for the authority of *uri*."""
        self._cache.invalidate(authority_key(uri))

    def clear_cache(self) -> None:
        """Forget every cached decision."""
        self._cache.clear()


# ------------------------------------------------------------------ #
# Process-wide default detector
# ------------------------------------------------------------------ #

_detector: Optional[CredentialTypeDetector] = None
_detector_lock = threading.Lock()


def get_detector() -> CredentialTypeDetector:
    """Return the process-wide :class:`CredentialTypeDetector`.

    Created lazily with default settings on first use.
    """
    global _detector
    with _detector_lock:
        if _detector is None:
            _detector = CredentialTypeDetector()
        return _detector


def set_detector(detector: CredentialTypeDetector) -> None:
    """Install *detector* as the process-wide instance.

    The CLI uses this to apply the resolved :class:`ProbeConfig`.
    """
    global _detector
    with _detector_lock:
        _detector = detector


def reset_detector() -> None:
    """Drop the process-wide instance and its cache.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _detector
    with _detector_lock:
        _detector = None


def detect_supported_credential_type(uri: URI) -> CredentialType:
    """Return the credential type for *uri* using the process-wide cache."""
    return get_detector().detect_supported_credential_type(uri)


async def detect_supported_credential_type_async(uri: URI) -> CredentialType:
    """Awaitable variant of :func:`detect_supported_credential_type`."""
    return await get_detector().detect_supported_credential_type_async(uri)


def get_supported_authentication_schemes(uri: URI) -> AuthScheme:
    """Probe *uri* and return the raw advertised schemes (uncached)."""
    return get_detector().get_supported_authentication_schemes(uri)


async def get_supported_authentication_schemes_async(uri: URI) -> AuthScheme:
    """Awaitable variant of :func:`get_supported_authentication_schemes`."""
    return await get_detector().get_supported_authentication_schemes_async(uri)


def invalidate_cache(uri: URI) -> None:
    """Forget the process-wide decision for the authority of *uri*."""
    get_detector().invalidate_cache(uri)


def clear_cache() -> None:
    """Forget every process-wide decision."""
    get_detector().clear_cache()
