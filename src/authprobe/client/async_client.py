"""Asynchronous authentication prober.

Provides :class:`AsyncProber`, the awaitable counterpart of
:class:`~authprobe.client.sync_client.SyncProber`. It uses
:class:`httpx.AsyncClient` with the same settings and the same fail-open
behaviour; awaiting :meth:`AsyncProber.probe` suspends instead of blocking
the thread.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

import httpx

from authprobe.client.response import classify_response, without_userinfo
from authprobe.models import AuthScheme, ProbeConfig
from authprobe.schemes import FALLBACK_SCHEME

logger = logging.getLogger(__name__)


class AsyncProber:
    """Non-blocking prober for a server's supported authentication schemes.

    Args:
        config: Timeout, SSL verification and User-Agent for the probe.
        transport: Optional async :mod:`httpx` transport, mainly for tests.

    Example::

        schemes = await AsyncProber().probe("https://reports.example.com/")
    """

    def __init__(
        self,
        config: Optional[ProbeConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config or ProbeConfig()
        self._transport = transport

    @property
    def config(self) -> ProbeConfig:
        """The probe settings in effect."""
        return self._config

    async def probe(self, uri: Union[str, httpx.URL]) -> AuthScheme:
        """Send one unauthenticated GET to *uri* and classify the reply.

        Behaves identically to
        :meth:`~authprobe.client.sync_client.SyncProber.probe` but is
        non-blocking. Task cancellation still propagates.
        """
        target: Union[str, httpx.URL] = uri
        try:
            target = without_userinfo(uri)
            async with self._make_client() as client:
                response = await client.get(target)
        except Exception as exc:
            logger.debug("Probe of %s failed, assuming %s: %r", target, FALLBACK_SCHEME.name, exc)
            return FALLBACK_SCHEME

        return classify_response(response)

    def _make_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=False,
            headers={"User-Agent": self._config.user_agent},
            transport=self._transport,
        )
