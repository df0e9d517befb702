"""Blocking authentication prober.

This module provides :class:`SyncProber`, which sends the unauthenticated
probe with :class:`httpx.Client`. The client is created per probe with
redirect following disabled, so a ``302`` to a login page is seen as a
``302`` and not as the page's ``200``.

Failures never leave :meth:`SyncProber.probe`: connection errors,
timeouts, TLS errors and invalid URLs all produce the fallback scheme.

See Also:
    :class:`~authprobe.client.async_client.AsyncProber` for the
    equivalent non-blocking implementation.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

import httpx

from authprobe.client.response import classify_response, without_userinfo
from authprobe.models import AuthScheme, ProbeConfig
from authprobe.schemes import FALLBACK_SCHEME

logger = logging.getLogger(__name__)


class SyncProber:
    """Blocking prober for a server's supported authentication schemes.

    Args:
        config: Timeout, SSL verification and User-Agent for the probe.
            Defaults to :class:`~authprobe.models.ProbeConfig` defaults
            (30 second timeout).
        transport: Optional :mod:`httpx` transport, mainly for tests.

    Example::

        prober = SyncProber(ProbeConfig(timeout=5))
        schemes = prober.probe("http://reports.local/ReportServer")
    """

    def __init__(
        self,
        config: Optional[ProbeConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config or ProbeConfig()
        self._transport = transport

    @property
    def config(self) -> ProbeConfig:
        """The probe settings in effect."""
        return self._config

    def probe(self, uri: Union[str, httpx.URL]) -> AuthScheme:
        """Send one unauthenticated GET to *uri* and classify the reply.

        Blocks for at most the configured timeout. There are no retries.

        Args:
            uri: Endpoint to probe.

        Returns:
            The advertised schemes, or ``AuthScheme.NTLM`` when the server
            did not answer with a usable ``401`` or could not be reached.
        """
        target: Union[str, httpx.URL] = uri
        try:
            target = without_userinfo(uri)
            with self._make_client() as client:
                response = client.get(target)
        except Exception as exc:
            logger.debug("Probe of %s failed, assuming %s: %r", target, FALLBACK_SCHEME.name, exc)
            return FALLBACK_SCHEME

        return classify_response(response)

    def _make_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=False,
            headers={"User-Agent": self._config.user_agent},
            transport=self._transport,
        )
