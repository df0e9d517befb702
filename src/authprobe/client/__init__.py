"""HTTP probing for authprobe.

Provides blocking and asynchronous probers that send one unauthenticated
GET through :mod:`httpx` and classify the reply into an
:class:`~authprobe.models.AuthScheme` flag set.

Classes:
    :class:`SyncProber` -- blocking prober backed by :class:`httpx.Client`.
    :class:`AsyncProber` -- non-blocking prober backed by :class:`httpx.AsyncClient`.

Both accept the same :class:`~authprobe.models.ProbeConfig` and an optional
``transport`` so tests can substitute :class:`httpx.MockTransport`.

Example::

    from authprobe.client import SyncProber

    schemes = SyncProber().probe("https://reports.example.com/ReportServer")
"""

from authprobe.client.async_client import AsyncProber
from authprobe.client.response import classify_response, without_userinfo
from authprobe.client.sync_client import SyncProber

__all__ = ["SyncProber", "AsyncProber", "classify_response", "without_userinfo"]
