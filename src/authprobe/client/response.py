"""Request and response helpers shared by both probers.

:func:`without_userinfo` prepares the probe URL. :func:`classify_response`
maps the reply to scheme flags: only a ``401 Unauthorized`` carries an
authentication signal, and every other status (success, redirect, server
error) is classified as the fallback scheme without looking at the headers.

See Also:
    :func:`authprobe.schemes.parse_challenge` -- the header parser used
    for ``401`` responses.
"""

from __future__ import annotations

import logging
from typing import Union

import httpx

from authprobe.models import AuthScheme
from authprobe.schemes import FALLBACK_SCHEME, parse_challenge

logger = logging.getLogger(__name__)

CHALLENGE_HEADER = "WWW-Authenticate"


def without_userinfo(uri: Union[str, httpx.URL]) -> httpx.URL:
    """Return *uri* as an :class:`httpx.URL` with any ``user:password@`` removed.

    :mod:`httpx` turns URL userinfo into Basic credentials, and the probe
    must go out unauthenticated.

    Raises:
        httpx.InvalidURL: If *uri* cannot be parsed.
    """
    url = uri if isinstance(uri, httpx.URL) else httpx.URL(uri)
    if url.userinfo:
        url = url.copy_with(username=None, password=None)
    return url


def classify_response(response: httpx.Response) -> AuthScheme:
    """Return the schemes advertised by *response*.

    Args:
        response: Reply to the unauthenticated probe.

    Returns:
        The parsed challenge flags for a ``401``; ``AuthScheme.NTLM`` for any
        other status.
    """
    if response.status_code != httpx.codes.UNAUTHORIZED:
        logger.debug("HTTP %d carries no challenge to inspect", response.status_code)
        return FALLBACK_SCHEME

    challenges = response.headers.get_list(CHALLENGE_HEADER)
    schemes = parse_challenge(challenges)
    logger.debug("Challenge %r parsed as %s", challenges, schemes.describe())
    return schemes
