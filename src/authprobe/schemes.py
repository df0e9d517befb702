"""Challenge header parsing and the credential priority policy.

Two pure functions make up the decision logic of authprobe:

- :func:`parse_challenge` turns the raw ``WWW-Authenticate`` values of a
  ``401`` response into an :class:`~authprobe.models.AuthScheme` flag set.
- :func:`map_to_credential_type` picks one
  :class:`~authprobe.models.CredentialType` from that set.

Both are total: any input, including ``None`` or garbage, yields a value.
Whenever nothing usable is found the result degrades to NTLM, the scheme
every known server generation accepts.
"""

from __future__ import annotations

from typing import Iterable, Optional

from authprobe.models import AuthScheme, CredentialType

FALLBACK_SCHEME = AuthScheme.NTLM
"""Scheme assumed whenever the probe yields no usable signal."""

_KNOWN_SCHEMES: dict[str, AuthScheme] = {
    "NEGOTIATE": AuthScheme.NEGOTIATE,
    "NTLM": AuthScheme.NTLM,
}


def parse_challenge(header_values: Optional[Iterable[str]]) -> AuthScheme:
    """Parse ``WWW-Authenticate`` header values into a set of scheme flags.

    A server may repeat the header and may also pack several schemes into
    one value separated by commas. Only the scheme token (the text before
    the first space) is inspected; challenge parameters such as ``realm``
    or ``nonce`` are ignored, as are unknown schemes like ``Basic``.

    Args:
        header_values: Every instance of the header, in the order received.
            ``None`` or an empty sequence means the header was absent.

    Returns:
        The detected flags, or ``AuthScheme.NTLM`` when the header is missing
        or names no recognised scheme.

    Example::

        >>> parse_challenge(["Negotiate, NTLM"]) == AuthScheme.NEGOTIATE | AuthScheme.NTLM
        True
        >>> parse_challenge(['Basic realm="x"'])
        <AuthScheme.NTLM: 2>
    """
    values = list(header_values or [])
    if not values:
        return FALLBACK_SCHEME

    schemes = AuthScheme.NONE
    for value in values:
        for part in value.split(","):
            part = part.strip()
            if not part:
                continue
            token = part.split(" ", 1)[0].upper()
            schemes |= _KNOWN_SCHEMES.get(token, AuthScheme.NONE)

    if schemes == AuthScheme.NONE:
        return FALLBACK_SCHEME
    return schemes


def map_to_credential_type(schemes: AuthScheme) -> CredentialType:
    """Choose the credential type a client should use for *schemes*.

    Priority, first match wins:

    1. ``NTLM`` advertised -> :attr:`CredentialType.NTLM`
    2. ``NEGOTIATE`` advertised -> :attr:`CredentialType.WINDOWS`
    3. anything else -> :attr:`CredentialType.NTLM`

    NTLM outranks Negotiate for backward compatibility with older report
    servers, even though Negotiate can itself fall back to NTLM.
    """
    if schemes & AuthScheme.NTLM:
        return CredentialType.NTLM
    if schemes & AuthScheme.NEGOTIATE:
        return CredentialType.WINDOWS
    return CredentialType.NTLM
