"""authprobe -- Detect which HTTP authentication scheme a server expects.

This package sends a single unauthenticated GET to a server endpoint, reads
the ``WWW-Authenticate`` challenge that comes back with a ``401``, and maps
the advertised schemes to the credential type a client should configure
(``ntlm``, ``windows`` or ``none``). Decisions are cached per server
authority (scheme + host + port) for the lifetime of the process.

Typical usage::

    import authprobe

    cred = authprobe.detect_supported_credential_type("https://reports.example.com/ReportServer")
    if cred is authprobe.CredentialType.WINDOWS:
        ...

    # After the server's auth configuration changed:
    authprobe.invalidate_cache("https://reports.example.com/")

Detection is fail-open: connection errors, timeouts and malformed
challenges all resolve to :attr:`CredentialType.NTLM` instead of raising.

Modules:
    detector: :class:`CredentialTypeDetector` and the module-level API.
    schemes: Challenge header parsing and the credential priority policy.
    cache: Thread-safe in-memory decision cache.
    client: Blocking and asynchronous probers built on :mod:`httpx`.
    config: XDG-aware configuration and precedence resolution.
    app: Typer application and CLI entry point.
"""

__version__ = "0.1.0"

from authprobe.cache import DecisionCache  # noqa: E402
from authprobe.detector import (  # noqa: E402
    CredentialTypeDetector,
    authority_key,
    clear_cache,
    detect_supported_credential_type,
    detect_supported_credential_type_async,
    get_detector,
    get_supported_authentication_schemes,
    get_supported_authentication_schemes_async,
    invalidate_cache,
    reset_detector,
    set_detector,
)
from authprobe.models import AuthScheme, CredentialType, ProbeConfig  # noqa: E402

__all__ = [
    "AuthScheme",
    "CredentialType",
    "CredentialTypeDetector",
    "DecisionCache",
    "ProbeConfig",
    "authority_key",
    "clear_cache",
    "detect_supported_credential_type",
    "detect_supported_credential_type_async",
    "get_detector",
    "get_supported_authentication_schemes",
    "get_supported_authentication_schemes_async",
    "invalidate_cache",
    "reset_detector",
    "set_detector",
]
