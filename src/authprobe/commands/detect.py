"""Detect commands -- probe servers from the command line.

``authprobe detect`` prints the credential type chosen for each URI, and
optionally the raw schemes the server advertised. ``authprobe schemes``
prints the raw schemes only. Both commands go through the process-wide
detector from :mod:`authprobe.detector`, so repeated URIs on the same
authority within one invocation are probed once.

Example::

    authprobe detect https://reports.example.com/ReportServer
    authprobe detect http://a.local http://b.local:8080 --schemes --json
    authprobe schemes https://reports.example.com/ --timeout 5
"""

from __future__ import annotations

from typing import List, Optional

import typer

from authprobe.models import ProbeConfig
from authprobe.output import debug, error, print_records


def _build_detector(config: ProbeConfig):
    """Create the detector used by the commands for *config*."""
    from authprobe.detector import CredentialTypeDetector

    return CredentialTypeDetector(config)


def _install_detector(timeout: Optional[float], insecure: bool) -> None:
    """Resolve probe settings and install a fresh process-wide detector."""
    from authprobe.config import resolve_probe_config
    from authprobe.detector import set_detector
    from authprobe.exceptions import AuthProbeError

    try:
        config = resolve_probe_config(
            cli_timeout=timeout,
            cli_verify_ssl=False if insecure else None,
        )
    except AuthProbeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    debug(f"Probe settings: timeout={config.timeout}s verify_ssl={config.verify_ssl}")
    set_detector(_build_detector(config))


def detect_command(
    uris: List[str] = typer.Argument(help="Server URIs to probe."),
    schemes: bool = typer.Option(
        False, "--schemes", "-s", help="Also show the raw advertised schemes."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", help="Probe timeout in seconds."
    ),
    insecure: bool = typer.Option(
        False, "--insecure", "-k", help="Skip SSL certificate verification."
    ),
) -> None:
    """Detect the credential type each server expects.

    Prints one row per URI with the URI, its authority key and the
    credential type (``ntlm``, ``windows`` or ``none``). Unreachable
    servers are reported as ``ntlm``, the fallback.

    Args:
        uris: One or more URIs to probe.
        schemes: Add a ``schemes`` column. Every URI is then probed once,
            even when its authority is already cached.
        timeout: Override the configured probe timeout.
        insecure: Disable SSL certificate verification.
    """
    from authprobe.detector import authority_key, get_detector

    _install_detector(timeout, insecure)

    records: list[dict[str, str]] = []
    detector = get_detector()
    for uri in uris:
        record = {"uri": uri, "authority": authority_key(uri)}
        if schemes:
            credential_type, advertised = detector.detect_with_schemes(uri)
            record["credential_type"] = credential_type.value
            record["schemes"] = advertised.describe()
        else:
            record["credential_type"] = detector.detect_supported_credential_type(uri).value
        records.append(record)

    print_records(records, title="Authentication")


def schemes_command(
    uri: str = typer.Argument(help="Server URI to probe."),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", help="Probe timeout in seconds."
    ),
    insecure: bool = typer.Option(
        False, "--insecure", "-k", help="Skip SSL certificate verification."
    ),
) -> None:
    """Show the authentication schemes a server advertises.

    The result is never cached and is ``NTLM`` when the server sends no
    usable challenge.
    """
    from authprobe.detector import authority_key, get_supported_authentication_schemes

    _install_detector(timeout, insecure)

    detected = get_supported_authentication_schemes(uri)
    print_records(
        [
            {
                "authority": authority_key(uri),
                "schemes": detected.describe(),
                "value": str(int(detected)),
            }
        ],
        title="Advertised schemes",
    )
