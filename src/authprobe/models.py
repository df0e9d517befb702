"""Canonical models shared across all authprobe modules.

The models fall into two groups:

**Detection types** -- the vocabulary of the probe:
    :class:`AuthScheme` (flags advertised by the server) and
    :class:`CredentialType` (the single decision handed to callers).

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`ProbeConfig`, :class:`OutputConfig` and :class:`GlobalConfig`.

Configuration models use Pydantic v2.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field

from authprobe import __version__


# --- Detection types ---


class AuthScheme(enum.IntFlag):
    """Authentication schemes a server may advertise in its challenge.

    Members combine bitwise because a server can offer several schemes,
    either in one ``WWW-Authenticate`` header or across several of them.
    The numeric values match the ``System.Net.AuthenticationSchemes`` flags
    so results can be exchanged with .NET tooling.

    ``NONE`` is never returned from a detection; an empty set is
    normalised to ``NTLM`` by :func:`~authprobe.schemes.parse_challenge`.
    """

    NONE = 0
    NEGOTIATE = 1
    NTLM = 2
    ANONYMOUS = 32768

    def describe(self) -> str:
        """Return the set flag names joined with ``|`` (``"NONE"`` when empty)."""
        names = [member.name for member in AuthScheme if member and member in self]
        return "|".join(names) if names else "NONE"


class CredentialType(str, enum.Enum):
    """Client credential configuration chosen for a server.

    ``WINDOWS`` means Kerberos via Negotiate. ``NONE`` is part of the closed
    set understood by callers although the current priority policy never
    selects it.
    """

    NONE = "none"
    WINDOWS = "windows"
    NTLM = "ntlm"


# --- Configuration ---


class ProbeConfig(BaseModel):
    """HTTP settings for the unauthenticated probe request."""

    timeout: float = Field(
        default=30.0, gt=0, description="Probe timeout in seconds"
    )
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    user_agent: str = Field(
        default=f"authprobe/{__version__}",
        description="User-Agent header sent with the probe",
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/authprobe/config.json``.

    Loaded and saved by :func:`~authprobe.config.load_global_config` and
    :func:`~authprobe.config.save_global_config`. See
    :func:`~authprobe.config.resolve_probe_config` for how environment
    variables and CLI flags override these values.
    """

    probe: ProbeConfig = Field(default_factory=ProbeConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
