"""Exception hierarchy for authprobe.

All exceptions inherit from :class:`AuthProbeError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`authprobe.exit_codes`.
The top-level error handler in :func:`authprobe.app.main` catches
``AuthProbeError`` and exits with the appropriate code.

None of these are raised by the detection functions: a failed probe is
absorbed into the fallback credential type. They cover the configuration
layer and the CLI only.

Subclass hierarchy::

    AuthProbeError (exit 1)
    +-- ConfigError         (exit 1)
"""

from authprobe.exit_codes import EXIT_GENERIC_FAILURE


class AuthProbeError(Exception):
    """Base exception for all authprobe errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(AuthProbeError):
    """Raised for configuration problems (invalid JSON, bad environment values)."""

    exit_code = EXIT_GENERIC_FAILURE
