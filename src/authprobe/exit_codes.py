"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~authprobe.exceptions.AuthProbeError` subclass.
Detection itself never fails, so these codes only describe problems with
the command line or the configuration files.

Example::

    $ authprobe config set probe.timeout abc
    $ echo $?
    2   # EXIT_INVALID_USAGE -- the value could not be coerced
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""
