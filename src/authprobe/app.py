"""Typer application factory and CLI entry point for authprobe.

This module wires together the top-level Typer application and registers
the built-in commands (``detect``, ``schemes``, ``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs a SIGINT handler and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`authprobe.config`: Global configuration and precedence resolution.
    :mod:`authprobe.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

import typer

from authprobe import __version__
from authprobe.exit_codes import EXIT_GENERIC_FAILURE, EXIT_SUCCESS

if TYPE_CHECKING:
    from authprobe.output import OutputFormat


app = typer.Typer(
    name="authprobe",
    help="Detect the HTTP authentication scheme a server expects.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #

from authprobe.commands.config import config_app  # noqa: E402
from authprobe.commands.detect import detect_command, schemes_command  # noqa: E402

app.command("detect")(detect_command)
app.command("schemes")(schemes_command)
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"authprobe {__version__}")
        raise typer.Exit(code=EXIT_SUCCESS)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~authprobe.output.OutputManager` from
    CLI flags and, with ``--verbose``, routes library logging to stderr.
    When neither ``--json`` nor ``--plain`` is given, the ``output.format``
    setting from the global config is used.
    """
    from authprobe.output import OutputFormat, OutputManager, set_output

    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = _configured_format()

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
    )
    set_output(output)
    output.configure_logging()

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


def _configured_format() -> OutputFormat:
    """Return the output format from the global config, or ``AUTO``."""
    from authprobe.config import load_global_config
    from authprobe.exceptions import AuthProbeError
    from authprobe.output import OutputFormat

    try:
        return OutputFormat(load_global_config().output.format)
    except (AuthProbeError, ValueError):
        return OutputFormat.AUTO


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from authprobe.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point invoked by the ``authprobe`` console script.

    Unhandled :class:`~authprobe.exceptions.AuthProbeError` instances
    cause a clean exit with the error's ``exit_code``. All other exceptions
    produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app(args=argv)
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from authprobe.exceptions import AuthProbeError
        from authprobe.output import error

        if isinstance(exc, AuthProbeError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
