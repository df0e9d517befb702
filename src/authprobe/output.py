"""Output formatting system with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- primary data only: detection records and settings.
* **stderr** -- all diagnostics (status, errors, debug lines).
* **TTY detection** -- Rich tables when stdout is an interactive terminal,
  tab-separated text when piped to another process.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` CLI flag.

Two shapes of data reach stdout:

* records (:meth:`OutputManager.print_records`) -- one row per probed URI,
  all rows sharing the same keys. ``--json`` gives an array of objects.
* settings (:meth:`OutputManager.print_settings`) -- the nested global
  config. Plain and Rich output flatten it to the dotted keys accepted by
  ``authprobe config set``; ``--json`` keeps the nesting.

Module-level functions (:func:`info`, :func:`error`, ...) delegate to the
global ``OutputManager`` created in :func:`~authprobe.app.main_callback`.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table


class OutputFormat(str, Enum):
    """Enumeration of supported output formats.

    ``AUTO`` resolves to ``RICH`` when stdout is an interactive TTY and colour
    is not disabled, or to ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Central manager for all CLI output with stdout/stderr discipline.

    Args:
        format: Desired output format. ``AUTO`` resolves based on TTY
            detection.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress informational and success messages on stderr.
        verbose: Show debug messages and route ``authprobe`` logging to stderr.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            self._format = (
                OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
            )
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
        )

    @property
    def format(self) -> OutputFormat:
        """The resolved output format."""
        return self._format

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def print_records(
        self, records: list[dict[str, str]], title: Optional[str] = None
    ) -> None:
        """Print one row per record. Columns follow the first record's keys.

        * **Rich mode** -- styled :class:`~rich.table.Table` under *title*.
        * **JSON mode** -- the records as an array of objects.
        * **Plain mode** -- a header line, then tab-separated values.
        """
        if self._format == OutputFormat.JSON:
            self._write(json.dumps(records, indent=2, ensure_ascii=False))
            return

        columns = list(records[0]) if records else []
        if self._format == OutputFormat.PLAIN:
            if columns:
                self._write("\t".join(columns))
            for record in records:
                self._write("\t".join(record[c] for c in columns))
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        for column in columns:
            table.add_column(column)
        for record in records:
            table.add_row(*(record[c] for c in columns))
        self._stdout.print(table)

    def print_settings(self, settings: dict[str, Any], title: Optional[str] = None) -> None:
        """Print nested *settings*, flattened to dotted keys outside JSON mode.

        Non-string values are shown in their JSON spelling (``true``,
        ``30.0``), which is also what ``config set`` accepts back.
        """
        if self._format == OutputFormat.JSON:
            self._write(json.dumps(settings, indent=2, ensure_ascii=False))
            return

        pairs = [(key, _setting_text(value)) for key, value in _flatten(settings)]
        if self._format == OutputFormat.PLAIN:
            for key, text in pairs:
                self._write(f"{key}\t{text}")
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("key")
        table.add_column("value")
        for key, text in pairs:
            table.add_row(key, text)
        self._stdout.print(table)

    def _write(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Print an informational message to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._diagnostic(message, message)

    def success(self, message: str) -> None:
        """Print a green success message to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._diagnostic(message, f"[green]{message}[/green]")

    def error(self, message: str) -> None:
        """Print a bold-red error to stderr. Never suppressed."""
        self._diagnostic(f"Error: {message}", f"[bold red]Error:[/bold red] {message}")

    def debug(self, message: str) -> None:
        """Print a debug line to stderr, only under ``--verbose``."""
        if self._verbose:
            self._diagnostic(f"[debug] {message}", f"[dim]\\[debug] {message}[/dim]")

    def _diagnostic(self, plain: str, markup: str) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup)

    def configure_logging(self) -> None:
        """Route ``authprobe`` library logging to stderr when verbose.

        Installs a :class:`~rich.logging.RichHandler` on the ``authprobe``
        logger at DEBUG level, replacing one installed by an earlier call.
        Probe failures, cache hits and parsed challenges are logged there.
        Does nothing unless ``--verbose`` is active.
        """
        if not self._verbose:
            return
        logger = logging.getLogger("authprobe")
        for handler in list(logger.handlers):
            if isinstance(handler, RichHandler):
                logger.removeHandler(handler)
        logger.addHandler(
            RichHandler(console=self._stderr, show_path=False, markup=False)
        )
        logger.setLevel(logging.DEBUG)


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    """Check if stdout is a TTY."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


def _flatten(data: dict[str, Any], prefix: str = "") -> list[tuple[str, Any]]:
    pairs: list[tuple[str, Any]] = []
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            pairs.extend(_flatten(value, f"{dotted}."))
        else:
            pairs.append((dotted, value))
    return pairs


def _setting_text(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value)


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance."""
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Convenience functions that use the global instance
# ------------------------------------------------------------------ #


def print_records(records: list[dict[str, str]], title: Optional[str] = None) -> None:
    get_output().print_records(records, title)


def print_settings(settings: dict[str, Any], title: Optional[str] = None) -> None:
    get_output().print_settings(settings, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
