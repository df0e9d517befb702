"""Shared test fixtures for authprobe.

Provides fake servers built on :class:`httpx.MockTransport`, isolated
config directories, and automatic reset of the process-wide output manager
and detector between tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import httpx
import pytest

from authprobe.detector import reset_detector
from authprobe.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_globals_between_tests() -> None:
    """Reset the global OutputManager and default detector after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time, and the default detector carries the process-wide
    decision cache. Both would leak between tests otherwise.
    """
    yield
    reset_output()
    reset_detector()


# ---------------------------------------------------------------------------
# Fake servers
# ---------------------------------------------------------------------------


class FakeServer:
    """Programmable server behind an :class:`httpx.MockTransport`.

    Each request is answered by :attr:`handler` and recorded in
    :attr:`requests`, so tests can assert how many probes went out.
    """

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def calls(self) -> int:
        return len(self.requests)


def challenge(*values: str, status_code: int = 401) -> httpx.Response:
    """Build a response carrying one ``WWW-Authenticate`` header per value."""
    return httpx.Response(
        status_code,
        headers=[("WWW-Authenticate", v) for v in values],
    )


@pytest.fixture
def make_server() -> Callable[..., FakeServer]:
    """Factory for :class:`FakeServer` instances.

    Accepts either a handler function or a fixed :class:`httpx.Response`.
    """

    def _make(
        handler: Optional[Callable[[httpx.Request], httpx.Response]] = None,
        response: Optional[httpx.Response] = None,
    ) -> FakeServer:
        if handler is not None:
            return FakeServer(handler)

        fixed = response if response is not None else challenge("NTLM")

        def _replay(request: httpx.Request) -> httpx.Response:
            # Fresh response per request; httpx binds a response to one request.
            return httpx.Response(fixed.status_code, headers=fixed.headers.multi_items())

        return FakeServer(_replay)

    return _make


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME and XDG_DATA_HOME at subdirectories of tmp_path,
    forces the XDG layout, and clears AUTHPROBE_* environment variables.
    """
    monkeypatch.setattr("authprobe.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["AUTHPROBE_TIMEOUT", "AUTHPROBE_VERIFY_SSL"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN-format output manager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
