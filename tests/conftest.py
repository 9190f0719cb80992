"""Shared test fixtures for instakit.

Provides isolated config environments, output state management, fake
browsers and sessions backed by :class:`httpx.MockTransport`. These
fixtures are automatically discovered by pytest.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import pytest

from instakit.auth.browser import Browser, NavigationDelegate
from instakit.auth.token_store import MemoryTokenStore
from instakit.client.session import InstagramSession
from instakit.models import ClientCredentials
from instakit.output import OutputFormat, OutputManager, reset_output, set_output


CLIENT_ID = "client-123"
REDIRECT_URI = "https://example.com/callback"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. CliRunner swaps those streams during a test, so a
    fresh manager has to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME and XDG_DATA_HOME at subdirectories of
    tmp_path and clears the INSTAKIT_* variables.
    """
    monkeypatch.setattr("instakit.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["INSTAKIT_SETTINGS", "INSTAKIT_CLIENT_ID", "INSTAKIT_REDIRECT_URI"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()


# ---------------------------------------------------------------------------
# Auth doubles
# ---------------------------------------------------------------------------


class FakeBrowser(Browser):
    """Records calls and lets tests drive the delegate by hand."""

    def __init__(self) -> None:
        self.opened_url: Optional[str] = None
        self.delegate: Optional[NavigationDelegate] = None
        self.close_calls = 0
        self.cleared_domains: list[str] = []
        self.on_open: Optional[Callable[[NavigationDelegate], None]] = None

    def open(self, url: str, delegate: NavigationDelegate) -> None:
        self.opened_url = url
        self.delegate = delegate
        if self.on_open is not None:
            self.on_open(delegate)

    def close(self) -> None:
        self.close_calls += 1

    def clear_cookies(self, domain: str) -> None:
        self.cleared_domains.append(domain)


@pytest.fixture
def browser() -> FakeBrowser:
    return FakeBrowser()


@pytest.fixture
def credentials() -> ClientCredentials:
    return ClientCredentials(client_id=CLIENT_ID, redirect_uri=REDIRECT_URI)


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


@pytest.fixture
def make_session(credentials: ClientCredentials):
    """Factory for sessions backed by a mock transport and a memory store."""

    def _make(
        handler: Callable[[httpx.Request], httpx.Response],
        token: Optional[str] = "tok-1",
        **kwargs: Any,
    ) -> InstagramSession:
        kwargs.setdefault("credentials", credentials)
        kwargs.setdefault("token_store", MemoryTokenStore(token))
        return InstagramSession(transport=httpx.MockTransport(handler), **kwargs)

    return _make
