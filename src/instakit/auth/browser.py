"""Browser abstraction used by the login flow.

A :class:`Browser` shows the provider's login pages and reports what it is
about to do to a :class:`NavigationDelegate` (in practice the
:class:`~instakit.auth.login_flow.LoginFlow`):

- every navigation attempt goes through
  :meth:`NavigationDelegate.on_navigation_attempt`, and the browser must
  not load a URL for which the delegate answers
  :attr:`NavigationDecision.CANCEL`;
- HTTP statuses of loaded pages go through
  :meth:`NavigationDelegate.on_http_status`;
- a user-initiated close calls :meth:`NavigationDelegate.on_dismiss`;
- a failure inside the browser itself calls
  :meth:`NavigationDelegate.on_error`.

Embedded web views (Qt, pywebview, a test double) implement this
interface directly. :class:`SystemBrowser` covers terminals: it opens the
user's default browser and has the user paste back the URL they were
redirected to.
"""

from __future__ import annotations

import enum
import sys
import threading
import webbrowser
from abc import ABC, abstractmethod
from typing import Callable, Optional, Protocol

import typer

from instakit.exceptions import InstakitError, InvalidUsageError
from instakit.output import debug, info, warning


class NavigationDecision(str, enum.Enum):
    """Answer given to the browser for a pending navigation."""

    ALLOW = "allow"
    CANCEL = "cancel"


class NavigationDelegate(Protocol):
    def on_navigation_attempt(self, url: str) -> NavigationDecision: ...

    def on_http_status(self, status: int) -> NavigationDecision: ...

    def on_dismiss(self) -> None: ...

    def on_error(self, error: InstakitError) -> None: ...


class Browser(ABC):
    """A browser component that can host the authorization pages."""

    @abstractmethod
    def open(self, url: str, delegate: NavigationDelegate) -> None:
        """Start loading *url* and report navigation events to *delegate*.

        Must return without waiting for the user.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Dismiss the browser. Must not call ``delegate.on_dismiss``."""
        ...

    def clear_cookies(self, domain: str) -> None:
        """Remove cookies whose domain contains *domain*. No-op by default."""


PROMPT_TEXT = "Paste the URL you were redirected to (leave empty to cancel)"


def _default_prompt(text: str) -> str:
    return typer.prompt(text, default="", show_default=False)


class SystemBrowser(Browser):
    """Login through the user's default web browser.

    The system browser cannot be intercepted, so the user completes the
    login there and pastes the final URL (the redirect URI with the token
    in its fragment) back into the terminal. Each pasted URL is treated as
    a navigation attempt; an empty answer dismisses the login.

    Args:
        open_url: Callable that opens a URL. Defaults to
            :func:`webbrowser.open`.
        prompt: Callable that asks the user a question and returns the
            answer. Defaults to :func:`typer.prompt`.
        require_tty: Refuse to start when stdin is not a terminal.
    """

    def __init__(
        self,
        open_url: Callable[[str], object] = webbrowser.open,
        prompt: Optional[Callable[[str], str]] = None,
        require_tty: bool = True,
    ) -> None:
        self._open_url = open_url
        self._prompt = prompt or _default_prompt
        self._require_tty = require_tty
        self._closed = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def open(self, url: str, delegate: NavigationDelegate) -> None:
        """Open *url* and start the paste-back prompt in a daemon thread.

        Raises:
            InvalidUsageError: If a TTY is required and stdin is not one.
        """
        if self._require_tty and not sys.stdin.isatty():
            raise InvalidUsageError(
                "Browser login requires an interactive terminal (stdin must be a TTY)"
            )
        self._closed.clear()
        self._thread = threading.Thread(
            target=self._interact, args=(url, delegate), daemon=True
        )
        self._thread.start()

    def close(self) -> None:
        self._closed.set()

    def clear_cookies(self, domain: str) -> None:
        debug(f"Cookies for '{domain}' live in the system browser and were left untouched")

    def _interact(self, url: str, delegate: NavigationDelegate) -> None:
        try:
            self._paste_back(url, delegate)
        except Exception as exc:
            debug(f"Browser login aborted: {exc!r}")
            delegate.on_error(InstakitError(f"Browser login failed: {exc}"))

    def _paste_back(self, url: str, delegate: NavigationDelegate) -> None:
        info("Opening the Instagram login page in your browser.")
        info(f"If nothing opens, visit: {url}")
        self._open_url(url)
        while not self._closed.is_set():
            try:
                answer = self._prompt(PROMPT_TEXT).strip()
            except (typer.Abort, EOFError):
                answer = ""
            if not answer:
                delegate.on_dismiss()
                return
            if delegate.on_navigation_attempt(answer) is NavigationDecision.CANCEL:
                return
            warning("That URL does not contain an access token. Try again.")
