"""OAuth2 implicit-flow login driven through an injected browser.

The provider returns the access token directly in the redirect URL's
fragment (``<redirect_uri>#access_token=...``). :class:`LoginFlow` opens a
:class:`~instakit.auth.browser.Browser` on the authorization URL and acts
as its navigation delegate: every navigation the browser is about to
perform is offered to :meth:`LoginFlow.on_navigation_attempt`, which
cancels the one carrying the token so the token URL is never loaded.

State machine::

    idle --start()--> loading --+--> succeeded   (token seen in a navigation)
                                +--> failed      (HTTP 400, or the browser itself failed)
                                +--> cancelled   (user dismissed the browser)

Terminal states close the browser and resolve exactly one outcome. Events
arriving after that are ignored. A flow object serves a single attempt.

See Also:
    :meth:`instakit.client.session.InstagramSession.login`, which builds
    the request, runs the flow and persists the token.
"""

from __future__ import annotations

import asyncio
import enum
import threading
from typing import Iterable, Optional
from urllib.parse import urlencode

from instakit.auth.browser import Browser, NavigationDecision
from instakit.exceptions import (
    InstakitError,
    InvalidRequestError,
    InvalidUsageError,
    LoginCancelledError,
    MissingConfigurationError,
)
from instakit.models import AuthorizationRequest, ClientCredentials, Scope
from instakit.output import debug
from instakit.result import Result

AUTH_URL = "https://api.instagram.com/oauth/authorize"
ACCESS_TOKEN_MARKER = "#access_token="
SCOPE_DELIMITER = "+"
PROVIDER_COOKIE_DOMAIN = "instagram"


class LoginState(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATES = frozenset({LoginState.SUCCEEDED, LoginState.FAILED, LoginState.CANCELLED})


def build_authorization_url(
    credentials: ClientCredentials,
    scopes: Iterable[Scope] = (Scope.BASIC,),
    auth_url: str = AUTH_URL,
) -> AuthorizationRequest:
    """Build the authorization request for one login attempt.

    The scope values are joined with ``+``, which the provider expects
    verbatim, so the ``scope`` parameter is appended without re-encoding
    the delimiter.

    Raises:
        MissingConfigurationError: If the client id or redirect URI is unset.
    """
    if not credentials.is_configured:
        raise MissingConfigurationError(
            "Client id and redirect URI must be configured before logging in"
        )
    scope_list = [Scope(s) for s in scopes]
    query = urlencode(
        {
            "client_id": credentials.client_id,
            "redirect_uri": credentials.redirect_uri,
            "response_type": "token",
        }
    )
    scope_value = SCOPE_DELIMITER.join(s.value for s in scope_list)
    return AuthorizationRequest(
        auth_url=f"{auth_url}?{query}&scope={scope_value}",
        scopes=scope_list,
    )


def extract_access_token(url: str) -> Optional[str]:
    """Return everything after the first ``#access_token=`` marker in *url*.

    The tail runs to the end of the string; it is not cut at ``&`` or any
    other fragment delimiter, so trailing fragment parameters end up in
    the returned value.
    """
    index = url.find(ACCESS_TOKEN_MARKER)
    if index < 0:
        return None
    return url[index + len(ACCESS_TOKEN_MARKER):]


class LoginFlow:
    """Interception state machine for a single login attempt.

    Browser callbacks (:meth:`on_navigation_attempt`, :meth:`on_http_status`,
    :meth:`on_dismiss`) may be invoked from any thread. The decision is
    returned synchronously; the outcome is handed to the event loop that
    called :meth:`start`, so the awaiting caller always resumes there.

    Args:
        request: The authorization request to open.
        browser: The browser that displays the provider's pages.
        clear_cookies: Ask the browser to drop the provider's cookies once
            a token has been received.
    """

    def __init__(
        self,
        request: AuthorizationRequest,
        browser: Browser,
        clear_cookies: bool = False,
    ) -> None:
        self._request = request
        self._browser = browser
        self._clear_cookies = clear_cookies
        self._state = LoginState.IDLE
        self._lock = threading.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._future: Optional[asyncio.Future[Result[str]]] = None

    @property
    def state(self) -> LoginState:
        return self._state

    @property
    def request(self) -> AuthorizationRequest:
        return self._request

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def start(self) -> asyncio.Future[Result[str]]:
        """Open the browser on the authorization URL.

        Must be called from a running event loop.

        Returns:
            A future resolved with the attempt's :class:`~instakit.result.Result`.

        Raises:
            InvalidUsageError: If this flow has already been started.
        """
        with self._lock:
            if self._state is not LoginState.IDLE:
                raise InvalidUsageError("A login flow can only be started once")
            self._loop = asyncio.get_running_loop()
            self._future = self._loop.create_future()
            self._state = LoginState.LOADING
        debug(f"Login flow loading {self._request.auth_url}")
        try:
            self._browser.open(self._request.auth_url, self)
        except InstakitError as exc:
            self._transition(LoginState.FAILED, Result.failure(exc))
        return self._future

    async def run(self) -> Result[str]:
        """Start the flow and wait for its outcome."""
        return await self.start()

    # ------------------------------------------------------------------ #
    # Navigation delegate
    # ------------------------------------------------------------------ #

    def on_navigation_attempt(self, url: str) -> NavigationDecision:
        """Decide whether the browser may load *url*.

        A URL carrying the access-token marker is cancelled and completes
        the flow successfully. Anything else is allowed while loading.
        """
        if self._state in TERMINAL_STATES:
            return NavigationDecision.CANCEL
        token = extract_access_token(url)
        if token is None:
            return NavigationDecision.ALLOW
        self._transition(LoginState.SUCCEEDED, Result.success(token))
        return NavigationDecision.CANCEL

    def on_http_status(self, status: int) -> NavigationDecision:
        """Inspect an HTTP response received by the browser."""
        if self._state in TERMINAL_STATES:
            return NavigationDecision.CANCEL
        if status == 400:
            error = InvalidRequestError("Invalid request", code=status)
            self._transition(LoginState.FAILED, Result.failure(error))
            return NavigationDecision.CANCEL
        return NavigationDecision.ALLOW

    def on_dismiss(self) -> None:
        """The user closed the browser."""
        self._transition(LoginState.CANCELLED, Result.failure(LoginCancelledError("Cancelled")))

    def on_error(self, error: InstakitError) -> None:
        """The browser failed before the login could finish."""
        self._transition(LoginState.FAILED, Result.failure(error))

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _transition(self, state: LoginState, outcome: Result[str]) -> None:
        with self._lock:
            if self._state is not LoginState.LOADING:
                return
            self._state = state
        debug(f"Login flow {state.value}")
        assert self._loop is not None
        self._loop.call_soon_threadsafe(self._complete, outcome)

    def _complete(self, outcome: Result[str]) -> None:
        if self._clear_cookies and outcome.ok:
            self._browser.clear_cookies(PROVIDER_COOKIE_DOMAIN)
        self._browser.close()
        assert self._future is not None
        if not self._future.done():
            self._future.set_result(outcome)
