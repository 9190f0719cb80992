"""Authenticated Instagram session.

:class:`InstagramSession` is the explicit context object of the SDK. It is
built once at startup from the client credentials and a
:class:`~instakit.auth.token_store.TokenStore`, then passed to whatever
needs to talk to the API. It owns an :class:`httpx.AsyncClient` and must be
closed (or used as an async context manager).

Every operation that can fail returns a :class:`~instakit.result.Result`
instead of raising. Network I/O runs on the event loop through httpx and
JSON decoding runs in a worker thread; the result is returned to the
awaiting caller, so it is always observed on the caller's loop.

Example::

    async with InstagramSession.from_settings(load_settings()) as session:
        login = await session.login(SystemBrowser(), scopes=[Scope.BASIC])
        me = await session.request("/users/self", response_model=User)
"""

from __future__ import annotations

import asyncio
import enum
from typing import Any, Iterable, Mapping, Optional, TypeVar

import httpx
from pydantic import ValidationError

from instakit.auth.browser import Browser
from instakit.auth.login_flow import AUTH_URL, LoginFlow, build_authorization_url
from instakit.auth.token_store import FileTokenStore, TokenStore
from instakit.exceptions import (
    ConnectionError_,
    InstakitError,
    InvalidRequestError,
    InvalidUsageError,
    ParseError,
    StorageError,
)
from instakit.models import ClientCredentials, Envelope, Scope, Settings
from instakit.output import debug
from instakit.result import Result

T = TypeVar("T")

BASE_URL = "https://api.instagram.com/v1"


class HTTPMethod(str, enum.Enum):
    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"


class InstagramSession:
    """Credentials, token storage and HTTP plumbing for one user.

    Args:
        credentials: The application's client id and redirect URI.
        token_store: Where the access token lives.
        base_url: REST base URL; endpoints are appended to it verbatim.
        auth_url: Authorization endpoint used by :meth:`login`.
        clear_cookies: Ask the login browser to clear the provider's
            cookies after a successful login.
        timeout: HTTP timeout in seconds.
        transport: Optional httpx transport, mainly for tests.
    """

    def __init__(
        self,
        credentials: ClientCredentials,
        token_store: TokenStore,
        base_url: str = BASE_URL,
        auth_url: str = AUTH_URL,
        clear_cookies: bool = False,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._credentials = credentials
        self._token_store = token_store
        self._base_url = base_url
        self._auth_url = auth_url
        self._clear_cookies = clear_cookies
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        token_store: Optional[TokenStore] = None,
        **kwargs: Any,
    ) -> InstagramSession:
        """Build a session from loaded settings, defaulting to a :class:`FileTokenStore`."""
        return cls(
            credentials=settings.credentials,
            token_store=token_store if token_store is not None else FileTokenStore(),
            clear_cookies=settings.clear_cookies,
            timeout=settings.timeout,
            **kwargs,
        )

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> InstagramSession:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def credentials(self) -> ClientCredentials:
        return self._credentials

    @property
    def token_store(self) -> TokenStore:
        return self._token_store

    # ------------------------------------------------------------------ #
    # Authentication
    # ------------------------------------------------------------------ #

    async def login(
        self,
        browser: Browser,
        scopes: Iterable[Scope] = (Scope.BASIC,),
    ) -> Result[str]:
        """Run the implicit-flow login in *browser* and store the token.

        Returns:
            A success carrying the new access token, or a failure with
            :class:`~instakit.exceptions.MissingConfigurationError`,
            :class:`~instakit.exceptions.InvalidRequestError`,
            :class:`~instakit.exceptions.LoginCancelledError` or
            :class:`~instakit.exceptions.StorageError`. The browser has
            been closed by the time the result is returned.
        """
        try:
            request = build_authorization_url(self._credentials, scopes, self._auth_url)
        except InstakitError as exc:
            return Result.failure(exc)

        flow = LoginFlow(request, browser, clear_cookies=self._clear_cookies)
        outcome = await flow.run()
        if not outcome.ok:
            return outcome

        token = outcome.unwrap()
        if not self._token_store.set(token):
            code = self._token_store.last_result_code
            return Result.failure(
                StorageError(f"Error storing access token (code {code})", code=code)
            )
        debug("Access token stored")
        return Result.success(token)

    def logout(self) -> bool:
        """Delete the stored token. Returns whether deletion succeeded."""
        return self._token_store.delete()

    @property
    def is_authenticated(self) -> bool:
        return self._token_store.get() is not None

    @property
    def access_token(self) -> Optional[str]:
        return self._token_store.get()

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    def build_url(
        self,
        endpoint: str,
        parameters: Optional[Mapping[str, Any]] = None,
    ) -> httpx.URL:
        """Return ``base_url + endpoint`` with the token and *parameters* as query.

        ``access_token`` always comes first and is sent empty when no token
        is stored. Parameter values are converted with :class:`str`.
        """
        params: list[tuple[str, str]] = [("access_token", self.access_token or "")]
        for key, value in (parameters or {}).items():
            params.append((key, f"{value}"))
        return httpx.URL(self._base_url + endpoint, params=params)

    async def request(
        self,
        endpoint: str,
        method: HTTPMethod | str = HTTPMethod.GET,
        parameters: Optional[Mapping[str, Any]] = None,
        response_model: Any = Any,
    ) -> Result[Any]:
        """Call *endpoint* and decode its envelope.

        Args:
            endpoint: Path appended to the base URL, e.g. ``"/users/self"``.
            method: ``GET``, ``POST`` or ``DELETE``, in any case.
            parameters: Extra query parameters.
            response_model: Type of the envelope's ``data`` member.

        Returns:
            A success carrying ``envelope.data`` (``None`` when the
            endpoint returns no data), or a failure with
            :class:`~instakit.exceptions.InvalidRequestError` (the envelope
            carries an error message), :class:`~instakit.exceptions.ParseError`
            (the body does not decode),
            :class:`~instakit.exceptions.ConnectionError_` (transport failure) or
            :class:`~instakit.exceptions.InvalidUsageError` (unsupported method).
        """
        try:
            method = HTTPMethod(method.upper())
        except ValueError:
            return Result.failure(InvalidUsageError(f"Unsupported HTTP method '{method}'"))
        url = self.build_url(endpoint, parameters)
        debug(f"{method.value} {endpoint}")

        try:
            response = await self._client.request(method.value, url)
        except httpx.HTTPError as exc:
            return Result.failure(ConnectionError_(f"Request to {endpoint} failed: {exc}"))

        debug(f"HTTP {response.status_code} {endpoint}")
        return await asyncio.to_thread(_decode, response.content, response_model)


def _decode(body: bytes, response_model: Any) -> Result[Any]:
    """Decode *body* as ``Envelope[response_model]`` and map it to a result."""
    try:
        envelope = Envelope[response_model].model_validate_json(body)
    except ValidationError as exc:
        return Result.failure(ParseError(f"Could not decode response: {exc}"))

    meta = envelope.meta
    if meta.error_message is not None:
        return Result.failure(
            InvalidRequestError(meta.error_message, error_type=meta.error_type, code=meta.code)
        )
    return Result.success(envelope.data)
