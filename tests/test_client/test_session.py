"""Tests for InstagramSession: URL building, envelope decoding and login."""

from __future__ import annotations

import asyncio
import errno
import json
from typing import Any

import httpx
import pytest

from instakit.auth.token_store import FileTokenStore, MemoryTokenStore
from instakit.client.session import BASE_URL, HTTPMethod, InstagramSession
from instakit.exceptions import (
    ConnectionError_,
    ErrorKind,
    InvalidRequestError,
    InvalidUsageError,
    LoginCancelledError,
    MissingConfigurationError,
    ParseError,
    StorageError,
)
from instakit.models import ClientCredentials, Scope, Settings, User

TOKEN_URL = "https://example.com/callback#access_token=NEWTOKEN"


def _respond(body: Any, seen: list | None = None, status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        content = body if isinstance(body, bytes) else json.dumps(body).encode()
        return httpx.Response(status, content=content)

    return handler


def _call(session: InstagramSession, *args: Any, **kwargs: Any):
    async def scenario():
        async with session:
            return await session.request(*args, **kwargs)

    return asyncio.run(scenario())


USER = {"id": "1", "username": "jane", "full_name": "Jane Doe", "counts": {"media": 3}}


class TestBuildUrl:
    def test_token_first(self, make_session) -> None:
        session = make_session(_respond({}))
        url = session.build_url("/users/self")
        assert str(url) == f"{BASE_URL}/users/self?access_token=tok-1"

    def test_empty_token_when_logged_out(self, make_session) -> None:
        session = make_session(_respond({}), token=None)
        url = session.build_url("/users/self")
        assert url.params.get("access_token") == ""
        assert str(url).endswith("/users/self?access_token=")

    def test_parameters_are_stringified(self, make_session) -> None:
        session = make_session(_respond({}))
        url = session.build_url("/locations/search", {"lat": 48.85, "distance": 500})
        assert list(url.params.multi_items()) == [
            ("access_token", "tok-1"),
            ("lat", "48.85"),
            ("distance", "500"),
        ]

    def test_custom_base_url(self, make_session) -> None:
        session = make_session(_respond({}), base_url="https://api.test/v1")
        assert str(session.build_url("/media/1")).startswith("https://api.test/v1/media/1?")


class TestRequest:
    def test_success_returns_data(self, make_session) -> None:
        seen: list[httpx.Request] = []
        session = make_session(_respond({"data": USER, "meta": {"code": 200}}, seen))

        result = _call(session, "/users/self", response_model=User)

        assert result.ok
        assert isinstance(result.value, User)
        assert result.value.username == "jane"
        assert result.value.counts.media == 3
        assert seen[0].method == "GET"
        assert seen[0].url.params["access_token"] == "tok-1"

    def test_untyped_data(self, make_session) -> None:
        session = make_session(_respond({"data": [{"id": "1"}], "meta": {"code": 200}}))
        assert _call(session, "/users/self/follows").value == [{"id": "1"}]

    def test_no_data_is_success(self, make_session) -> None:
        session = make_session(_respond({"meta": {"code": 200}}))
        result = _call(session, "/media/1/likes", HTTPMethod.POST)
        assert result.ok
        assert result.value is None

    @pytest.mark.parametrize("method", ["GET", "POST", "DELETE"])
    def test_method(self, make_session, method) -> None:
        seen: list[httpx.Request] = []
        session = make_session(_respond({"meta": {"code": 200}}, seen))
        _call(session, "/media/1/likes", method)
        assert seen[0].method == method

    def test_parameters_sent(self, make_session) -> None:
        seen: list[httpx.Request] = []
        session = make_session(_respond({"data": [], "meta": {"code": 200}}, seen))
        _call(session, "/users/self/media/recent", parameters={"count": 5})
        assert seen[0].url.params["count"] == "5"

    def test_error_message_wins_over_data(self, make_session) -> None:
        body = {
            "data": USER,
            "meta": {
                "code": 400,
                "error_type": "OAuthAccessTokenException",
                "error_message": "The access_token provided is invalid.",
            },
        }
        session = make_session(_respond(body, status=400))

        result = _call(session, "/users/self", response_model=User)

        assert not result.ok
        assert isinstance(result.error, InvalidRequestError)
        assert result.error.kind is ErrorKind.INVALID_REQUEST
        assert str(result.error) == "The access_token provided is invalid."
        assert result.error.error_type == "OAuthAccessTokenException"
        assert result.error.code == 400

    def test_http_error_status_with_valid_envelope_succeeds(self, make_session) -> None:
        session = make_session(_respond({"data": USER, "meta": {"code": 200}}, status=500))
        assert _call(session, "/users/self", response_model=User).ok

    @pytest.mark.parametrize(
        "body",
        [b"", b"<html>oops</html>", b'{"data": {}}', b"[1, 2, 3]"],
    )
    def test_malformed_body_is_parse_error(self, make_session, body) -> None:
        session = make_session(_respond(body))
        result = _call(session, "/users/self")
        assert isinstance(result.error, ParseError)

    def test_data_not_matching_model_is_parse_error(self, make_session) -> None:
        session = make_session(_respond({"data": {"username": "x"}, "meta": {"code": 200}}))
        result = _call(session, "/users/self", response_model=User)
        assert isinstance(result.error, ParseError)

    def test_transport_error(self, make_session) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        result = _call(make_session(handler), "/users/self")

        assert isinstance(result.error, ConnectionError_)
        assert "/users/self" in str(result.error)

    def test_logged_out_request_still_sent(self, make_session) -> None:
        seen: list[httpx.Request] = []
        body = {"meta": {"code": 400, "error_message": "Missing token"}}
        session = make_session(_respond(body, seen, status=400), token=None)

        result = _call(session, "/users/self")

        assert seen[0].url.params["access_token"] == ""
        assert isinstance(result.error, InvalidRequestError)


class FailingStore(MemoryTokenStore):
    def set(self, token: str) -> bool:
        self.last_result_code = errno.EACCES
        return False


def _login(session: InstagramSession, browser, scopes=(Scope.BASIC,)):
    async def scenario():
        async with session:
            return await session.login(browser, scopes)

    return asyncio.run(scenario())


class TestLogin:
    def test_stores_token(self, make_session, browser) -> None:
        session = make_session(_respond({}), token=None)
        browser.on_open = lambda d: d.on_navigation_attempt(TOKEN_URL)

        result = _login(session, browser, [Scope.BASIC, Scope.COMMENTS])

        assert result.value == "NEWTOKEN"
        assert session.is_authenticated
        assert session.access_token == "NEWTOKEN"
        assert browser.opened_url.endswith("&scope=basic+comments")

    def test_replaces_previous_token(self, make_session, browser) -> None:
        session = make_session(_respond({}), token="old")
        browser.on_open = lambda d: d.on_navigation_attempt(TOKEN_URL)
        _login(session, browser)
        assert session.access_token == "NEWTOKEN"

    def test_missing_configuration(self, make_session, browser) -> None:
        session = make_session(_respond({}), credentials=ClientCredentials(client_id="abc"))

        result = _login(session, browser)

        assert isinstance(result.error, MissingConfigurationError)
        assert browser.opened_url is None

    def test_cancelled_keeps_existing_token(self, make_session, browser) -> None:
        session = make_session(_respond({}), token="old")
        browser.on_open = lambda d: d.on_dismiss()

        result = _login(session, browser)

        assert isinstance(result.error, LoginCancelledError)
        assert session.access_token == "old"

    def test_invalid_request(self, make_session, browser) -> None:
        session = make_session(_respond({}), token=None)
        browser.on_open = lambda d: d.on_http_status(400)

        result = _login(session, browser)

        assert isinstance(result.error, InvalidRequestError)
        assert not session.is_authenticated

    def test_storage_failure(self, make_session, browser) -> None:
        session = make_session(_respond({}), token_store=FailingStore())
        browser.on_open = lambda d: d.on_navigation_attempt(TOKEN_URL)

        result = _login(session, browser)

        assert isinstance(result.error, StorageError)
        assert result.error.code == errno.EACCES
        assert str(errno.EACCES) in str(result.error)

    def test_clear_cookies_setting(self, make_session, browser) -> None:
        session = make_session(_respond({}), clear_cookies=True)
        browser.on_open = lambda d: d.on_navigation_attempt(TOKEN_URL)
        _login(session, browser)
        assert browser.cleared_domains == ["instagram"]


class TestLogout:
    def test_logout(self, make_session) -> None:
        session = make_session(_respond({}))
        assert session.is_authenticated
        assert session.logout() is True
        assert not session.is_authenticated
        assert session.access_token is None

    def test_logout_when_logged_out(self, make_session) -> None:
        session = make_session(_respond({}), token=None)
        assert session.logout() is False


class TestFromSettings:
    def test_uses_settings(self) -> None:
        settings = Settings(
            client_id="abc", redirect_uri="https://cb", clear_cookies=True, timeout=5
        )
        store = MemoryTokenStore()
        session = InstagramSession.from_settings(settings, token_store=store)

        assert session.credentials == ClientCredentials(client_id="abc", redirect_uri="https://cb")
        assert session.token_store is store
        asyncio.run(session.aclose())

    def test_default_store_is_file_backed(self, isolated_config) -> None:
        session = InstagramSession.from_settings(Settings())
        assert isinstance(session.token_store, FileTokenStore)
        asyncio.run(session.aclose())


class TestMethodNames:
    @pytest.mark.parametrize(
        "method,expected", [("get", "GET"), ("Post", "POST"), ("delete", "DELETE")]
    )
    def test_case_insensitive(self, make_session, method, expected) -> None:
        seen: list[httpx.Request] = []
        session = make_session(_respond({"meta": {"code": 200}}, seen))

        result = _call(session, "/media/1/likes", method)

        assert result.ok
        assert seen[0].method == expected

    def test_unsupported_method_is_a_failure(self, make_session) -> None:
        seen: list[httpx.Request] = []
        session = make_session(_respond({"meta": {"code": 200}}, seen))

        result = _call(session, "/media/1", "PATCH")

        assert isinstance(result.error, InvalidUsageError)
        assert "PATCH" in str(result.error)
        assert seen == []


class TestEmptyToken:
    def test_empty_token_login_is_authenticated(self, make_session, browser, tmp_path) -> None:
        store = FileTokenStore(directory=tmp_path)
        session = make_session(_respond({}), token_store=store)
        empty = "https://example.com/callback#access_token="
        browser.on_open = lambda d: d.on_navigation_attempt(empty)

        result = _login(session, browser)

        assert result.ok
        assert result.value == ""
        assert session.is_authenticated
        assert session.access_token == ""
