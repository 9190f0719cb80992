"""Login flow, browser abstraction and token storage.

- :class:`LoginFlow` -- the redirect-interception state machine for one
  implicit-flow login attempt.
- :class:`Browser` / :class:`SystemBrowser` -- where the provider's login
  pages are shown.
- :class:`TokenStore` -- persistence for the single access token, with
  :class:`FileTokenStore` and :class:`MemoryTokenStore` implementations.
"""

from instakit.auth.browser import Browser, NavigationDecision, NavigationDelegate, SystemBrowser
from instakit.auth.login_flow import (
    LoginFlow,
    LoginState,
    build_authorization_url,
    extract_access_token,
)
from instakit.auth.token_store import FileTokenStore, MemoryTokenStore, TokenStore

__all__ = [
    "Browser",
    "FileTokenStore",
    "LoginFlow",
    "LoginState",
    "MemoryTokenStore",
    "NavigationDecision",
    "NavigationDelegate",
    "SystemBrowser",
    "TokenStore",
    "build_authorization_url",
    "extract_access_token",
]
