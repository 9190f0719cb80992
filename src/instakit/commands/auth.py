"""Authentication commands -- ``login``, ``logout``, ``status`` and ``token``.

Typical workflow::

    instakit login --scope basic --scope comments
    instakit status
    instakit logout
"""

from __future__ import annotations

import asyncio
import errno
from typing import List

import typer

from instakit.auth.browser import SystemBrowser
from instakit.commands import context
from instakit.exceptions import StorageError
from instakit.exit_codes import EXIT_GENERIC_FAILURE
from instakit.models import Scope
from instakit.output import error, info, print_data, print_table, success, suggest


def login_command(
    scopes: List[Scope] = typer.Option(
        [Scope.BASIC], "--scope", "-s", help="Scope to request (repeatable)."
    ),
) -> None:
    """Log in through the browser and store the access token."""

    async def _login() -> None:
        async with context.build_session() as session:
            result = await session.login(SystemBrowser(), scopes)
        context.unwrap_or_exit(result)

    asyncio.run(_login())
    success("Logged in.")
    suggest("Try: instakit me")


def logout_command() -> None:
    """Remove the stored access token."""
    session = context.build_session()
    try:
        removed = session.logout()
        code = session.token_store.last_result_code
    finally:
        asyncio.run(session.aclose())

    if removed:
        success("Logged out.")
        return
    if code == errno.ENOENT:
        info("Not logged in.")
        return
    exc = StorageError(f"Error deleting access token (code {code})", code=code)
    error(str(exc))
    raise typer.Exit(code=exc.exit_code)


def status_command() -> None:
    """Show whether login is configured and a token is stored."""
    session = context.build_session()
    try:
        configured = session.credentials.is_configured
        authenticated = session.is_authenticated
    finally:
        asyncio.run(session.aclose())

    print_table(
        ["setting", "value"],
        [
            ["configured", "yes" if configured else "no"],
            ["authenticated", "yes" if authenticated else "no"],
        ],
        title="instakit",
    )
    if not configured:
        suggest("Configure: instakit configure --client-id ID --redirect-uri URI")
    elif not authenticated:
        suggest("Log in: instakit login")


def token_command() -> None:
    """Print the stored access token to stdout."""
    session = context.build_session()
    try:
        token = session.access_token
    finally:
        asyncio.run(session.aclose())

    if token is None:
        error("Not logged in.")
        raise typer.Exit(code=EXIT_GENERIC_FAILURE)
    print_data(token)
