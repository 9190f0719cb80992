"""API commands -- ``request`` for any endpoint, ``me`` for the current user.

Example::

    instakit request /users/self/media/recent -p count=5
    instakit request /media/123/likes -X POST
    instakit me --json
"""

from __future__ import annotations

import asyncio
from typing import List, Optional

import typer

from instakit.client.endpoints import InstagramAPI
from instakit.client.session import HTTPMethod
from instakit.commands import context
from instakit.exceptions import InvalidUsageError
from instakit.exit_codes import EXIT_GENERIC_FAILURE
from instakit.output import error, format_response


def parse_parameters(pairs: Optional[List[str]]) -> dict[str, str]:
    """Turn ``key=value`` strings into a dict.

    Raises:
        InvalidUsageError: If an item has no ``=`` or an empty key.
    """
    params: dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise InvalidUsageError(f"Invalid parameter '{pair}': expected key=value")
        params[key] = value
    return params


def request_command(
    endpoint: str = typer.Argument(help="Endpoint path, e.g. /users/self."),
    method: HTTPMethod = typer.Option(
        HTTPMethod.GET, "--method", "-X", help="HTTP method.", case_sensitive=False
    ),
    param: Optional[List[str]] = typer.Option(
        None, "--param", "-p", help="Query parameter as key=value (repeatable)."
    ),
) -> None:
    """Call an endpoint with the stored token and print the decoded data."""
    try:
        parameters = parse_parameters(param)
    except InvalidUsageError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if not endpoint.startswith("/"):
        endpoint = f"/{endpoint}"

    async def _request() -> object:
        async with context.build_session() as session:
            return await session.request(endpoint, method, parameters)

    data = context.unwrap_or_exit(asyncio.run(_request()))
    format_response(data)


def me_command() -> None:
    """Show the authenticated user's profile."""

    async def _me() -> object:
        async with context.build_session() as session:
            return await InstagramAPI(session).user()

    user = context.unwrap_or_exit(asyncio.run(_me()))
    if user is None:
        error("No data")
        raise typer.Exit(code=EXIT_GENERIC_FAILURE)
    format_response(user.model_dump(mode="json", by_alias=True, exclude_none=True))
