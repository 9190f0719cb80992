"""Session construction and result handling shared by the commands."""

from __future__ import annotations

from typing import TypeVar

import typer

from instakit.client.session import InstagramSession
from instakit.config import load_settings
from instakit.output import error
from instakit.result import Result

T = TypeVar("T")


def build_session() -> InstagramSession:
    """Create the process's session from the settings file.

    Commands call this through the module (``context.build_session()``)
    so tests can substitute a session backed by a mock transport.
    """
    return InstagramSession.from_settings(load_settings())


def unwrap_or_exit(result: Result[T]) -> T:
    """Return the result's value, or print its error and exit with its code."""
    if result.error is not None:
        error(str(result.error))
        raise typer.Exit(code=result.error.exit_code)
    return result.value  # type: ignore[return-value]
