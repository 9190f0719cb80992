"""``instakit configure`` -- write or show the application settings."""

from __future__ import annotations

from typing import Optional

import typer

from instakit.output import format_response, info, success, suggest


def configure_command(
    client_id: Optional[str] = typer.Option(
        None, "--client-id", help="Client id registered with Instagram."
    ),
    redirect_uri: Optional[str] = typer.Option(
        None, "--redirect-uri", help="Redirect URI registered for the client."
    ),
    clear_cookies: Optional[bool] = typer.Option(
        None,
        "--clear-cookies/--keep-cookies",
        help="Clear the provider's browser cookies after login.",
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="HTTP timeout in seconds."
    ),
) -> None:
    """Update settings.json. Without options, print the current settings.

    Example::

        instakit configure --client-id abc --redirect-uri https://example.com/cb
        instakit configure
    """
    from instakit.config import load_settings, save_settings, settings_path

    settings = load_settings(apply_env=False)
    updates = {
        key: value
        for key, value in {
            "client_id": client_id,
            "redirect_uri": redirect_uri,
            "clear_cookies": clear_cookies,
            "timeout": timeout,
        }.items()
        if value is not None
    }

    if not updates:
        info(f"Settings file: {settings_path()}")
        format_response(settings.model_dump(mode="json"))
        return

    settings = settings.model_copy(update=updates)
    path = save_settings(settings)
    success(f"Settings saved to {path}")
    if settings.credentials.is_configured:
        suggest("Log in: instakit login")
