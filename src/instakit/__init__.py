"""instakit -- a small Instagram API client with implicit-flow login.

The SDK logs a user in through the OAuth2 implicit flow in a browser,
keeps the resulting access token in local storage, and issues
authenticated REST calls whose JSON envelopes are decoded into typed
results.

Typical usage::

    import asyncio

    from instakit.auth import SystemBrowser
    from instakit.client import InstagramSession
    from instakit.config import load_settings
    from instakit.models import Scope, User

    async def main() -> None:
        async with InstagramSession.from_settings(load_settings()) as session:
            if not session.is_authenticated:
                (await session.login(SystemBrowser(), [Scope.BASIC])).unwrap()
            me = await session.request("/users/self", response_model=User)
            print(me.unwrap().username)

    asyncio.run(main())

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for credentials, envelopes and payloads.
    config: XDG-aware settings loading.
    exceptions: Error hierarchy with kinds and exit codes.
    result: The success-or-error value returned by async operations.
    output: stdout/stderr output with Rich support.
"""

__version__ = "0.1.0"
