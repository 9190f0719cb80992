"""HTTP client layer for instakit.

Classes:
    :class:`InstagramSession` -- credentials, token storage, login and the
    generic authenticated :meth:`~InstagramSession.request`.
    :class:`InstagramAPI` -- typed wrappers for common endpoints.

Example::

    from instakit.client import InstagramAPI, InstagramSession

    async with InstagramSession(credentials, token_store) as session:
        result = await InstagramAPI(session).user()
"""

from instakit.client.endpoints import InstagramAPI
from instakit.client.session import BASE_URL, HTTPMethod, InstagramSession

__all__ = ["BASE_URL", "HTTPMethod", "InstagramAPI", "InstagramSession"]
