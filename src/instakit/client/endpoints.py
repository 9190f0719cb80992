"""Typed helpers for the common Instagram v1 endpoints.

Each method is a one-line wrapper over
:meth:`~instakit.client.session.InstagramSession.request` that fixes the
path, HTTP method and payload model. Optional query parameters left as
``None`` are not sent.
"""

from __future__ import annotations

from typing import Any, Optional

from instakit.client.session import HTTPMethod, InstagramSession
from instakit.models import Comment, Location, Media, Relationship, Tag, User
from instakit.result import Result


def _params(**kwargs: Any) -> dict[str, Any]:
    return {key: value for key, value in kwargs.items() if value is not None}


class InstagramAPI:
    """Endpoint catalogue bound to a session.

    Example::

        api = InstagramAPI(session)
        result = await api.recent_media(count=5)
        for media in result.unwrap():
            print(media.link)
    """

    def __init__(self, session: InstagramSession) -> None:
        self._session = session

    # --- Users ---

    async def user(self, user_id: str = "self") -> Result[User]:
        return await self._session.request(f"/users/{user_id}", response_model=User)

    async def recent_media(
        self,
        user_id: str = "self",
        count: Optional[int] = None,
        min_id: Optional[str] = None,
        max_id: Optional[str] = None,
    ) -> Result[list[Media]]:
        return await self._session.request(
            f"/users/{user_id}/media/recent",
            parameters=_params(count=count, min_id=min_id, max_id=max_id),
            response_model=list[Media],
        )

    async def liked_media(
        self, count: Optional[int] = None, max_like_id: Optional[str] = None
    ) -> Result[list[Media]]:
        return await self._session.request(
            "/users/self/media/liked",
            parameters=_params(count=count, max_like_id=max_like_id),
            response_model=list[Media],
        )

    async def search_users(self, query: str, count: Optional[int] = None) -> Result[list[User]]:
        return await self._session.request(
            "/users/search",
            parameters=_params(q=query, count=count),
            response_model=list[User],
        )

    # --- Relationships ---

    async def follows(self) -> Result[list[User]]:
        return await self._session.request("/users/self/follows", response_model=list[User])

    async def followed_by(self) -> Result[list[User]]:
        return await self._session.request("/users/self/followed-by", response_model=list[User])

    async def relationship(self, user_id: str) -> Result[Relationship]:
        return await self._session.request(
            f"/users/{user_id}/relationship", response_model=Relationship
        )

    # --- Media ---

    async def media(self, media_id: str) -> Result[Media]:
        return await self._session.request(f"/media/{media_id}", response_model=Media)

    async def media_by_shortcode(self, shortcode: str) -> Result[Media]:
        return await self._session.request(f"/media/shortcode/{shortcode}", response_model=Media)

    # --- Comments ---

    async def comments(self, media_id: str) -> Result[list[Comment]]:
        return await self._session.request(
            f"/media/{media_id}/comments", response_model=list[Comment]
        )

    async def delete_comment(self, media_id: str, comment_id: str) -> Result[None]:
        return await self._session.request(
            f"/media/{media_id}/comments/{comment_id}", method=HTTPMethod.DELETE
        )

    # --- Likes ---

    async def likes(self, media_id: str) -> Result[list[User]]:
        return await self._session.request(f"/media/{media_id}/likes", response_model=list[User])

    async def like(self, media_id: str) -> Result[None]:
        return await self._session.request(f"/media/{media_id}/likes", method=HTTPMethod.POST)

    async def unlike(self, media_id: str) -> Result[None]:
        return await self._session.request(f"/media/{media_id}/likes", method=HTTPMethod.DELETE)

    # --- Tags ---

    async def tag(self, name: str) -> Result[Tag]:
        return await self._session.request(f"/tags/{name}", response_model=Tag)

    async def recent_tag_media(self, name: str, count: Optional[int] = None) -> Result[list[Media]]:
        return await self._session.request(
            f"/tags/{name}/media/recent",
            parameters=_params(count=count),
            response_model=list[Media],
        )

    async def search_tags(self, query: str) -> Result[list[Tag]]:
        return await self._session.request(
            "/tags/search", parameters={"q": query}, response_model=list[Tag]
        )

    # --- Locations ---

    async def location(self, location_id: str) -> Result[Location]:
        return await self._session.request(f"/locations/{location_id}", response_model=Location)

    async def recent_location_media(self, location_id: str) -> Result[list[Media]]:
        return await self._session.request(
            f"/locations/{location_id}/media/recent", response_model=list[Media]
        )

    async def search_locations(
        self,
        latitude: float,
        longitude: float,
        distance: Optional[int] = None,
    ) -> Result[list[Location]]:
        return await self._session.request(
            "/locations/search",
            parameters=_params(lat=latitude, lng=longitude, distance=distance),
            response_model=list[Location],
        )
