"""Pydantic models shared across instakit.

The models fall into three groups:

**Configuration and auth models**:
    :class:`ClientCredentials`, :class:`Scope`, :class:`AuthorizationRequest`
    and :class:`TokenEntry`.

**Response envelope**:
    :class:`Meta` and the generic :class:`Envelope`, the outer JSON object
    every Instagram endpoint returns.

**Payload models** -- the ``data`` member of the envelope:
    :class:`User`, :class:`Media`, :class:`Comment`, :class:`Tag`,
    :class:`Location`, :class:`Relationship` and their small helpers.

Payload models use ``extra="allow"`` so that fields added by the provider
are preserved in ``model_extra`` instead of failing validation.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


# --- Auth ---


class Scope(str, enum.Enum):
    """Permission scopes understood by the Instagram authorize endpoint."""

    BASIC = "basic"
    PUBLIC_CONTENT = "public_content"
    FOLLOWER_LIST = "follower_list"
    COMMENTS = "comments"
    RELATIONSHIPS = "relationships"
    LIKES = "likes"


class ClientCredentials(BaseModel):
    """Application credentials registered with the provider.

    Loaded once from the settings file and never mutated afterwards.
    Either field may be missing; :attr:`is_configured` tells whether a
    login can be attempted.
    """

    model_config = ConfigDict(frozen=True)

    client_id: Optional[str] = None
    redirect_uri: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.redirect_uri)


class Settings(BaseModel):
    """Contents of ``settings.json``.

    Example::

        Settings(client_id="abc", redirect_uri="https://example.com/cb")
    """

    client_id: Optional[str] = Field(default=None, description="Registered client id")
    redirect_uri: Optional[str] = Field(
        default=None, description="Redirect URI registered for the client"
    )
    clear_cookies: bool = Field(
        default=False,
        description="Clear the provider's browser cookies after a successful login",
    )
    timeout: float = Field(default=30.0, description="HTTP timeout in seconds")

    @property
    def credentials(self) -> ClientCredentials:
        return ClientCredentials(client_id=self.client_id, redirect_uri=self.redirect_uri)


class AuthorizationRequest(BaseModel):
    """A single login attempt: the URL to open and the scopes it asks for."""

    auth_url: str
    scopes: list[Scope] = Field(default_factory=list)


class TokenEntry(BaseModel):
    """On-disk record written by :class:`~instakit.auth.token_store.FileTokenStore`."""

    access_token: str
    stored_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# --- Envelope ---


class Meta(BaseModel):
    """The ``meta`` member of every response envelope."""

    code: int
    error_type: Optional[str] = None
    error_message: Optional[str] = None


class Envelope(BaseModel, Generic[T]):
    """Generic decode wrapper around an endpoint's JSON payload.

    Example::

        envelope = Envelope[User].model_validate_json(body)
        if envelope.meta.error_message:
            ...
    """

    data: Optional[T] = None
    meta: Meta


# --- Payloads ---


class _Payload(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class UserCounts(_Payload):
    media: int = 0
    follows: int = 0
    followed_by: int = 0


class User(_Payload):
    """An Instagram account.

    Search and relationship listings return the short form (no ``counts``,
    ``bio`` or ``website``), so everything beyond ``id`` is optional.
    """

    id: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    profile_picture: Optional[str] = None
    bio: Optional[str] = None
    website: Optional[str] = None
    is_business: Optional[bool] = None
    counts: Optional[UserCounts] = None


class Count(_Payload):
    count: int = 0


class Image(_Payload):
    url: str
    width: Optional[int] = None
    height: Optional[int] = None


class Comment(_Payload):
    id: str
    text: str
    created_time: Optional[str] = None
    from_: Optional[User] = Field(default=None, alias="from")


class Location(_Payload):
    id: Optional[str] = None
    name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class Media(_Payload):
    """A photo, video or carousel post."""

    id: str
    type: Optional[str] = None
    link: Optional[str] = None
    created_time: Optional[str] = None
    filter: Optional[str] = None
    user: Optional[User] = None
    caption: Optional[Comment] = None
    images: dict[str, Image] = Field(default_factory=dict)
    videos: dict[str, Image] = Field(default_factory=dict)
    likes: Optional[Count] = None
    comments: Optional[Count] = None
    tags: list[str] = Field(default_factory=list)
    users_in_photo: list[dict] = Field(default_factory=list)
    user_has_liked: Optional[bool] = None
    location: Optional[Location] = None


class Tag(_Payload):
    name: str
    media_count: int = 0


class Relationship(_Payload):
    """Relationship between the authenticated user and another account."""

    outgoing_status: Optional[str] = None
    incoming_status: Optional[str] = None
    target_user_is_private: Optional[bool] = None
