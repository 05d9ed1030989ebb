"""
Data Models for the Chronicler Client

This module contains the read models returned by the remote API and the
request payloads sent to it. Read models are copied out of the JSON on
receipt, so nothing here shares mutable state with the network layer.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any

from utils.helpers import parse_timestamp


class ArticleStatus(str, Enum):
    """Article visibility. Drafts are author-only, published articles are public."""
    DRAFT = "Draft"
    PUBLISHED = "Published"


@dataclass(frozen=True)
class Category:
    """Article category."""
    category_id: int
    category_name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Category":
        return cls(
            category_id=int(data.get("category_id", 0)),
            category_name=data.get("category_name") or "",
        )


@dataclass
class Article:
    """Article as returned by the articles endpoints."""
    article_id: int
    title: str
    content: str = ""
    category_id: int = 0
    category_name: str = ""
    author_name: str = ""
    published_at: Optional[datetime] = None
    images: List[str] = field(default_factory=list)   # Server image URLs, in display order
    view_count: int = 0
    status: ArticleStatus = ArticleStatus.PUBLISHED
    tags: Optional[str] = None
    user_id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Article":
        """Build an Article from API JSON, ignoring unknown keys."""
        raw_status = data.get("status") or ArticleStatus.PUBLISHED.value
        try:
            status = ArticleStatus(raw_status)
        except ValueError:
            status = ArticleStatus.PUBLISHED

        return cls(
            article_id=int(data["article_id"]),
            title=data.get("title") or "",
            content=data.get("content") or "",
            category_id=int(data.get("category_id") or 0),
            category_name=data.get("category_name") or "",
            author_name=data.get("author_name") or data.get("full_name") or "",
            published_at=parse_timestamp(data.get("published_at")),
            images=list(data.get("images") or []),
            view_count=int(data.get("view_count") or 0),
            status=status,
            tags=data.get("tags"),
            user_id=data.get("user_id"),
        )


@dataclass
class User:
    """Registered user profile."""
    user_id: int
    full_name: str
    email: str
    bio: Optional[str] = None
    profile_picture: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            user_id=int(data["user_id"]),
            full_name=data.get("full_name") or "",
            email=data.get("email") or "",
            bio=data.get("bio"),
            profile_picture=data.get("profile_picture"),
        )


@dataclass
class ApiResponse:
    """Envelope shared by every endpoint: {status, message, data, token}."""
    status: bool
    message: Optional[str] = None
    data: Any = None
    token: Optional[str] = None
    http_status: Optional[int] = None

    @classmethod
    def from_dict(cls, body: Dict[str, Any]) -> "ApiResponse":
        return cls(
            status=bool(body.get("status", False)),
            message=body.get("message"),
            data=body.get("data"),
            token=body.get("token"),
        )


@dataclass
class NewImage:
    """An image picked locally and staged for upload."""
    handle: str          # Local file path
    caption: str = ""


@dataclass
class ArticlePayload:
    """Body for POST articles / PUT articles/{id}."""
    title: str
    status: ArticleStatus
    content: Optional[str] = None
    category_id: Optional[int] = None
    user_id: Optional[int] = None
    tags: Optional[str] = None
    images: List[str] = field(default_factory=list)          # Base64-encoded
    captions: List[str] = field(default_factory=list)        # Aligned with images
    deleted_images: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        body = {
            "title": self.title,
            "content": self.content,
            "category_id": self.category_id,
            "status": self.status.value,
            "tags": self.tags,
            "images": list(self.images),
            "captions": list(self.captions),
            "deleted_images": list(self.deleted_images) if self.deleted_images is not None else None,
        }
        if self.user_id is not None:
            body["user_id"] = self.user_id
        return body


@dataclass
class UserUpdatePayload:
    """Body for PUT users/{id}. An empty password leaves it unchanged."""
    full_name: str
    email: str
    bio: Optional[str] = None
    password: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        body = {
            "full_name": self.full_name,
            "email": self.email,
            "bio": self.bio,
        }
        if self.password:
            body["password"] = self.password
        return body
