"""
Service Protocol Definitions

This module defines typing.Protocol interfaces for the collaborators used by
the Chronicler services. These protocols enable loose coupling, dependency
injection, and easier testing.

Protocols defined:
- AuthGateway: Interface for registration and login
- ArticleGateway: Interface for article, category and user operations
- RemoteGateway: Both of the above, as served by one API
- ImageEncoder: Interface for turning a picked image into its wire form
"""

from typing import Protocol, Optional

from data.models import ApiResponse, ArticlePayload, UserUpdatePayload


class AuthGateway(Protocol):
    """Protocol defining the authentication endpoints.

    Successful login responses carry the bearer token and a user payload
    whose identifier is persisted to the session store.
    """

    def register(self, full_name: str, email: str, password: str) -> ApiResponse:
        """Create an account.

        Returns:
            ApiResponse with status, message and optionally token and user data.
        """
        ...

    def login(self, email: str, password: str) -> ApiResponse:
        """Authenticate with email and password.

        Returns:
            ApiResponse with status, message, token and user data on success.
        """
        ...

    def clear_token(self) -> None:
        """Forget the bearer token obtained at login."""
        ...


class ArticleGateway(Protocol):
    """Protocol defining the article, category and user endpoints.

    Implementations raise TransportError when the API cannot be reached and
    GatewayError when it answers with an error that has no JSON body.
    Otherwise they always return an ApiResponse, including for status=False.
    """

    def list_articles(self, query: Optional[str] = None, page: Optional[int] = None,
                      limit: Optional[int] = None) -> ApiResponse:
        """List published articles, optionally filtered by a search query.

        Returns:
            ApiResponse whose data is a list of Article.
        """
        ...

    def list_user_articles(self, user_id: int) -> ApiResponse:
        """List every article written by a user, drafts included."""
        ...

    def list_categories(self) -> ApiResponse:
        """List categories. ApiResponse data is a list of Category."""
        ...

    def get_article(self, article_id: int) -> ApiResponse:
        """Fetch one article. ApiResponse data is an Article or None."""
        ...

    def create_article(self, payload: ArticlePayload) -> ApiResponse:
        """Insert a new article."""
        ...

    def update_article(self, article_id: int, payload: ArticlePayload) -> ApiResponse:
        """Update an existing article."""
        ...

    def delete_article(self, article_id: int) -> ApiResponse:
        """Delete an article."""
        ...

    def get_user(self, user_id: int) -> ApiResponse:
        """Fetch a user profile. ApiResponse data is a User or None."""
        ...

    def update_user(self, user_id: int, payload: UserUpdatePayload) -> ApiResponse:
        """Update a user profile."""
        ...

    def delete_user(self, user_id: int) -> ApiResponse:
        """Delete a user account."""
        ...


class RemoteGateway(AuthGateway, ArticleGateway, Protocol):
    """The full remote API surface."""
    pass


class ImageEncoder(Protocol):
    """Protocol for encoding a locally picked image for upload."""

    def __call__(self, handle: str) -> str:
        """Return the inline (base64) representation of the image at handle."""
        ...
