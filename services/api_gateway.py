"""
API Gateway Module

This module handles all HTTP communication with the Grand Chronicler REST API.
It wraps requests in a single Session, attaches the bearer token after
login, and turns JSON envelopes into typed ApiResponse objects.
"""

from typing import Optional, Dict, Any, List
from urllib.parse import urljoin

import requests

from config import settings
from data.models import ApiResponse, Article, ArticlePayload, Category, User, UserUpdatePayload
from utils.exceptions import GatewayError, TransportError
from utils.logger import get_logger

logger = get_logger(__name__)


class ApiGateway:
    """Gateway for the articles, categories, users and auth endpoints."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        """
        Initialize the gateway.

        Args:
            base_url: API root, e.g. "http://localhost:3000/api/". Defaults to settings.API_BASE_URL.
            timeout: Per-request timeout in seconds. Defaults to settings.HTTP_TIMEOUT.
            session: Optional requests.Session to reuse (handy for tests).
        """
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/") + "/"
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT
        self.http = session or requests.Session()
        self.http.headers.update(settings.REQUEST_HEADERS)
        self.token: Optional[str] = None

    # -------------------------------------------------------------------------
    # Token handling
    # -------------------------------------------------------------------------

    def set_token(self, token: Optional[str]) -> None:
        """Attach a bearer token to every following request."""
        self.token = token
        if token:
            self.http.headers["Authorization"] = f"Bearer {token}"
        else:
            self.http.headers.pop("Authorization", None)

    def clear_token(self) -> None:
        """Forget the bearer token."""
        self.set_token(None)

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _request(self, method: str, path: str, params: Optional[Dict[str, Any]] = None,
                 json: Optional[Dict[str, Any]] = None) -> ApiResponse:
        """
        Perform a request and decode the JSON envelope.

        Args:
            method: HTTP verb.
            path: Path relative to the API root.
            params: Query parameters; None values are dropped.
            json: JSON body.

        Returns:
            ApiResponse: Decoded envelope. Non-2xx answers with a JSON body come
            back as status=False so the server message reaches the user.

        Raises:
            TransportError: If the API cannot be reached or times out.
            GatewayError: If the API answers with something that is not a JSON envelope.
        """
        url = urljoin(self.base_url, path)
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            response = self.http.request(method, url, params=params or None, json=json,
                                         timeout=self.timeout)
        except (requests.ConnectionError, requests.Timeout) as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise TransportError(str(e)) from e
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise GatewayError(str(e)) from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            logger.error(f"{method} {url} returned HTTP {response.status_code} without a JSON envelope")
            raise GatewayError(f"HTTP {response.status_code}", status_code=response.status_code)

        result = ApiResponse.from_dict(body)
        result.http_status = response.status_code
        if not response.ok:
            result.status = False
            if not result.message:
                result.message = f"HTTP {response.status_code}"
            logger.warning(f"{method} {url} returned HTTP {response.status_code}: {result.message}")
        else:
            logger.debug(f"{method} {url} -> {response.status_code}")

        return result

    @staticmethod
    def _article_list(result: ApiResponse) -> ApiResponse:
        items: List[Dict[str, Any]] = (result.data or []) if result.status else []
        result.data = [Article.from_dict(item) for item in items]
        return result

    # -------------------------------------------------------------------------
    # Auth
    # -------------------------------------------------------------------------

    def register(self, full_name: str, email: str, password: str) -> ApiResponse:
        result = self._request("POST", "auth/register", json={
            "full_name": full_name,
            "email": email,
            "password": password,
        })
        if result.status and isinstance(result.data, dict):
            result.data = User.from_dict(result.data)
        return result

    def login(self, email: str, password: str) -> ApiResponse:
        result = self._request("POST", "auth/login", json={"email": email, "password": password})
        if result.status:
            if isinstance(result.data, dict):
                result.data = User.from_dict(result.data)
            if result.token:
                self.set_token(result.token)
        return result

    # -------------------------------------------------------------------------
    # Articles and categories
    # -------------------------------------------------------------------------

    def list_articles(self, query: Optional[str] = None, page: Optional[int] = None,
                      limit: Optional[int] = None) -> ApiResponse:
        result = self._request("GET", "articles", params={"q": query, "page": page, "limit": limit})
        return self._article_list(result)

    def list_user_articles(self, user_id: int) -> ApiResponse:
        return self._article_list(self._request("GET", f"users/{user_id}/articles"))

    def list_categories(self) -> ApiResponse:
        result = self._request("GET", "categories")
        items = (result.data or []) if result.status else []
        result.data = [Category.from_dict(item) for item in items]
        return result

    def get_article(self, article_id: int) -> ApiResponse:
        result = self._request("GET", f"articles/{article_id}")
        result.data = Article.from_dict(result.data) if result.status and isinstance(result.data, dict) else None
        return result

    def create_article(self, payload: ArticlePayload) -> ApiResponse:
        result = self._request("POST", "articles", json=payload.to_dict())
        if result.status:
            logger.info(f"Created article '{payload.title}' ({payload.status.value})")
        return result

    def update_article(self, article_id: int, payload: ArticlePayload) -> ApiResponse:
        result = self._request("PUT", f"articles/{article_id}", json=payload.to_dict())
        if result.status:
            logger.info(f"Updated article {article_id} ({payload.status.value})")
        return result

    def delete_article(self, article_id: int) -> ApiResponse:
        result = self._request("DELETE", f"articles/{article_id}")
        if result.status:
            logger.info(f"Deleted article {article_id}")
        return result

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def get_user(self, user_id: int) -> ApiResponse:
        result = self._request("GET", f"users/{user_id}")
        result.data = User.from_dict(result.data) if result.status and isinstance(result.data, dict) else None
        return result

    def update_user(self, user_id: int, payload: UserUpdatePayload) -> ApiResponse:
        return self._request("PUT", f"users/{user_id}", json=payload.to_dict())

    def delete_user(self, user_id: int) -> ApiResponse:
        return self._request("DELETE", f"users/{user_id}")
