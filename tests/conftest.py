"""
Shared Test Fixtures for the Chronicler Client

This module provides common fixtures used across all test modules.
Fixtures include a mocked API gateway, a session store on a temp path,
log capture, HTTP response mocks, and factories for test objects.
"""

import pytest
from unittest.mock import MagicMock
from datetime import datetime
from typing import Optional, Any, List
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from data.models import ApiResponse, Article, ArticleStatus, Category, User
from data.session_store import SessionStore
from services.api_gateway import ApiGateway


# =============================================================================
# Gateway and Session Fixtures
# =============================================================================

@pytest.fixture
def mock_gateway():
    """
    A MagicMock shaped like ApiGateway.

    Every endpoint returns a successful empty ApiResponse unless a test
    overrides return_value or side_effect.

    Usage:
        def test_something(mock_gateway):
            mock_gateway.list_articles.return_value = ApiResponse(status=True, data=[...])
    """
    gateway = MagicMock(spec=ApiGateway)
    for name in ("register", "login", "create_article", "update_article", "delete_article",
                 "update_user", "delete_user"):
        getattr(gateway, name).return_value = ApiResponse(status=True, message="OK")
    gateway.list_articles.return_value = ApiResponse(status=True, data=[])
    gateway.list_user_articles.return_value = ApiResponse(status=True, data=[])
    gateway.list_categories.return_value = ApiResponse(status=True, data=[])
    gateway.get_article.return_value = ApiResponse(status=False, message="Not found")
    gateway.get_user.return_value = ApiResponse(status=False, message="Not found")
    return gateway


@pytest.fixture
def session_store(tmp_path):
    """A SessionStore writing to a temp directory."""
    return SessionStore(session_file=str(tmp_path / "session.txt"))


@pytest.fixture
def logged_in_session(session_store):
    """A SessionStore with user 7 logged in."""
    session_store.save(7)
    return session_store


# =============================================================================
# Logging Fixtures
# =============================================================================

@pytest.fixture
def capture_logs():
    """
    Capture log messages for assertion in tests.

    Returns:
        list: A list that will contain captured log records.
    """
    import logging

    class LogCapture(logging.Handler):
        def __init__(self):
            super().__init__()
            self.records = []

        def emit(self, record):
            self.records.append(record)

    handler = LogCapture()
    handler.setLevel(logging.DEBUG)

    app_logger = logging.getLogger("chronicler")
    original_level = app_logger.level
    app_logger.setLevel(logging.DEBUG)
    app_logger.addHandler(handler)

    yield handler.records

    app_logger.removeHandler(handler)
    app_logger.setLevel(original_level)


# =============================================================================
# HTTP Response Fixtures
# =============================================================================

@pytest.fixture
def mock_http_response():
    """
    Factory fixture for creating mock requests.Response objects.

    Usage:
        def test_http_request(mock_http_response):
            response = mock_http_response(status_code=200, json_data={'status': True})

    Returns:
        callable: A factory function for creating mock responses.
    """
    def _create_response(
        status_code: int = 200,
        json_data: Optional[Any] = None,
        text: str = '',
    ) -> MagicMock:
        mock_response = MagicMock()
        mock_response.status_code = status_code
        mock_response.ok = 200 <= status_code < 400
        mock_response.text = text

        if json_data is not None:
            mock_response.json.return_value = json_data
        else:
            mock_response.json.side_effect = ValueError("No JSON data")

        return mock_response

    return _create_response


@pytest.fixture
def mock_http_session(mock_http_response):
    """
    A MagicMock standing in for requests.Session.

    Tests set http.request.return_value / side_effect. The response factory
    is attached as http.response for convenience.
    """
    http = MagicMock()
    http.headers = {}
    http.response = mock_http_response
    return http


# =============================================================================
# Data Model Factories
# =============================================================================

@pytest.fixture
def article_factory():
    """
    Factory fixture for creating Article test objects.

    Usage:
        def test_article(article_factory):
            article = article_factory(article_id=3, title='Majapahit')
    """
    def _create_article(
        article_id: int = 1,
        title: str = 'The Fall of Constantinople',
        content: str = 'In 1453 the city fell after a long siege.',
        category_id: int = 1,
        category_name: str = 'Medieval',
        author_name: str = 'Test Author',
        images: Optional[List[str]] = None,
        status: ArticleStatus = ArticleStatus.PUBLISHED,
        tags: Optional[str] = None,
        **kwargs
    ) -> Article:
        return Article(
            article_id=article_id,
            title=title,
            content=content,
            category_id=category_id,
            category_name=category_name,
            author_name=author_name,
            published_at=kwargs.pop('published_at', datetime(2024, 5, 1, 10, 0)),
            images=images if images is not None else [],
            status=status,
            tags=tags,
            **kwargs
        )

    return _create_article


@pytest.fixture
def page_factory(article_factory):
    """
    Factory for a page of articles with consecutive identifiers.

    Usage:
        page = page_factory(start=21, count=5)   # ids 21..25
    """
    def _create_page(start: int = 1, count: int = 20) -> List[Article]:
        return [article_factory(article_id=i, title=f'Article {i}') for i in range(start, start + count)]

    return _create_page


@pytest.fixture
def categories():
    """A small category list."""
    return [
        Category(1, 'Medieval'),
        Category(2, 'Ancient'),
        Category(3, 'Modern'),
    ]


@pytest.fixture
def test_user():
    """A registered user."""
    return User(user_id=7, full_name='Test User', email='test@example.com', bio='Historian')

