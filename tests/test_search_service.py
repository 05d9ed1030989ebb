"""
Tests for the Article Search

Unit tests for ArticleSearch covering:
- Query updates and result publication
- Blank queries returning to Idle
- Discarding responses that belong to an older query
- Category chips
"""

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from data.models import ApiResponse
from services.search_service import ArticleSearch
from services.ui_state import Phase
from utils.exceptions import TransportError


@pytest.fixture
def search(mock_gateway):
    return ArticleSearch(mock_gateway)


class TestUpdateQuery:
    """Tests for update_query()."""

    def test_results_published(self, search, mock_gateway, page_factory):
        results = page_factory(1, 3)
        mock_gateway.list_articles.return_value = ApiResponse(status=True, data=results)
        phases = []
        search.state.subscribe(lambda state: phases.append(state.phase))

        search.update_query('rome')

        mock_gateway.list_articles.assert_called_once_with(query='rome')
        assert search.query == 'rome'
        assert phases == [Phase.LOADING, Phase.SUCCESS]
        assert search.state.value.data == results

    def test_blank_query_is_idle(self, search, mock_gateway):
        search.update_query('   ')

        assert search.state.value.is_idle
        mock_gateway.list_articles.assert_not_called()

    def test_each_query_bumps_generation(self, search):
        search.update_query('a')
        search.update_query('')
        assert search.generation == 2

    def test_server_error(self, search, mock_gateway):
        mock_gateway.list_articles.return_value = ApiResponse(status=False, message='Bad query')

        search.update_query('x')

        assert search.state.value.is_error
        assert search.state.value.message == 'Bad query'

    def test_transport_error(self, search, mock_gateway):
        mock_gateway.list_articles.side_effect = TransportError('offline')

        search.update_query('x')

        assert search.state.value.message == 'No internet connection'


class TestStaleResponses:
    """Responses for superseded queries never overwrite newer state."""

    def test_newer_query_wins(self, search, mock_gateway, page_factory):
        """A query typed while the previous one is in flight supersedes it."""
        newer = page_factory(50, 2)
        older = page_factory(1, 2)

        def respond(query):
            if query == 'ro':
                # The user keeps typing before 'ro' answers
                mock_gateway.list_articles.side_effect = lambda query: ApiResponse(status=True, data=newer)
                search.update_query('rome')
                return ApiResponse(status=True, data=older)
            raise AssertionError(f"unexpected query {query}")

        mock_gateway.list_articles.side_effect = respond

        search.update_query('ro')

        assert search.query == 'rome'
        assert search.state.value.data == newer

    def test_cleared_query_discards_result(self, search, mock_gateway, page_factory, capture_logs):
        def respond(query):
            search.update_query('')
            return ApiResponse(status=True, data=page_factory(1, 2))

        mock_gateway.list_articles.side_effect = respond

        search.update_query('rome')

        assert search.state.value.is_idle
        assert any('Discarded stale search result' in r.getMessage() for r in capture_logs)

    def test_stale_error_is_discarded(self, search, mock_gateway, page_factory):
        def respond(query):
            mock_gateway.list_articles.side_effect = lambda query: ApiResponse(status=True, data=[])
            search.update_query('romans')
            raise TransportError('late failure')

        mock_gateway.list_articles.side_effect = respond

        search.update_query('rome')

        assert search.state.value.is_success


class TestCategories:
    """Tests for load_categories()."""

    def test_loads_categories(self, search, mock_gateway, categories):
        mock_gateway.list_categories.return_value = ApiResponse(status=True, data=categories)

        assert search.load_categories() == categories

    def test_failure_leaves_empty_list(self, search, mock_gateway):
        mock_gateway.list_categories.side_effect = TransportError('offline')

        assert search.load_categories() == []
