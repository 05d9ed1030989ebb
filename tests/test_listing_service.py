"""
Tests for the Article Listing

Unit tests for ArticleListing covering:
- First load and refresh
- Page accumulation and de-duplication
- End-of-list detection
- The in-flight guard against overlapping page loads
- Scroll lookahead
- Error handling for first loads and appends
"""

import pytest
from unittest.mock import MagicMock
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from data.models import ApiResponse
from services.listing_service import ArticleListing, ListingState
from services.ui_state import Phase
from utils.exceptions import GatewayError, TransportError


@pytest.fixture
def listing(mock_gateway):
    """An ArticleListing with the default page size of 20 and threshold of 4."""
    return ArticleListing(mock_gateway, page_size=20, load_more_threshold=4)


def pages(*batches):
    """side_effect returning one successful ApiResponse per batch."""
    return [ApiResponse(status=True, data=batch) for batch in batches]


def ids(listing):
    return [article.article_id for article in listing.items]


# =============================================================================
# Initial State
# =============================================================================

class TestInitialState:
    """Tests for a freshly created listing."""

    def test_defaults(self, listing):
        """Starts empty on page 1 with more pages assumed."""
        assert listing.listing == ListingState()
        assert listing.items == []
        assert listing.listing.page == 1
        assert listing.listing.has_more is True
        assert listing.listing.is_fetching_more is False
        assert listing.state.value.is_idle

    def test_settings_defaults(self, mock_gateway):
        """Page size and threshold default to settings."""
        listing = ArticleListing(mock_gateway)
        assert listing.page_size == 20
        assert listing.load_more_threshold == 4

    def test_explicit_page_size_is_kept(self, mock_gateway):
        """Only a missing page size falls back to settings."""
        listing = ArticleListing(mock_gateway, page_size=0, load_more_threshold=0)
        assert listing.page_size == 0
        assert listing.load_more_threshold == 0


# =============================================================================
# First Load and Refresh
# =============================================================================

class TestFirstLoad:
    """Tests for start() and refresh()."""

    def test_start_full_page(self, listing, mock_gateway, page_factory):
        """A full first page publishes Success and advances to page 2."""
        mock_gateway.list_articles.side_effect = pages(page_factory(1, 20))

        listing.start()

        mock_gateway.list_articles.assert_called_once_with(page=1, limit=20)
        assert ids(listing) == list(range(1, 21))
        assert listing.listing.page == 2
        assert listing.listing.has_more is True
        assert listing.state.value.is_success
        assert listing.state.value.data == listing.items

    def test_start_publishes_loading_first(self, listing, mock_gateway, page_factory):
        """Subscribers see Loading before Success."""
        mock_gateway.list_articles.side_effect = pages(page_factory(1, 3))
        phases = []
        listing.state.subscribe(lambda state: phases.append(state.phase))

        listing.start()

        assert phases == [Phase.LOADING, Phase.SUCCESS]

    def test_short_first_page_ends_listing(self, listing, mock_gateway, page_factory):
        """Fewer than a page of results means there is nothing more."""
        mock_gateway.list_articles.side_effect = pages(page_factory(1, 7))

        listing.start()

        assert len(listing.items) == 7
        assert listing.listing.has_more is False
        assert listing.listing.page == 1

    def test_empty_first_page(self, listing, mock_gateway):
        """An empty listing is a Success with no items."""
        mock_gateway.list_articles.side_effect = pages([])

        listing.start()

        assert listing.items == []
        assert listing.state.value.is_success
        assert listing.listing.has_more is False

    def test_refresh_replaces_items(self, listing, mock_gateway, page_factory):
        """Refresh starts over from page 1 and drops the old items."""
        mock_gateway.list_articles.side_effect = pages(
            page_factory(1, 20), page_factory(21, 20), page_factory(100, 20))

        listing.start()
        listing.load_articles()
        listing.refresh()

        assert mock_gateway.list_articles.call_args_list[-1].kwargs == {'page': 1, 'limit': 20}
        assert ids(listing) == list(range(100, 120))
        assert listing.listing.page == 2

    def test_refresh_revives_has_more(self, listing, mock_gateway, page_factory):
        """Only a reset clears the end-of-list flag."""
        mock_gateway.list_articles.side_effect = pages(page_factory(1, 5), page_factory(1, 20))

        listing.start()
        assert listing.listing.has_more is False

        listing.refresh()
        assert listing.listing.has_more is True

    def test_reset_dedupes_first_page(self, listing, mock_gateway, article_factory):
        """Duplicate ids in a single page are collapsed."""
        batch = [article_factory(article_id=1), article_factory(article_id=2), article_factory(article_id=1)]
        mock_gateway.list_articles.side_effect = pages(batch)

        listing.start()

        assert ids(listing) == [1, 2]


# =============================================================================
# Pagination
# =============================================================================

class TestPagination:
    """Tests for appending pages."""

    def test_twenty_then_five(self, listing, mock_gateway, page_factory):
        """20 + 5 results: 25 items, no more pages, later calls are no-ops."""
        mock_gateway.list_articles.side_effect = pages(page_factory(1, 20), page_factory(21, 5))

        listing.start()
        assert listing.load_articles() is True

        assert len(listing.items) == 25
        assert listing.listing.has_more is False
        assert listing.listing.page == 2
        assert mock_gateway.list_articles.call_args.kwargs == {'page': 2, 'limit': 20}

        assert listing.load_articles() is False
        assert mock_gateway.list_articles.call_count == 2

    def test_append_skips_known_ids(self, listing, mock_gateway, page_factory):
        """Articles already in the list are not appended again."""
        mock_gateway.list_articles.side_effect = pages(page_factory(1, 20), page_factory(18, 20))

        listing.start()
        listing.load_articles()

        assert ids(listing) == list(range(1, 38))
        assert len(set(ids(listing))) == len(listing.items)

    def test_full_page_of_duplicates_keeps_paging(self, listing, mock_gateway, page_factory):
        """End of list is decided by the fetched count, not the appended count."""
        mock_gateway.list_articles.side_effect = pages(page_factory(1, 20), page_factory(1, 20))

        listing.start()
        listing.load_articles()

        assert len(listing.items) == 20
        assert listing.listing.has_more is True
        assert listing.listing.page == 3

    def test_append_keeps_success_state(self, listing, mock_gateway, page_factory):
        """Appending doesn't flip the screen back to Loading."""
        mock_gateway.list_articles.side_effect = pages(page_factory(1, 20), page_factory(21, 20))
        listing.start()
        phases = []
        listing.state.subscribe(lambda state: phases.append(state.phase))

        listing.load_articles()

        assert phases == []
        assert listing.state.value.is_success


# =============================================================================
# In-flight Guard
# =============================================================================

class TestInFlightGuard:
    """Tests for the is_fetching_more flag."""

    def test_reentrant_load_is_ignored(self, listing, mock_gateway, page_factory):
        """A load triggered while a page is in flight issues no request."""
        mock_gateway.list_articles.side_effect = pages(page_factory(1, 20))
        listing.start()

        nested_results = []

        def respond(**kwargs):
            assert listing.listing.is_fetching_more is True
            nested_results.append(listing.load_articles())
            return ApiResponse(status=True, data=page_factory(21, 20))

        mock_gateway.list_articles.side_effect = respond
        listing.load_articles()

        assert nested_results == [False]
        assert mock_gateway.list_articles.call_count == 2
        assert len(listing.items) == 40
        assert listing.listing.is_fetching_more is False

    def test_flag_cleared_after_error(self, listing, mock_gateway, page_factory):
        """The in-flight flag is released even when the request raises."""
        mock_gateway.list_articles.side_effect = [
            ApiResponse(status=True, data=page_factory(1, 20)),
            TransportError("down"),
        ]
        listing.start()

        listing.load_articles()

        assert listing.listing.is_fetching_more is False

    def test_flag_cleared_after_failed_response(self, listing, mock_gateway):
        """The in-flight flag is released after a status=false response."""
        mock_gateway.list_articles.side_effect = [ApiResponse(status=False, message="nope")]

        listing.start()

        assert listing.listing.is_fetching_more is False


# =============================================================================
# Scroll Lookahead
# =============================================================================

class TestShouldLoadMore:
    """Tests for should_load_more() and on_scrolled()."""

    @pytest.fixture
    def loaded(self, listing, mock_gateway, page_factory):
        mock_gateway.list_articles.side_effect = pages(page_factory(1, 20), page_factory(21, 20))
        listing.start()
        return listing

    def test_false_when_empty(self, listing):
        assert listing.should_load_more(0) is False

    @pytest.mark.parametrize("index,expected", [
        (0, False),
        (15, False),
        (16, True),
        (19, True),
    ])
    def test_threshold(self, loaded, index, expected):
        """Fires within four items of the end."""
        assert loaded.should_load_more(index) is expected

    def test_false_when_exhausted(self, loaded):
        loaded.listing.has_more = False
        assert loaded.should_load_more(19) is False

    def test_false_while_fetching(self, loaded):
        loaded.listing.is_fetching_more = True
        assert loaded.should_load_more(19) is False

    def test_on_scrolled_loads_next_page(self, loaded, mock_gateway):
        assert loaded.on_scrolled(18) is True
        assert len(loaded.items) == 40
        assert mock_gateway.list_articles.call_args.kwargs == {'page': 2, 'limit': 20}

    def test_on_scrolled_far_from_end(self, loaded, mock_gateway):
        assert loaded.on_scrolled(3) is False
        assert mock_gateway.list_articles.call_count == 1


# =============================================================================
# Error Handling
# =============================================================================

class TestErrors:
    """Tests for failed loads."""

    def test_first_load_transport_error(self, listing, mock_gateway):
        """No connection on the first load shows an Error state."""
        mock_gateway.list_articles.side_effect = TransportError("Connection refused")

        listing.start()

        assert listing.state.value.is_error
        assert listing.state.value.message == "No internet connection"
        assert listing.items == []

    def test_first_load_server_message(self, listing, mock_gateway):
        """A rejected first load shows the server's message."""
        mock_gateway.list_articles.side_effect = [ApiResponse(status=False, message="Database offline")]

        listing.start()

        assert listing.state.value.message == "Database offline"

    def test_first_load_failure_without_message(self, listing, mock_gateway):
        mock_gateway.list_articles.side_effect = [ApiResponse(status=False)]

        listing.start()

        assert listing.state.value.message == "Failed to load articles"

    def test_first_load_gateway_error(self, listing, mock_gateway):
        mock_gateway.list_articles.side_effect = GatewayError("HTTP 502", status_code=502)

        listing.start()

        assert listing.state.value.message == "Failed to load articles (HTTP 502)"

    def test_append_failure_keeps_items(self, listing, mock_gateway, page_factory, capture_logs):
        """A failed append keeps the list on screen and can be retried."""
        mock_gateway.list_articles.side_effect = [
            ApiResponse(status=True, data=page_factory(1, 20)),
            TransportError("timeout"),
            ApiResponse(status=True, data=page_factory(21, 3)),
        ]
        listing.start()

        listing.load_articles()

        assert listing.state.value.is_success
        assert len(listing.items) == 20
        assert listing.listing.page == 2
        assert listing.last_error == "No internet connection"
        assert any("Loading more articles failed" in r.getMessage() for r in capture_logs)

        listing.load_articles()

        assert len(listing.items) == 23
        assert listing.last_error is None
        assert mock_gateway.list_articles.call_args.kwargs == {'page': 2, 'limit': 20}

    def test_unexpected_error_message(self, listing, mock_gateway):
        mock_gateway.list_articles.side_effect = RuntimeError("boom")

        listing.start()

        assert listing.state.value.message == "Unexpected error: boom"


# =============================================================================
# Protocol Compatibility
# =============================================================================

class TestGatewayDuckTyping:
    """Any object with list_articles works as the gateway."""

    def test_plain_mock(self, page_factory):
        gateway = MagicMock()
        gateway.list_articles.return_value = ApiResponse(status=True, data=page_factory(1, 2))

        listing = ArticleListing(gateway, page_size=2, load_more_threshold=1)
        listing.start()

        assert ids(listing) == [1, 2]
        assert listing.listing.has_more is True
