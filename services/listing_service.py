"""
Listing Service Module

This module drives the home article listing: the first page load, pull to
refresh, and infinite-scroll pagination. It keeps the accumulated articles,
the next page to request, and the flags that stop duplicate or pointless
fetches.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from config import settings
from data.models import Article
from services.protocols import ArticleGateway
from services.ui_state import StateHolder, UiState, failure_message, response_message
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ListingState:
    """Paginated article collection.

    Attributes:
        items: Articles in server page order, identifiers unique.
        page: Next page number to request (starts at 1).
        has_more: False once a short page was received; only a reset revives it.
        is_fetching_more: True while a page request is in flight.
    """
    items: List[Article] = field(default_factory=list)
    page: int = 1
    has_more: bool = True
    is_fetching_more: bool = False


class ArticleListing:
    """Home listing with incremental page loading."""

    def __init__(self, gateway: ArticleGateway, page_size: Optional[int] = None,
                 load_more_threshold: Optional[int] = None):
        """
        Initialize the listing.

        Args:
            gateway: Remote API used to fetch pages.
            page_size: Expected page size. Defaults to settings.ARTICLES_PAGE_SIZE.
            load_more_threshold: Prefetch distance from the end of the list.
                Defaults to settings.LOAD_MORE_THRESHOLD.
        """
        self.gateway = gateway
        self.page_size = page_size if page_size is not None else settings.ARTICLES_PAGE_SIZE
        self.load_more_threshold = (load_more_threshold if load_more_threshold is not None
                                    else settings.LOAD_MORE_THRESHOLD)
        self.listing = ListingState()
        self.state: StateHolder[UiState] = StateHolder(UiState.idle())
        self.last_error: Optional[str] = None

    @property
    def items(self) -> List[Article]:
        return self.listing.items

    def start(self) -> None:
        """First load when the screen is entered."""
        self.load_articles(reset=True)

    def refresh(self) -> None:
        """Drop everything and load page 1 again."""
        self.load_articles(reset=True)

    def load_articles(self, reset: bool = False) -> bool:
        """
        Load the first page (reset) or append the next one.

        Args:
            reset: Start over from page 1, clearing the current items.

        Returns:
            bool: True if a request was issued, False if the call was a no-op
            because the end was reached or a fetch is already in flight.
        """
        listing = self.listing

        if reset:
            listing.page = 1
            listing.has_more = True
            listing.items = []
            self.state.set(UiState.loading())

        if not listing.has_more or (listing.is_fetching_more and not reset):
            logger.debug(f"Skipping page load (has_more={listing.has_more}, "
                         f"in_flight={listing.is_fetching_more})")
            return False

        listing.is_fetching_more = True
        page = listing.page
        try:
            response = self.gateway.list_articles(page=page, limit=self.page_size)

            if not response.status:
                self._fail(reset, response_message(response, settings.MESSAGES["load_articles_failed"]))
                return True

            fetched: List[Article] = list(response.data or [])

            if reset:
                listing.items = self._unique(fetched)
                self.state.set(UiState.success(data=listing.items))
            else:
                self._append(fetched)

            if len(fetched) < self.page_size:
                listing.has_more = False
                logger.info(f"Reached the end of the listing at page {page} ({len(listing.items)} articles)")
            else:
                listing.page = page + 1

            self.last_error = None
            logger.debug(f"Loaded page {page}: {len(fetched)} articles")

        except Exception as e:
            logger.error(f"Error loading articles page {page}: {e}", exc_info=True)
            self._fail(reset, failure_message(e, settings.MESSAGES["load_articles_failed"]))

        finally:
            listing.is_fetching_more = False

        return True

    def should_load_more(self, last_visible_index: int) -> bool:
        """
        Decide whether the scroll position warrants prefetching the next page.

        Args:
            last_visible_index: Index of the last item currently on screen.

        Returns:
            bool: True when within the lookahead threshold of the end, more
            pages exist, and nothing is in flight.
        """
        listing = self.listing
        if not listing.items or not listing.has_more or listing.is_fetching_more:
            return False
        return last_visible_index >= len(listing.items) - self.load_more_threshold

    def on_scrolled(self, last_visible_index: int) -> bool:
        """Scroll callback: fetch the next page when the lookahead trigger fires."""
        if self.should_load_more(last_visible_index):
            return self.load_articles()
        return False

    def _append(self, fetched: List[Article]) -> None:
        """Append in arrival order, skipping identifiers already present."""
        seen = {article.article_id for article in self.listing.items}
        skipped = 0
        for article in fetched:
            if article.article_id in seen:
                skipped += 1
                continue
            seen.add(article.article_id)
            self.listing.items.append(article)

        if skipped:
            logger.debug(f"Skipped {skipped} articles already in the listing")

    @staticmethod
    def _unique(fetched: List[Article]) -> List[Article]:
        seen = set()
        result = []
        for article in fetched:
            if article.article_id not in seen:
                seen.add(article.article_id)
                result.append(article)
        return result

    def _fail(self, reset: bool, message: str) -> None:
        """A failed first load is shown; a failed append keeps the items on screen."""
        self.last_error = message
        if reset:
            self.state.set(UiState.error(message))
        else:
            logger.warning(f"Loading more articles failed: {message}")
