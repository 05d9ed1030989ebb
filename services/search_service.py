"""
Search Service Module

Type-ahead article search. Each keystroke issues a new query; responses can
come back out of order, so every request carries a generation number and
only the response for the newest generation is published.
"""

from typing import List

from config import settings
from data.models import Category
from services.protocols import ArticleGateway
from services.ui_state import StateHolder, UiState, failure_message, response_message
from utils.helpers import is_blank
from utils.logger import get_logger

logger = get_logger(__name__)


class ArticleSearch:
    """Search screen state: current query, results and category chips."""

    def __init__(self, gateway: ArticleGateway):
        self.gateway = gateway
        self.query = ""
        self.categories: List[Category] = []
        self.state: StateHolder[UiState] = StateHolder(UiState.idle())
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def load_categories(self) -> List[Category]:
        """Fetch categories for the filter chips. Failures leave the list empty."""
        try:
            response = self.gateway.list_categories()
            if response.status:
                self.categories = list(response.data or [])
        except Exception as e:
            logger.warning(f"Could not load categories for search: {e}")
        return self.categories

    def update_query(self, query: str) -> None:
        """
        Record the new query text and search for it.

        A blank query returns to Idle and invalidates any search still in flight.
        """
        self.query = query
        self._generation += 1
        generation = self._generation

        if is_blank(query):
            self.state.set(UiState.idle())
            return

        self._perform_search(query, generation)

    def _perform_search(self, query: str, generation: int) -> None:
        self.state.set(UiState.loading())
        try:
            response = self.gateway.list_articles(query=query)
            if response.status:
                result = UiState.success(data=list(response.data or []))
            else:
                result = UiState.error(response_message(response, settings.MESSAGES["search_failed"]))
        except Exception as e:
            logger.error(f"Error searching for '{query}': {e}")
            result = UiState.error(failure_message(e, settings.MESSAGES["search_failed"]))

        if generation != self._generation:
            logger.debug(f"Discarded stale search result for '{query}' "
                         f"(generation {generation}, current {self._generation})")
            return

        self.state.set(result)
