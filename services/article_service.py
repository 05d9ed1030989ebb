"""
Article Service Module

This module handles single-article operations: loading categories for the
authoring forms, the article detail screen, preparing an edit draft, and
deleting an article.
"""

from typing import List, Optional, Tuple

from config import settings
from data.models import Article, Category
from services.draft import ArticleDraft
from services.protocols import ArticleGateway
from services.ui_state import StateHolder, UiState, failure_message, response_message
from utils.logger import get_logger

logger = get_logger(__name__)


class ArticleService:
    """Service for fetching, editing and deleting individual articles."""

    def __init__(self, gateway: ArticleGateway):
        """Initialize the article service."""
        self.gateway = gateway
        self.categories: List[Category] = []
        self.detail_state: StateHolder[UiState] = StateHolder(UiState.loading())

    def load_categories(self) -> List[Category]:
        """
        Fetch the category list for the authoring forms.

        Failures are logged and leave the previous list in place; the form
        still works, the author just cannot pick a category yet.

        Returns:
            List[Category]: The known categories.
        """
        try:
            response = self.gateway.list_categories()
            if response.status:
                self.categories = list(response.data or [])
                logger.info(f"Loaded {len(self.categories)} categories")
            else:
                logger.warning(f"Could not load categories: {response.message}")
        except Exception as e:
            logger.error(f"Error loading categories: {e}")
        return self.categories

    def find_category(self, value: str) -> Optional[Category]:
        """Look up a category by id or (case-insensitive) name."""
        for category in self.categories:
            if str(category.category_id) == str(value):
                return category
            if category.category_name.lower() == str(value).lower():
                return category
        return None

    def load_detail(self, article_id: int) -> UiState:
        """
        Load one article for the detail screen.

        Args:
            article_id: The article to show.

        Returns:
            UiState: Success with the Article as data, or Error.
        """
        self.detail_state.set(UiState.loading())
        try:
            response = self.gateway.get_article(article_id)
            if response.status and response.data is not None:
                self.detail_state.set(UiState.success(data=response.data))
            else:
                self.detail_state.set(UiState.error(
                    response_message(response, settings.MESSAGES["load_detail_failed"])))
        except Exception as e:
            logger.error(f"Error loading article {article_id}: {e}")
            self.detail_state.set(UiState.error(failure_message(e, settings.MESSAGES["load_detail_failed"])))

        return self.detail_state.value

    def begin_edit(self, article_id: int) -> Tuple[Optional[ArticleDraft], UiState]:
        """
        Prepare an edit draft for an existing article.

        Categories are loaded first so the article's category can be matched
        against them during hydration.

        Returns:
            Tuple of (draft, state). The draft is None when the article could
            not be loaded; state then carries the error.
        """
        if not self.categories:
            self.load_categories()

        state = self.load_detail(article_id)
        if not state.is_success:
            return None, state

        article: Article = state.data
        draft = ArticleDraft()
        draft.hydrate(article, self.categories)
        return draft, state

    def delete_article(self, article_id: int) -> Tuple[bool, str]:
        """
        Delete an article.

        Returns:
            Tuple of (success, message to show the user).
        """
        try:
            response = self.gateway.delete_article(article_id)
            if response.status:
                return True, settings.MESSAGES["article_deleted"]
            if response.message:
                return False, f"{settings.MESSAGES['delete_article_failed']}: {response.message}"
            return False, settings.MESSAGES["delete_article_failed"]
        except Exception as e:
            logger.error(f"Error deleting article {article_id}: {e}")
            return False, failure_message(e, settings.MESSAGES["delete_article_failed"])
