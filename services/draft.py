"""
Article Draft Module

In-progress article state for the insert and edit flows. The draft holds the
editable fields, the images already on the server, the server images the
author removed (sent as a deletion list on submit), and the newly picked
images with their captions.

A baseline of title, content, tags and category id is recorded when the
draft is created or hydrated; has_changes() compares against it to decide
whether leaving the screen needs a discard prompt.
"""

from typing import Any, Dict, Iterable, List, Optional

from config import settings
from data.models import Article, ArticleStatus, Category, NewImage
from utils.exceptions import DraftStateError, ValidationError
from utils.helpers import is_blank
from utils.logger import get_logger

logger = get_logger(__name__)

EDITABLE_FIELDS = ("title", "content", "tags", "selected_category")


class ArticleDraft:
    """Mutable authoring buffer for one article."""

    def __init__(self):
        self._clear()

    def _clear(self) -> None:
        self.title = ""
        self.content = ""
        self.tags = ""
        self.selected_category: Optional[Category] = None
        self.persisted_images: List[str] = []
        self.pending_deletions: List[str] = []    # Insertion ordered, no duplicates
        self.new_images: List[NewImage] = []
        self._baseline = self._capture()
        self._hydrated = False
        self._mutated = False

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def hydrate(self, article: Article, categories: Iterable[Category] = ()) -> None:
        """
        Load an existing article into the draft for editing.

        The category is matched by id, then by name, among the known
        categories; if neither matches, one is built from the article.

        Args:
            article: The article fetched from the API.
            categories: Categories known to the screen.

        Raises:
            DraftStateError: If the draft was already hydrated or edited.
        """
        if self._hydrated:
            raise DraftStateError("Draft has already been hydrated")
        if self._mutated:
            raise DraftStateError("Cannot hydrate a draft that has already been edited")

        categories = list(categories)
        category = next((c for c in categories if c.category_id == article.category_id), None)
        if category is None and article.category_name:
            category = next((c for c in categories if c.category_name == article.category_name), None)
        if category is None and article.category_id:
            category = Category(article.category_id, article.category_name)

        self.title = article.title or ""
        self.content = article.content or ""
        self.tags = article.tags or ""
        self.selected_category = category
        self.persisted_images = list(article.images)
        self.pending_deletions = []
        self.new_images = []
        self._baseline = self._capture()
        self._hydrated = True
        logger.debug(f"Hydrated draft from article {article.article_id} "
                     f"({len(self.persisted_images)} images)")

    def reset(self) -> None:
        """Return to a fresh, empty draft."""
        self._clear()

    # -------------------------------------------------------------------------
    # Field and image edits
    # -------------------------------------------------------------------------

    def update_field(self, name: str, value: Any) -> None:
        """
        Set one editable field. Validation is deferred to submit.

        Raises:
            ValueError: If name is not an editable field.
        """
        if name not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown draft field: {name}")
        setattr(self, name, value)
        self._mutated = True

    def remove_persisted_image(self, ref: str) -> None:
        """Queue a server image for deletion. No-op if it isn't attached."""
        if ref not in self.persisted_images:
            return
        self.persisted_images = [image for image in self.persisted_images if image != ref]
        if ref not in self.pending_deletions:
            self.pending_deletions.append(ref)
        self._mutated = True

    def add_new_images(self, handles: Iterable[str]) -> None:
        """Stage picked images. The same file may be picked more than once."""
        for handle in handles:
            self.new_images.append(NewImage(handle=handle))
        self._mutated = True

    def _find_new_image(self, handle: str, index: Optional[int]) -> Optional[int]:
        """Position of the targeted staged image, or None."""
        if index is not None:
            if 0 <= index < len(self.new_images) and self.new_images[index].handle == handle:
                return index
            return None
        for position, image in enumerate(self.new_images):
            if image.handle == handle:
                return position
        return None

    def remove_new_image(self, handle: str, index: Optional[int] = None) -> None:
        """
        Unstage a picked image. No-op if absent.

        Args:
            handle: File path of the staged image.
            index: Position in new_images. Needed to pick one of several
                copies of the same file; without it the first match is used.
        """
        position = self._find_new_image(handle, index)
        if position is not None:
            del self.new_images[position]
            self._mutated = True

    def set_caption(self, handle: str, caption: str, index: Optional[int] = None) -> None:
        """Caption a staged image. index selects among copies, as in remove_new_image()."""
        position = self._find_new_image(handle, index)
        if position is not None:
            self.new_images[position].caption = caption
            self._mutated = True

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def category_id(self) -> Optional[int]:
        return self.selected_category.category_id if self.selected_category else None

    @property
    def total_images(self) -> int:
        return len(self.persisted_images) + len(self.new_images)

    def has_changes(self) -> bool:
        """True if any tracked field moved off the baseline or images were staged or removed."""
        return (self._capture() != self._baseline
                or bool(self.new_images)
                or bool(self.pending_deletions))

    def validation_error(self, status: ArticleStatus) -> Optional[str]:
        """
        Check the draft against the rules for the target status.

        Drafts only need a title. Publishing also needs a category and content.

        Returns:
            The user-facing message for the first failed rule, or None.
        """
        if is_blank(self.title):
            return settings.MESSAGES["title_required"]

        if status is ArticleStatus.PUBLISHED:
            missing_category = self.selected_category is None
            missing_content = is_blank(self.content)
            if missing_category and missing_content:
                return settings.MESSAGES["publish_requirements"]
            if missing_category:
                return settings.MESSAGES["category_required"]
            if missing_content:
                return settings.MESSAGES["content_required"]

        return None

    def validate(self, status: ArticleStatus) -> None:
        """
        Raises:
            ValidationError: With the message for the first failed rule.
        """
        error = self.validation_error(status)
        if error:
            raise ValidationError(error)

    def is_complete(self, status: ArticleStatus) -> bool:
        return self.validation_error(status) is None

    def _capture(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "tags": self.tags or "",
            "category_id": self.category_id,
        }
