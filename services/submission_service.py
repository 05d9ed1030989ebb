"""
Submission Service Module

This module turns an ArticleDraft into a create or update request. It
validates the draft for the target status, encodes the staged images,
attaches the deletion list, calls the API, and publishes the outcome as a
UiState.
"""

from typing import Optional, Union

from config import settings
from data.models import ArticlePayload, ArticleStatus
from data.protocols import SessionStorage
from services.draft import ArticleDraft
from services.protocols import ArticleGateway, ImageEncoder
from services.ui_state import StateHolder, UiState, failure_message, response_message
from utils.exceptions import ValidationError
from utils.helpers import blank_to_none, encode_image_file
from utils.logger import get_logger

logger = get_logger(__name__)


class SubmissionService:
    """Insert and edit submission for the authoring screens."""

    def __init__(self, gateway: ArticleGateway, session: SessionStorage,
                 encoder: Optional[ImageEncoder] = None):
        """
        Initialize the submission service.

        Args:
            gateway: Remote API used to create and update articles.
            session: Session store; inserts are attributed to its user.
            encoder: Image codec. Defaults to base64 of the file bytes.
        """
        self.gateway = gateway
        self.session = session
        self.encoder = encoder or encode_image_file
        self.state: StateHolder[UiState] = StateHolder(UiState.idle())

    def submit(self, draft: ArticleDraft, target_status: Union[ArticleStatus, str],
               article_id: Optional[int] = None) -> UiState:
        """
        Validate and send a draft.

        Args:
            draft: The authoring buffer to submit.
            target_status: Draft or Published. Anything else ends in Error.
            article_id: Existing article to update; None inserts a new one.

        Returns:
            UiState: The resulting state (also published on self.state).
        """
        if self.state.value.is_loading:
            logger.warning("Submit ignored: a submission is already in progress")
            return self.state.value

        try:
            status = ArticleStatus(target_status)
        except ValueError:
            logger.error(f"Submit rejected: unknown article status {target_status!r}")
            self.state.set(UiState.error(f"{settings.MESSAGES['invalid_status']}: {target_status}"))
            return self.state.value

        try:
            draft.validate(status)
        except ValidationError as e:
            logger.info(f"Draft failed validation for {status.value}: {e}")
            self.state.set(UiState.error(str(e)))
            return self.state.value

        user_id = None
        if article_id is None:
            user_id = self.session.get_user_id()
            if user_id == settings.NO_SESSION_USER_ID:
                self.state.set(UiState.error(settings.MESSAGES["session_expired"]))
                return self.state.value

        self.state.set(UiState.loading())
        try:
            payload = self.build_payload(draft, status, user_id=user_id)
            if article_id is None:
                response = self.gateway.create_article(payload)
            else:
                response = self.gateway.update_article(article_id, payload)

            if response.status:
                logger.info(f"Saved article '{payload.title}' as {status.value}")
                self.state.set(UiState.success(message=response.message))
                draft.reset()
            else:
                message = response_message(response, settings.MESSAGES["save_article_failed"])
                logger.warning(f"API rejected article '{payload.title}': {message}")
                self.state.set(UiState.error(message))

        except Exception as e:
            logger.error(f"Error submitting article '{draft.title}': {e}", exc_info=True)
            self.state.set(UiState.error(failure_message(e, settings.MESSAGES["save_article_failed"])))

        return self.state.value

    def build_payload(self, draft: ArticleDraft, status: ArticleStatus,
                      user_id: Optional[int] = None) -> ArticlePayload:
        """
        Build the wire request for a draft.

        Blank content, blank tags and a missing category are sent as null, so
        a partial draft save doesn't overwrite values already on the server.
        Images that fail to encode are skipped.
        """
        images = []
        captions = []
        for image in draft.new_images:
            try:
                images.append(self.encoder(image.handle))
                captions.append(image.caption)
            except Exception as e:
                logger.warning(f"Skipping image {image.handle}: {e}")

        return ArticlePayload(
            title=draft.title,
            status=status,
            content=blank_to_none(draft.content),
            category_id=draft.category_id,
            user_id=user_id,
            tags=blank_to_none(draft.tags),
            images=images,
            captions=captions,
            deleted_images=list(draft.pending_deletions) or None,
        )

    def reset(self) -> None:
        """Back to Idle, e.g. after the confirmation was shown."""
        self.state.set(UiState.idle())
