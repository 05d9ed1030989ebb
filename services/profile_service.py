"""
Profile Service Module

This module covers the profile screen (the user and their articles), the
edit-profile form with its unsaved-changes check, and account deletion.
"""

from dataclasses import dataclass, field
from typing import Optional

from config import settings
from data.models import User, UserUpdatePayload
from data.protocols import SessionStorage
from services.article_service import ArticleService
from services.protocols import ArticleGateway
from services.ui_state import StateHolder, UiState, failure_message, response_message
from utils.helpers import is_blank
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ProfileDraft:
    """Edit-profile form state with the values it was loaded with."""
    full_name: str = ""
    email: str = ""
    bio: str = ""
    password: str = ""
    _baseline: tuple = field(default=("", "", ""), repr=False)

    @classmethod
    def from_user(cls, user: User) -> "ProfileDraft":
        bio = user.bio or ""
        return cls(full_name=user.full_name, email=user.email, bio=bio,
                   _baseline=(user.full_name, user.email, bio))

    def has_changes(self) -> bool:
        """True if a field differs from the loaded values or a new password was typed."""
        return (self.full_name, self.email, self.bio) != self._baseline or bool(self.password)

    def to_payload(self) -> UserUpdatePayload:
        return UserUpdatePayload(
            full_name=self.full_name,
            email=self.email,
            bio=self.bio,
            password=self.password or None,
        )


@dataclass
class ProfileData:
    """Payload of a successful profile load."""
    user: User
    articles: list


class ProfileService:
    """Service for the logged-in user's profile."""

    def __init__(self, gateway: ArticleGateway, session: SessionStorage,
                 article_service: Optional[ArticleService] = None):
        self.gateway = gateway
        self.session = session
        self.article_service = article_service or ArticleService(gateway)
        self.state: StateHolder[UiState] = StateHolder(UiState.loading())
        self.edit_state: StateHolder[UiState] = StateHolder(UiState.idle())
        self.delete_message: Optional[str] = None

    def _user_id(self) -> Optional[int]:
        user_id = self.session.get_user_id()
        return None if user_id == settings.NO_SESSION_USER_ID else user_id

    def load_profile(self) -> UiState:
        """
        Load the user and all of their articles, drafts included.

        Returns:
            UiState: Success with ProfileData, or Error.
        """
        self.state.set(UiState.loading())
        user_id = self._user_id()
        if user_id is None:
            self.state.set(UiState.error(settings.MESSAGES["session_expired"]))
            return self.state.value

        try:
            user_response = self.gateway.get_user(user_id)
            articles_response = self.gateway.list_user_articles(user_id)

            if user_response.status and user_response.data is not None and articles_response.status:
                self.state.set(UiState.success(data=ProfileData(
                    user=user_response.data,
                    articles=list(articles_response.data or []),
                )))
            else:
                self.state.set(UiState.error(settings.MESSAGES["load_profile_failed"]))
        except Exception as e:
            logger.error(f"Error loading profile for user {user_id}: {e}")
            self.state.set(UiState.error(failure_message(e, settings.MESSAGES["load_profile_failed"])))

        return self.state.value

    def delete_article(self, article_id: int) -> bool:
        """Delete one of the user's articles and refresh the profile on success."""
        ok, message = self.article_service.delete_article(article_id)
        self.delete_message = message
        if ok:
            self.load_profile()
        return ok

    def message_shown(self) -> None:
        self.delete_message = None

    def begin_edit(self) -> Optional[ProfileDraft]:
        """
        Load the current user into an edit form.

        Returns:
            ProfileDraft, or None if there is no session or the user could not be loaded.
        """
        user_id = self._user_id()
        if user_id is None:
            return None
        try:
            response = self.gateway.get_user(user_id)
            if response.status and response.data is not None:
                return ProfileDraft.from_user(response.data)
            logger.warning(f"Could not load user {user_id} for editing: {response.message}")
        except Exception as e:
            logger.error(f"Error loading user {user_id} for editing: {e}")
        return None

    def submit_update(self, draft: ProfileDraft) -> UiState:
        """Validate and send the edit-profile form."""
        if is_blank(draft.full_name) or is_blank(draft.email):
            self.edit_state.set(UiState.error(settings.MESSAGES["profile_fields_required"]))
            return self.edit_state.value

        user_id = self._user_id()
        if user_id is None:
            self.edit_state.set(UiState.error(settings.MESSAGES["session_expired"]))
            return self.edit_state.value

        self.edit_state.set(UiState.loading())
        try:
            response = self.gateway.update_user(user_id, draft.to_payload())
            if response.status:
                logger.info(f"Updated profile for user {user_id}")
                self.edit_state.set(UiState.success(message=response.message))
            else:
                self.edit_state.set(UiState.error(
                    response_message(response, settings.MESSAGES["update_profile_failed"])))
        except Exception as e:
            logger.error(f"Error updating profile for user {user_id}: {e}")
            self.edit_state.set(UiState.error(failure_message(e, settings.MESSAGES["update_profile_failed"])))

        return self.edit_state.value

    def delete_account(self) -> UiState:
        """Delete the account and, on success, end the local session."""
        user_id = self._user_id()
        if user_id is None:
            self.edit_state.set(UiState.error(settings.MESSAGES["session_expired"]))
            return self.edit_state.value

        self.edit_state.set(UiState.loading())
        try:
            response = self.gateway.delete_user(user_id)
            if response.status:
                self.session.clear()
                logger.info(f"Deleted account {user_id}")
                self.edit_state.set(UiState.deleted())
            else:
                self.edit_state.set(UiState.error(
                    response_message(response, settings.MESSAGES["delete_account_failed"])))
        except Exception as e:
            logger.error(f"Error deleting account {user_id}: {e}")
            self.edit_state.set(UiState.error(failure_message(e, settings.MESSAGES["delete_account_failed"])))

        return self.edit_state.value
