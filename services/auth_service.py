"""
Auth Service Module

This module handles login, registration and logout. A successful login
stores the user's id in the session store; logout clears it and drops the
bearer token held by the gateway.
"""

from config import settings
from data.models import User
from data.protocols import SessionStorage
from services.protocols import AuthGateway
from services.ui_state import StateHolder, UiState, failure_message, response_message
from utils.exceptions import GatewayError
from utils.helpers import is_blank
from utils.logger import get_logger

logger = get_logger(__name__)


class AuthService:
    """Service for authenticating against the remote API."""

    def __init__(self, gateway: AuthGateway, session: SessionStorage):
        self.gateway = gateway
        self.session = session
        self.state: StateHolder[UiState] = StateHolder(UiState.idle())

    @staticmethod
    def _login_error_for_code(status_code) -> str:
        if status_code == 401:
            return settings.MESSAGES["login_bad_credentials"]
        if status_code == 404:
            return settings.MESSAGES["login_not_found"]
        if status_code is None:
            return settings.MESSAGES["login_failed"]
        return f"{settings.MESSAGES['login_failed']} (code {status_code})"

    def login(self, email: str, password: str) -> UiState:
        """
        Log in and persist the user's id.

        Args:
            email: Account email.
            password: Account password.

        Returns:
            UiState: Success with the User as data, or Error.
        """
        if is_blank(email) or is_blank(password):
            self.state.set(UiState.error(settings.MESSAGES["login_fields_required"]))
            return self.state.value

        self.state.set(UiState.loading())
        try:
            response = self.gateway.login(email.strip(), password)

            if response.status and isinstance(response.data, User):
                self.session.save(response.data.user_id)
                logger.info(f"Logged in as user {response.data.user_id}")
                self.state.set(UiState.success(data=response.data, message=response.message))
            elif response.status:
                logger.error("Login response did not include the user")
                self.state.set(UiState.error(settings.MESSAGES["login_failed"]))
            elif (response.http_status or 0) >= 400:
                logger.warning(f"Login rejected with HTTP {response.http_status}")
                self.state.set(UiState.error(self._login_error_for_code(response.http_status)))
            else:
                self.state.set(UiState.error(response_message(response, settings.MESSAGES["login_failed"])))

        except GatewayError as e:
            logger.warning(f"Login failed: {e}")
            self.state.set(UiState.error(self._login_error_for_code(e.status_code)))
        except Exception as e:
            logger.error(f"Error during login: {e}", exc_info=True)
            self.state.set(UiState.error(failure_message(e, settings.MESSAGES["login_failed"])))

        return self.state.value

    def register(self, full_name: str, email: str, password: str) -> UiState:
        """
        Create an account. The user still has to log in afterwards.

        Returns:
            UiState: Success with the server message, or Error.
        """
        if is_blank(full_name) or is_blank(email) or is_blank(password):
            self.state.set(UiState.error(settings.MESSAGES["register_fields_required"]))
            return self.state.value

        self.state.set(UiState.loading())
        try:
            response = self.gateway.register(full_name.strip(), email.strip(), password)
            if response.status:
                logger.info(f"Registered account for {email}")
                self.state.set(UiState.success(data=response.data, message=response.message))
            else:
                self.state.set(UiState.error(response_message(response, settings.MESSAGES["register_failed"])))
        except Exception as e:
            logger.error(f"Error during registration: {e}")
            self.state.set(UiState.error(failure_message(e, settings.MESSAGES["register_failed"])))

        return self.state.value

    def logout(self) -> None:
        """
        Clear the local session and token.

        Raises:
            StorageError: If the session file cannot be removed.
        """
        self.gateway.clear_token()
        self.session.clear()
        self.state.set(UiState.idle())
        logger.info("Logged out")

    def reset(self) -> None:
        self.state.set(UiState.idle())
