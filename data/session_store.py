"""
Session Store Module for the Chronicler Client

This module persists the logged-in user's numeric identifier in a small
text file. It is the only process-wide shared state in the client: many
services read it, while login, logout and account deletion write it.
"""

import os
import tempfile
from typing import Iterator, Optional

from config import settings
from utils.exceptions import StorageError
from utils.helpers import ensure_dir_exists
from utils.logger import get_logger

logger = get_logger(__name__)


class SessionStore:
    """File-backed session storage for the current user id."""

    def __init__(self, session_file: Optional[str] = None):
        """
        Initialize the session store.

        Args:
            session_file: Path of the session file. Defaults to settings.SESSION_FILE.
        """
        self.session_file = str(session_file or settings.SESSION_FILE)
        self.no_session = settings.NO_SESSION_USER_ID

    def save(self, user_id: int) -> None:
        """
        Persist the user identifier.

        The value is written to a temp file in the same directory and renamed
        over the session file, so readers never see a half-written value.

        Args:
            user_id: The identifier to persist.

        Raises:
            StorageError: If the file cannot be written.
        """
        directory = os.path.dirname(os.path.abspath(self.session_file))
        tmp_path = None
        try:
            ensure_dir_exists(directory)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".session-")
            with os.fdopen(fd, 'w') as f:
                f.write(f"{int(user_id)}\n")
            os.replace(tmp_path, self.session_file)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError as cleanup_error:
                    logger.warning(f"Could not remove temp session file {tmp_path}: {cleanup_error}")
            logger.error(f"Error writing session file {self.session_file}: {e}")
            raise StorageError(f"Could not save session: {e}") from e

        logger.info(f"Saved session for user {user_id}")

    def _read(self) -> int:
        """Read the persisted id, falling back to the sentinel."""
        if not os.path.exists(self.session_file):
            return self.no_session

        try:
            with open(self.session_file, 'r') as f:
                raw = f.read().strip()
        except OSError as e:
            logger.error(f"Error reading session file {self.session_file}: {e}")
            return self.no_session

        if not raw:
            return self.no_session

        try:
            return int(raw)
        except ValueError:
            logger.warning(f"Ignoring corrupt session file {self.session_file}")
            return self.no_session

    def current_user_id(self) -> Iterator[int]:
        """
        Stream the persisted user id.

        Every pull re-reads the file, so a consumer holding the iterator sees
        saves and clears made after it started. Calling this again starts a
        fresh stream.

        Yields:
            int: The saved user id, or -1 when there is no session.
        """
        while True:
            yield self._read()

    def get_user_id(self) -> int:
        """Return the current user id, or -1 when logged out."""
        return next(self.current_user_id())

    def is_logged_in(self) -> bool:
        """Return True when a session is stored."""
        return self.get_user_id() != self.no_session

    def clear(self) -> None:
        """
        Reset the session to the sentinel.

        Raises:
            StorageError: If the session file exists but cannot be removed.
        """
        try:
            if os.path.exists(self.session_file):
                os.remove(self.session_file)
        except OSError as e:
            logger.error(f"Error clearing session file {self.session_file}: {e}")
            raise StorageError(f"Could not clear session: {e}") from e

        logger.info("Session cleared")
