"""
Data Layer Protocol Definitions

This module defines typing.Protocol interfaces for local persistence.
These protocols enable dependency injection for the session store,
making services testable without touching the filesystem.

Protocols defined:
- SessionStorage: Interface for persisting the logged-in user's identifier
"""

from typing import Protocol, Iterator


class SessionStorage(Protocol):
    """Protocol defining the interface for session persistence.

    Implementations should provide methods for:
    - Saving the numeric identifier of the logged-in user
    - Reading it back as a lazy, restartable stream
    - Clearing it on logout or account deletion

    A missing session is always reported as the sentinel -1.
    """

    def save(self, user_id: int) -> None:
        """Persist the user identifier.

        Args:
            user_id: Identifier returned by the login endpoint.

        Raises:
            StorageError: If the underlying medium cannot be written.
        """
        ...

    def current_user_id(self) -> Iterator[int]:
        """Stream the persisted identifier.

        Returns:
            An iterator that re-reads the stored value on every pull,
            yielding -1 when there is no session.
        """
        ...

    def get_user_id(self) -> int:
        """Return the current identifier, or -1 when logged out."""
        ...

    def clear(self) -> None:
        """Reset the session to the -1 sentinel."""
        ...
