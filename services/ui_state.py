"""
UI State Module

This module defines the tagged UI state shared by every service
(Idle | Loading | Success | Error, plus Deleted for account removal) and a
small publish/subscribe holder that front ends bind to.

Readers either poll StateHolder.value or subscribe for changes; the last
write always wins.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, List, Optional, TypeVar

from config import settings
from data.models import ApiResponse
from utils.exceptions import GatewayError, TransportError
from utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class Phase(str, Enum):
    """Which variant a UiState is."""
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"
    DELETED = "deleted"


@dataclass(frozen=True)
class UiState:
    """A UI-facing state with an optional payload or error message."""
    phase: Phase
    message: Optional[str] = None
    data: Any = None

    @classmethod
    def idle(cls) -> "UiState":
        return cls(Phase.IDLE)

    @classmethod
    def loading(cls) -> "UiState":
        return cls(Phase.LOADING)

    @classmethod
    def success(cls, data: Any = None, message: Optional[str] = None) -> "UiState":
        return cls(Phase.SUCCESS, message=message, data=data)

    @classmethod
    def error(cls, message: str) -> "UiState":
        return cls(Phase.ERROR, message=message)

    @classmethod
    def deleted(cls) -> "UiState":
        return cls(Phase.DELETED)

    @property
    def is_idle(self) -> bool:
        return self.phase is Phase.IDLE

    @property
    def is_loading(self) -> bool:
        return self.phase is Phase.LOADING

    @property
    def is_success(self) -> bool:
        return self.phase is Phase.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.phase is Phase.ERROR


class StateHolder(Generic[T]):
    """Holds a value and notifies subscribers whenever it is replaced."""

    def __init__(self, initial: T):
        self._value = initial
        self._subscribers: List[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        """Replace the value and notify subscribers in subscription order."""
        self._value = value
        for callback in list(self._subscribers):
            try:
                callback(value)
            except Exception as e:
                logger.error(f"State subscriber {callback!r} failed: {e}", exc_info=True)

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """
        Register a change callback.

        Returns:
            A function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe


def failure_message(error: Exception, fallback: str) -> str:
    """
    Convert an exception raised at a service boundary into a user-facing message.

    Args:
        error: The exception caught by the service.
        fallback: Message used when the API gave nothing better.

    Returns:
        str: A message suitable for UiState.error().
    """
    if isinstance(error, TransportError):
        return settings.MESSAGES["no_connection"]
    if isinstance(error, GatewayError):
        return f"{fallback} ({error})"
    return f"{settings.MESSAGES['unexpected']}: {str(error) or type(error).__name__}"


def response_message(response: ApiResponse, fallback: str) -> str:
    """Return the server's message for a failed response, or the fallback."""
    return response.message or fallback
