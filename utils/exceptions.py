"""
Custom Exception Classes for the Chronicler Client

This module defines custom exceptions for better error handling and
categorization of failures across the application.
"""

from typing import Optional


class ChroniclerError(Exception):
    """Base exception for all Chronicler client errors."""
    pass


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(ChroniclerError):
    """Raised when configuration validation fails or required settings are missing."""
    pass


# =============================================================================
# Local State Errors
# =============================================================================

class StorageError(ChroniclerError):
    """Raised when the session file cannot be written or removed."""
    pass


class DraftStateError(ChroniclerError):
    """Raised when a draft is used out of order (e.g. hydrated twice)."""
    pass


class ValidationError(ChroniclerError):
    """Raised when a form fails client-side validation. Never sent to the API."""
    pass


# =============================================================================
# Remote API Errors
# =============================================================================

class RemoteError(ChroniclerError):
    """Base exception for failures talking to the remote API."""
    pass


class TransportError(RemoteError):
    """Raised when the API cannot be reached (no connectivity, timeout)."""
    pass


class GatewayError(RemoteError):
    """Raised when the API answers with an error that carries no usable body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
