"""
Configuration Validation for the Chronicler Client

This module contains configuration validation logic.
Extracted from settings.py for better separation of concerns.
"""

from urllib.parse import urlparse

from utils.exceptions import ConfigurationError


def validate_settings():
    """
    Validate that all required settings are properly configured.

    Raises:
        ConfigurationError: If required settings are missing or invalid.
    """
    # Import settings here to avoid circular imports
    from config import settings

    errors = []

    # The API base URL must be absolute
    parsed = urlparse(settings.API_BASE_URL or "")
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        errors.append(f"CHRONICLER_API_URL must be an http(s) URL, got {settings.API_BASE_URL!r}")

    if not settings.SESSION_FILE:
        errors.append("CHRONICLER_SESSION_FILE must not be empty")

    # Validate numeric settings are within reasonable bounds
    numeric_validations = [
        ("HTTP_TIMEOUT", settings.HTTP_TIMEOUT, 1, 300),
        ("ARTICLES_PAGE_SIZE", settings.ARTICLES_PAGE_SIZE, 1, 100),
        ("LOAD_MORE_THRESHOLD", settings.LOAD_MORE_THRESHOLD, 0, 100),
    ]

    for name, value, min_val, max_val in numeric_validations:
        if value < min_val or value > max_val:
            errors.append(f"{name} must be between {min_val} and {max_val}, got {value}")

    if settings.LOAD_MORE_THRESHOLD >= settings.ARTICLES_PAGE_SIZE:
        errors.append(
            f"LOAD_MORE_THRESHOLD ({settings.LOAD_MORE_THRESHOLD}) must be smaller than "
            f"ARTICLES_PAGE_SIZE ({settings.ARTICLES_PAGE_SIZE})"
        )

    # Raise all errors at once
    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)

    return True


def get_config_summary() -> dict:
    """
    Returns a summary of current configuration (without sensitive values).
    Useful for logging startup state.
    """
    # Import settings here to avoid circular imports
    from config import settings

    return {
        "api": {
            "base_url": settings.API_BASE_URL,
            "timeout": settings.HTTP_TIMEOUT,
        },
        "session": {
            "file": str(settings.SESSION_FILE),
        },
        "listing": {
            "page_size": settings.ARTICLES_PAGE_SIZE,
            "load_more_threshold": settings.LOAD_MORE_THRESHOLD,
        },
    }
