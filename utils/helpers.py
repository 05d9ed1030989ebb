"""
Helper Utility Module

This module provides various helper functions used throughout the Chronicler client.
"""

import os
import base64
from typing import Optional, Any
from datetime import datetime


def is_blank(value: Optional[str]) -> bool:
    """Return True for None, empty, or whitespace-only strings."""
    return value is None or not str(value).strip()


def blank_to_none(value: Optional[str]) -> Optional[str]:
    """Map blank strings to None so partial saves don't overwrite server values."""
    return None if is_blank(value) else value


def truncate_text(text: str, max_length: int = 100, add_ellipsis: bool = True) -> str:
    """
    Truncate text to a maximum length.

    Args:
        text: The text to truncate
        max_length: Maximum length
        add_ellipsis: Whether to add an ellipsis if text is truncated

    Returns:
        str: Truncated text
    """
    if not text or len(text) <= max_length:
        return text

    truncated = text[:max_length].rstrip()
    if add_ellipsis:
        truncated += "..."

    return truncated


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp from the API.

    Returns None for missing or unparseable values instead of raising.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def ensure_dir_exists(directory: str) -> None:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        directory: The directory path to check/create
    """
    if directory and not os.path.exists(directory):
        os.makedirs(directory, exist_ok=True)


def encode_image_file(path: str) -> str:
    """
    Read an image file and return its bytes as a base64 string.

    Args:
        path: Local path of the picked image.

    Returns:
        str: Base64 text as expected by the articles endpoint.

    Raises:
        OSError: If the file cannot be read.
    """
    with open(path, 'rb') as f:
        return base64.b64encode(f.read()).decode('ascii')
